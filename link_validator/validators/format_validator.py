"""Format Validator — asserts well-known string formats using pydantic types.

Date, time and UUID strings must first have their RFC 3339 / RFC 4122 text
shape. Pydantic's parsers are lenient (Unix timestamps, missing offsets,
undashed hex), so they only run on strings that already look right.
"""

import re
from datetime import date, time
from ipaddress import IPv4Address, IPv6Address
from typing import Any
from uuid import UUID

from pydantic import AnyUrl, AwareDatetime, EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from link_validator.schema.models import CompiledSchema, PathSegment, SchemaNode
from link_validator.validators.base import BaseValidator, describe
from link_validator.validators.models import ErrorCode, ValidationError

_OFFSET = r"(Z|[+-]\d{2}:\d{2})"
_PARTIAL_TIME = r"\d{2}:\d{2}:\d{2}(\.\d+)?"

# format name → required text shape, checked with fullmatch
FORMAT_SHAPES: dict[str, re.Pattern] = {
    "date-time": re.compile(rf"\d{{4}}-\d{{2}}-\d{{2}}T{_PARTIAL_TIME}{_OFFSET}"),
    "date": re.compile(r"\d{4}-\d{2}-\d{2}"),
    "time": re.compile(rf"{_PARTIAL_TIME}{_OFFSET}"),
    "uuid": re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"),
}

# format name → adapter that accepts the values of that format
FORMAT_ADAPTERS: dict[str, TypeAdapter] = {
    "email": TypeAdapter(EmailStr),
    "uri": TypeAdapter(AnyUrl),
    "date-time": TypeAdapter(AwareDatetime),
    "date": TypeAdapter(date),
    "time": TypeAdapter(time),
    "uuid": TypeAdapter(UUID),
    "ipv4": TypeAdapter(IPv4Address),
    "ipv6": TypeAdapter(IPv6Address),
}


def conforms(format_name: str, value: str) -> bool:
    """Whether ``value`` is a well-formed ``format_name`` string."""
    shape = FORMAT_SHAPES.get(format_name)
    if shape is not None and shape.fullmatch(value) is None:
        return False
    try:
        FORMAT_ADAPTERS[format_name].validate_python(value)
    except PydanticValidationError:
        return False
    return True


class FormatValidator(BaseValidator):
    """Checks the ``format`` keyword on string values. Unknown formats are annotations."""

    @property
    def name(self) -> str:
        return "FormatValidator"

    def applies_to(self, node: SchemaNode, value: Any) -> bool:
        return isinstance(value, str) and node.format in FORMAT_ADAPTERS

    def validate(
        self,
        node: SchemaNode,
        value: Any,
        path: tuple[PathSegment, ...],
        compiled: CompiledSchema,
    ) -> list[ValidationError]:
        if conforms(node.format, value):
            return []
        return [self._error(
            ErrorCode.FORMAT,
            f"{describe(value)} is not a {describe(node.format)}",
            path,
            node,
        )]

"""Enum Validator — membership by JSON structural equality."""

from typing import Any

from link_validator.schema.models import CompiledSchema, PathSegment, SchemaNode
from link_validator.validators.base import BaseValidator, describe, json_equal
from link_validator.validators.models import ErrorCode, ValidationError


class EnumValidator(BaseValidator):
    """Checks that the value equals one of the enumerated candidates."""

    @property
    def name(self) -> str:
        return "EnumValidator"

    def applies_to(self, node: SchemaNode, value: Any) -> bool:
        return node.enum is not None

    def validate(
        self,
        node: SchemaNode,
        value: Any,
        path: tuple[PathSegment, ...],
        compiled: CompiledSchema,
    ) -> list[ValidationError]:
        if any(json_equal(value, candidate) for candidate in node.enum):
            return []
        return [self._error(
            ErrorCode.ENUM,
            f"{describe(value)} is not one of {describe(list(node.enum))}",
            path,
            node,
        )]

"""String Validator — length bounds and regex patterns."""

from typing import Any

from link_validator.schema.models import CompiledSchema, PathSegment, SchemaNode
from link_validator.validators.base import BaseValidator, describe
from link_validator.validators.models import ErrorCode, ValidationError


class StringValidator(BaseValidator):
    """Checks minLength, maxLength and pattern on string values."""

    @property
    def name(self) -> str:
        return "StringValidator"

    def applies_to(self, node: SchemaNode, value: Any) -> bool:
        return isinstance(value, str) and (
            node.min_length is not None or node.max_length is not None or node.pattern is not None
        )

    def validate(
        self,
        node: SchemaNode,
        value: Any,
        path: tuple[PathSegment, ...],
        compiled: CompiledSchema,
    ) -> list[ValidationError]:
        errors = []
        length = len(value)  # Code points, as JSON Schema counts them

        if node.min_length is not None and length < node.min_length:
            errors.append(self._error(
                ErrorCode.MIN_LENGTH,
                f"{describe(value)} is shorter than {describe(node.min_length)} characters",
                path,
                node,
            ))

        if node.max_length is not None and length > node.max_length:
            errors.append(self._error(
                ErrorCode.MAX_LENGTH,
                f"{describe(value)} is longer than {describe(node.max_length)} characters",
                path,
                node,
            ))

        if node.pattern is not None:
            regex = compiled.patterns[node.pattern]
            # Unanchored, as in JSON Schema: anchors must be part of the pattern
            if regex.search(value) is None:
                errors.append(self._error(
                    ErrorCode.PATTERN,
                    f"{describe(value)} does not match {describe(node.pattern)}",
                    path,
                    node,
                ))

        return errors

"""Numeric Validator — inclusive/exclusive bounds and multipleOf."""

import math
from typing import Any

from link_validator.schema.models import CompiledSchema, PathSegment, SchemaNode
from link_validator.validators.base import BaseValidator, describe, is_number
from link_validator.validators.models import ErrorCode, ValidationError


class NumericValidator(BaseValidator):
    """Checks minimum, maximum, exclusiveMinimum, exclusiveMaximum and multipleOf."""

    @property
    def name(self) -> str:
        return "NumericValidator"

    def applies_to(self, node: SchemaNode, value: Any) -> bool:
        return is_number(value) and any(
            bound is not None
            for bound in (
                node.minimum,
                node.maximum,
                node.exclusive_minimum,
                node.exclusive_maximum,
                node.multiple_of,
            )
        )

    def validate(
        self,
        node: SchemaNode,
        value: Any,
        path: tuple[PathSegment, ...],
        compiled: CompiledSchema,
    ) -> list[ValidationError]:
        errors = []
        shown = describe(value)

        if node.minimum is not None and value < node.minimum:
            errors.append(self._error(
                ErrorCode.MINIMUM,
                f"{shown} is less than the minimum of {describe(node.minimum)}",
                path,
                node,
            ))

        if node.maximum is not None and value > node.maximum:
            errors.append(self._error(
                ErrorCode.MAXIMUM,
                f"{shown} is greater than the maximum of {describe(node.maximum)}",
                path,
                node,
            ))

        if node.exclusive_minimum is not None and value <= node.exclusive_minimum:
            errors.append(self._error(
                ErrorCode.EXCLUSIVE_MINIMUM,
                f"{shown} is less than or equal to the minimum of {describe(node.exclusive_minimum)}",
                path,
                node,
            ))

        if node.exclusive_maximum is not None and value >= node.exclusive_maximum:
            errors.append(self._error(
                ErrorCode.EXCLUSIVE_MAXIMUM,
                f"{shown} is greater than or equal to the maximum of {describe(node.exclusive_maximum)}",
                path,
                node,
            ))

        if node.multiple_of is not None and not self._is_multiple(value, node.multiple_of):
            errors.append(self._error(
                ErrorCode.MULTIPLE_OF,
                f"{shown} is not a multiple of {describe(node.multiple_of)}",
                path,
                node,
            ))

        return errors

    def _is_multiple(self, value: float, divisor: float) -> bool:
        if isinstance(value, int) and isinstance(divisor, int):
            return value % divisor == 0
        quotient = value / divisor
        # Float division: 0.3 / 0.1 is 2.9999999999999996
        return math.isclose(quotient, round(quotient), rel_tol=1e-9, abs_tol=1e-9)

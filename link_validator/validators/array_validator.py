"""Array Validator — item-count bounds and uniqueness."""

from typing import Any

from link_validator.schema.models import CompiledSchema, PathSegment, SchemaNode
from link_validator.validators.base import BaseValidator, describe, is_array, json_equal
from link_validator.validators.models import ErrorCode, ValidationError


def _items(count) -> str:
    return "item" if count == 1 else "items"


class ArrayValidator(BaseValidator):
    """Checks minItems, maxItems and uniqueItems. Element schemas are walked by the engine."""

    @property
    def name(self) -> str:
        return "ArrayValidator"

    def applies_to(self, node: SchemaNode, value: Any) -> bool:
        return is_array(value) and (
            node.min_items is not None or node.max_items is not None or node.unique_items
        )

    def validate(
        self,
        node: SchemaNode,
        value: Any,
        path: tuple[PathSegment, ...],
        compiled: CompiledSchema,
    ) -> list[ValidationError]:
        errors = []
        count = len(value)

        if node.min_items is not None and count < node.min_items:
            errors.append(self._error(
                ErrorCode.MIN_ITEMS,
                f"{describe(value)} has less than {describe(node.min_items)} {_items(node.min_items)}",
                path,
                node,
            ))

        if node.max_items is not None and count > node.max_items:
            errors.append(self._error(
                ErrorCode.MAX_ITEMS,
                f"{describe(value)} has more than {describe(node.max_items)} {_items(node.max_items)}",
                path,
                node,
            ))

        if node.unique_items and self._has_duplicates(value):
            errors.append(self._error(
                ErrorCode.UNIQUE_ITEMS,
                f"{describe(value)} has non-unique elements",
                path,
                node,
            ))

        return errors

    def _has_duplicates(self, items) -> bool:
        for i, left in enumerate(items):
            for right in items[i + 1:]:
                if json_equal(left, right):
                    return True
        return False

"""Base validator — the interface every constraint family implements (Strategy Pattern).

Each validator owns one family of constraints and is independently
testable. The engine decides when a node is reached; validators decide
what is wrong with the value found there.
"""

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional

from link_validator.schema.models import CompiledSchema, PathSegment, SchemaNode
from link_validator.validators.models import ErrorCode, ValidationError


class BaseValidator(ABC):
    """Abstract base for all constraint validators.

    Contract:
        - validate() is deterministic: same input → same output
        - validate() keeps no state between calls, so one instance can
          serve concurrent validations
        - validate() returns a list of ValidationError (empty = no issues)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging."""
        ...

    @abstractmethod
    def applies_to(self, node: SchemaNode, value: Any) -> bool:
        """Whether this validator has anything to check for ``value`` at ``node``."""
        ...

    @abstractmethod
    def validate(
        self,
        node: SchemaNode,
        value: Any,
        path: tuple[PathSegment, ...],
        compiled: CompiledSchema,
    ) -> list[ValidationError]:
        """Run this validator's checks on one value.

        Args:
            node: Schema node the value is checked against (type already matched)
            value: The data value at ``path``
            path: Location of the value, root first
            compiled: The compiled schema, for shared artifacts such as regexes

        Returns:
            List of ValidationError findings (empty if no issues)
        """
        ...

    # ── Helper Methods ──

    def _error(
        self,
        code: ErrorCode,
        message: str,
        path: tuple[PathSegment, ...],
        node: Optional[SchemaNode] = None,
    ) -> ValidationError:
        """Create a ValidationError, honoring the node's custom message."""
        if node is not None and node.message is not None:
            message = node.message
        return ValidationError(code=code, message=message, path=path)


def describe(value: Any) -> str:
    """JSON rendering of a value for error messages."""
    return json.dumps(value, ensure_ascii=False, default=repr)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def json_equal(left: Any, right: Any) -> bool:
    """Structural equality under JSON semantics: ``1 == 1.0`` but ``True != 1``."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(json_equal(left[k], right[k]) for k in left)
    if is_array(left) and is_array(right):
        return len(left) == len(right) and all(json_equal(a, b) for a, b in zip(left, right))
    if type(left) is not type(right):
        return False
    return left == right

"""Schema compiler — well-formedness pass over a canonical tree.

Walks every node once, rejects inconsistent constraints, compiles regex
patterns, and wraps the tree with its origin tag in a CompiledSchema.
Deterministic: the same tree always compiles to the same result.
"""

import re
from typing import Optional

import structlog

from link_validator.config import get_settings
from link_validator.schema.errors import CompileError, CompileErrorCode
from link_validator.schema.models import (
    KEYWORDS_BY_TYPE,
    CompiledSchema,
    OriginFormat,
    PathSegment,
    SchemaNode,
)

logger = structlog.get_logger()

# Formats the validation engine asserts; anything else is an annotation
KNOWN_FORMATS = {"email", "uri", "date-time", "date", "time", "uuid", "ipv4", "ipv6"}

# (low, high) keyword pairs that must be ordered when both are present
RANGE_PAIRS = (
    ("minimum", "maximum"),
    ("min_length", "max_length"),
    ("min_items", "max_items"),
)

COUNT_KEYWORDS = ("min_length", "max_length", "min_items", "max_items")


def compile_schema(
    node: SchemaNode,
    origin: OriginFormat,
    strict_required: Optional[bool] = None,
) -> CompiledSchema:
    """Check ``node`` for structural consistency and freeze it for reuse.

    Args:
        node: Root of the canonical schema tree
        origin: Surface syntax the schema was written in
        strict_required: Reject ``required`` names missing from
            ``properties``. Falls back to the STRICT_REQUIRED setting.

    Raises:
        CompileError: if any node is inconsistent
    """
    if strict_required is None:
        strict_required = get_settings().STRICT_REQUIRED

    compiler = _Compiler(strict_required)
    compiler.check(node, ())

    compiled = CompiledSchema(
        root=node,
        origin=origin,
        patterns=compiler.patterns,
    )
    logger.debug("schema_compiled", origin=origin.value, nodes=compiler.node_count)
    return compiled


class _Compiler:
    def __init__(self, strict_required: bool):
        self.strict_required = strict_required
        self.patterns: dict[str, re.Pattern] = {}
        self.node_count = 0

    def check(self, node: SchemaNode, path: tuple[PathSegment, ...]) -> None:
        self.node_count += 1

        self._check_type_constraints(node, path)
        self._check_counts(node, path)
        self._check_ranges(node, path)

        if node.multiple_of is not None and node.multiple_of <= 0:
            raise CompileError(CompileErrorCode.INVALID_BOUND, "multipleOf must be greater than 0", path)

        if node.pattern is not None and node.pattern not in self.patterns:
            try:
                self.patterns[node.pattern] = re.compile(node.pattern)
            except re.error as e:
                raise CompileError(
                    CompileErrorCode.INVALID_PATTERN, f"invalid pattern {node.pattern!r}: {e}", path
                ) from e

        if node.format is not None and node.format not in KNOWN_FORMATS:
            logger.info("format_not_asserted", format=node.format, path="/".join(str(s) for s in path))

        self._check_required(node, path)

        for name, child in node.properties.items():
            self.check(child, path + (name,))
        if node.items is not None:
            self.check(node.items, path + ("items",))

    def _check_type_constraints(self, node: SchemaNode, path: tuple[PathSegment, ...]) -> None:
        if node.type is None:
            return
        allowed = KEYWORDS_BY_TYPE[node.type]
        for keyword in node.populated_keywords():
            if keyword not in allowed:
                raise CompileError(
                    CompileErrorCode.TYPE_CONSTRAINT_MISMATCH,
                    f"'{keyword}' cannot be used on a {node.type.value} node",
                    path,
                )

    def _check_counts(self, node: SchemaNode, path: tuple[PathSegment, ...]) -> None:
        for keyword in COUNT_KEYWORDS:
            value = getattr(node, keyword)
            if value is None:
                continue
            integral = isinstance(value, int) or isinstance(value, float) and value.is_integer()
            if not integral or value < 0:
                raise CompileError(
                    CompileErrorCode.INVALID_BOUND,
                    f"'{keyword}' must be a non-negative integer, got {value!r}",
                    path,
                )

    def _check_ranges(self, node: SchemaNode, path: tuple[PathSegment, ...]) -> None:
        for low_name, high_name in RANGE_PAIRS:
            low, high = getattr(node, low_name), getattr(node, high_name)
            if low is not None and high is not None and low > high:
                raise CompileError(
                    CompileErrorCode.INVALID_RANGE,
                    f"'{low_name}' ({low}) is greater than '{high_name}' ({high})",
                    path,
                )

    def _check_required(self, node: SchemaNode, path: tuple[PathSegment, ...]) -> None:
        for name in node.required:
            if name in node.properties:
                continue
            if self.strict_required:
                raise CompileError(
                    CompileErrorCode.UNKNOWN_REQUIRED,
                    f"required property '{name}' is not declared in properties",
                    path,
                )
            # Still enforced at validate time: the key must be present
            logger.warning("required_not_in_properties", name=name, path="/".join(str(s) for s in path))

"""Validation Engine — walks data against a compiled schema and collects every error.

The engine owns the traversal: type checks, required properties, and descent
into object properties and array elements. Value-level constraints are
delegated to the registered validators.

Usage:
    engine = ValidationEngine()
    result = engine.validate(compiled, data)
    if not result.is_valid:
        print(result.render())
"""

import time
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Optional

import structlog

from link_validator.config import get_settings
from link_validator.schema.models import CompiledSchema, PathSegment, SchemaNode, SchemaType
from link_validator.validators.array_validator import ArrayValidator
from link_validator.validators.base import BaseValidator, describe, is_array, is_number
from link_validator.validators.enum_validator import EnumValidator
from link_validator.validators.format_validator import FormatValidator
from link_validator.validators.models import ErrorCode, ValidationError, ValidationResult
from link_validator.validators.numeric_validator import NumericValidator
from link_validator.validators.string_validator import StringValidator

logger = structlog.get_logger()


def matches_type(schema_type: SchemaType, value: Any) -> bool:
    """Whether ``value``'s runtime kind is ``schema_type``."""
    if schema_type == SchemaType.STRING:
        return isinstance(value, str)
    if schema_type == SchemaType.INTEGER:
        if isinstance(value, float):
            return value.is_integer()
        return isinstance(value, int) and not isinstance(value, bool)
    if schema_type == SchemaType.NUMBER:
        return is_number(value)
    if schema_type == SchemaType.BOOLEAN:
        return isinstance(value, bool)
    if schema_type == SchemaType.ARRAY:
        return is_array(value)
    if schema_type == SchemaType.OBJECT:
        return isinstance(value, Mapping)
    return value is None


class ValidationEngine:
    """Recursive, depth-first validator over a CompiledSchema.

    Design principles:
        - Pure: no state survives between validate() calls
        - Complete: never stops at the first error, one call reports everything
        - Ordered: errors come out depth-first in declared property order
        - Extensible: add validators without modifying the traversal
    """

    def __init__(
        self,
        validators: Optional[list[BaseValidator]] = None,
        assert_formats: Optional[bool] = None,
    ):
        """Initialize with default validators or a custom list.

        Args:
            validators: Optional list of validators. If None, uses all defaults.
            assert_formats: Whether ``format`` is enforced. Falls back to
                the ASSERT_FORMATS setting. Ignored when ``validators`` is given.
        """
        if assert_formats is None:
            assert_formats = get_settings().ASSERT_FORMATS
        self.validators = validators if validators is not None else self._default_validators(assert_formats)

    @staticmethod
    def _default_validators(assert_formats: bool) -> list[BaseValidator]:
        """Create the default validator chain in execution order."""
        validators: list[BaseValidator] = [StringValidator()]
        if assert_formats:
            validators.append(FormatValidator())
        validators.extend([
            NumericValidator(),
            ArrayValidator(),
            EnumValidator(),          # Last: applies to every type
        ])
        return validators

    def validate(self, compiled: CompiledSchema, data: Any) -> ValidationResult:
        """Validate ``data`` against ``compiled`` and collect every violation.

        Args:
            compiled: Output of compile_schema
            data: Already-parsed data instance

        Returns:
            ValidationResult with errors in depth-first, declaration order
        """
        start_time = time.perf_counter()

        errors: list[ValidationError] = []
        self._walk(compiled.root, data, (), compiled, errors)
        result = ValidationResult.build(errors, compiled.origin)

        logger.debug(
            "validation_complete",
            is_valid=result.is_valid,
            total_errors=len(errors),
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return result

    def _walk(
        self,
        node: SchemaNode,
        value: Any,
        path: tuple[PathSegment, ...],
        compiled: CompiledSchema,
        errors: list[ValidationError],
    ) -> None:
        # Each call extends its own path tuple, so siblings never share a buffer
        type_error = self._check_type(node, value, path)
        if type_error is not None:
            errors.append(type_error)
            return

        is_object = isinstance(value, Mapping) and not node.is_callable
        if is_object:
            errors.extend(self._check_required(node, value, path))

        for validator in self.validators:
            if validator.applies_to(node, value):
                errors.extend(validator.validate(node, value, path, compiled))

        if is_object:
            if not node.additional_properties:
                errors.extend(self._check_additional(node, value, path))
            for name, child in node.properties.items():
                if name in value:
                    self._walk(child, value[name], path + (name,), compiled, errors)

        if is_array(value) and node.items is not None:
            for index, item in enumerate(value):
                self._walk(node.items, item, path + (index,), compiled, errors)

    def _check_type(self, node: SchemaNode, value: Any, path: tuple[PathSegment, ...]) -> Optional[ValidationError]:
        if node.is_callable:
            if callable(value):
                return None
            code, message = ErrorCode.CALLABLE, f"{describe(value)} is not a function"
        elif node.type is None or matches_type(node.type, value):
            return None
        else:
            code, message = ErrorCode.TYPE, f"{describe(value)} is not of type {describe(node.type.value)}"

        if node.message is not None:
            message = node.message
        return ValidationError(code=code, message=message, path=path)

    def _check_required(self, node: SchemaNode, value: Mapping, path: tuple[PathSegment, ...]) -> list[ValidationError]:
        errors = []
        for name in node.required:
            if name in value:
                continue
            child = node.properties.get(name)
            message = f"{describe(name)} is a required property"
            if child is not None and child.message is not None:
                message = child.message
            errors.append(ValidationError(code=ErrorCode.REQUIRED, message=message, path=path + (name,)))
        return errors

    def _check_additional(self, node: SchemaNode, value: Mapping, path: tuple[PathSegment, ...]) -> list[ValidationError]:
        return [
            ValidationError(
                code=ErrorCode.ADDITIONAL_PROPERTIES,
                message=f"Additional properties are not allowed ({describe(name)} was unexpected)",
                path=path + (name,),
            )
            for name in value
            if name not in node.properties
        ]


@lru_cache
def get_engine() -> ValidationEngine:
    """Shared engine built from the current settings."""
    return ValidationEngine()


def validate_compiled(compiled: CompiledSchema, data: Any) -> ValidationResult:
    """Validate ``data`` with the shared engine."""
    return get_engine().validate(compiled, data)

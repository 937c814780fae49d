"""Validation layer — walks data against a compiled schema.

Usage:
    from link_validator.validators import validate_compiled

    result = validate_compiled(compiled, data)
    if not result.is_valid:
        errors = result.render()
"""

from link_validator.validators.engine import ValidationEngine, get_engine, validate_compiled
from link_validator.validators.formatter import render_errors
from link_validator.validators.models import ErrorCode, ValidationError, ValidationResult

__all__ = [
    "ValidationEngine",
    "get_engine",
    "validate_compiled",
    "render_errors",
    "ValidationResult",
    "ValidationError",
    "ErrorCode",
]

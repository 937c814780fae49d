"""Error classes raised while turning a raw schema into a compiled one.

- LinkValidatorError: base class for everything the library raises
- ConversionError: rule-syntax input cannot be translated
- CompileError: canonical schema is internally inconsistent
"""

from enum import Enum
from typing import Sequence, Union


class LinkValidatorError(Exception):
    """Base exception for all link_validator errors."""

    def to_dict(self) -> dict:
        return {"error": "schema_error", "message": str(self)}


class ConversionError(LinkValidatorError):
    """Raised when rule-syntax input is structurally malformed."""

    def __init__(self, message: str, field_path: Sequence[Union[str, int]] = ()):
        self.field_path = tuple(field_path)
        if self.field_path:
            message = f"Field '{'/'.join(str(s) for s in self.field_path)}': {message}"
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": "conversion_error",
            "message": str(self),
            "field": "/".join(str(s) for s in self.field_path),
        }


class CompileErrorCode(str, Enum):
    """Reasons a canonical schema fails the well-formedness pass."""

    INVALID_RANGE = "INVALID_RANGE"
    INVALID_BOUND = "INVALID_BOUND"
    UNKNOWN_REQUIRED = "UNKNOWN_REQUIRED"
    INVALID_PATTERN = "INVALID_PATTERN"
    UNSUPPORTED_KEYWORD = "UNSUPPORTED_KEYWORD"
    MALFORMED_SCHEMA = "MALFORMED_SCHEMA"
    TYPE_CONSTRAINT_MISMATCH = "TYPE_CONSTRAINT_MISMATCH"


class CompileError(LinkValidatorError):
    """Raised when a canonical schema cannot be compiled."""

    def __init__(
        self,
        code: CompileErrorCode,
        message: str,
        path: Sequence[Union[str, int]] = (),
    ):
        self.code = code
        self.path = tuple(path)
        location = "/".join(str(s) for s in self.path)
        super().__init__(f"{message} (at '{location}')" if location else message)

    def to_dict(self) -> dict:
        return {
            "error": "compile_error",
            "code": self.code.value,
            "message": str(self),
            "path": "/".join(str(s) for s in self.path),
        }

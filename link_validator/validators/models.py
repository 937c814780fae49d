"""Validation models — error codes, per-field errors, and the result of one validate call."""

from enum import Enum
from typing import Union

from pydantic import BaseModel, Field

from link_validator.schema.models import OriginFormat
from link_validator.validators.formatter import render_errors


class ErrorCode(str, Enum):
    """Which constraint a ValidationError comes from.

    Naming convention: the JSON Schema keyword in upper snake case.
    """

    TYPE = "TYPE"
    CALLABLE = "CALLABLE"
    REQUIRED = "REQUIRED"
    ADDITIONAL_PROPERTIES = "ADDITIONAL_PROPERTIES"

    # Strings
    MIN_LENGTH = "MIN_LENGTH"
    MAX_LENGTH = "MAX_LENGTH"
    PATTERN = "PATTERN"
    FORMAT = "FORMAT"

    # Numbers
    MINIMUM = "MINIMUM"
    MAXIMUM = "MAXIMUM"
    EXCLUSIVE_MINIMUM = "EXCLUSIVE_MINIMUM"
    EXCLUSIVE_MAXIMUM = "EXCLUSIVE_MAXIMUM"
    MULTIPLE_OF = "MULTIPLE_OF"

    # Arrays
    MIN_ITEMS = "MIN_ITEMS"
    MAX_ITEMS = "MAX_ITEMS"
    UNIQUE_ITEMS = "UNIQUE_ITEMS"

    ENUM = "ENUM"


class ValidationError(BaseModel):
    """A single constraint violation found in the data."""

    message: str
    path: tuple[Union[str, int], ...] = ()  # Field names and array indices, root first
    code: ErrorCode

    model_config = {"frozen": True}

    @property
    def location(self) -> str:
        return "/".join(str(segment) for segment in self.path)


class ValidationResult(BaseModel):
    """Outcome of validating one data instance. Errors keep depth-first discovery order."""

    is_valid: bool
    errors: list[ValidationError] = Field(default_factory=list)
    origin: OriginFormat

    @classmethod
    def build(cls, errors: list[ValidationError], origin: OriginFormat) -> "ValidationResult":
        return cls(is_valid=not errors, errors=errors, origin=origin)

    def render(self) -> list[dict]:
        """Errors in the shape of the schema's own syntax."""
        return render_errors(self.origin, self.errors)

    def to_dict(self) -> dict:
        return {"is_valid": self.is_valid, "errors": self.render()}

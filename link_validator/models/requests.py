"""API request models."""

from typing import Any

from pydantic import BaseModel, Field


class CompileRequest(BaseModel):
    """Request to compile a schema without validating anything."""

    schema_: Any = Field(
        ...,
        alias="schema",
        description="Rule-syntax rules or a JSON Schema document",
        examples=[{"username": {"type": "string", "required": True, "min": 3}}],
    )

    model_config = {"populate_by_name": True}


class ValidateRequest(CompileRequest):
    """Request to validate one data instance against a schema."""

    data: Any = Field(
        ...,
        description="Data instance to check",
        examples=[{"username": "jo"}],
    )

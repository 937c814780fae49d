"""API response models."""

from typing import Literal

from pydantic import BaseModel, Field


class WarningResponse(BaseModel):
    """A rule-syntax construct dropped during conversion."""

    field: str
    key: str
    message: str


class CompileResponse(BaseModel):
    """Canonical form of a compiled schema."""

    format: Literal["canonical_schema", "rule_syntax"]
    schema_: dict = Field(alias="schema")  # Serialized as "schema"
    warnings: list[WarningResponse] = []

    model_config = {"populate_by_name": True}


class ValidateResponse(BaseModel):
    """Validation outcome with errors rendered for the schema's syntax."""

    is_valid: bool
    format: Literal["canonical_schema", "rule_syntax"]
    errors: list[dict] = []


class CacheStats(BaseModel):
    """Compiled validator cache counters."""

    size: int
    max_size: int
    hits: int
    misses: int


class HealthResponse(BaseModel):
    """Service health check response."""

    status: Literal["healthy", "unhealthy", "degraded"]
    version: str = "1.0.0"
    uptime_seconds: float
    cache: CacheStats

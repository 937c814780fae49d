"""Library and service configuration via environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from environment variables (or a local .env file)."""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    LOG_LEVEL: str = "info"

    # Format detection: what an input readable under both syntaxes is taken as
    AMBIGUOUS_FORMAT: Literal["rule_syntax", "canonical_schema"] = "rule_syntax"

    # Compilation
    STRICT_REQUIRED: bool = False  # Reject required names missing from properties

    # Validation
    ASSERT_FORMATS: bool = True

    # Compiled validator cache (HTTP service)
    VALIDATOR_CACHE_SIZE: int = 128

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()

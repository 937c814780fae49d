"""Format detector — classifies a raw schema as JSON Schema or rule syntax.

Heuristic and pure: the input is only read, never modified. Inputs that
read validly under both syntaxes fall back to a configurable default
(rule syntax unless AMBIGUOUS_FORMAT says otherwise).
"""

from typing import Any, Optional

import structlog

from link_validator.config import get_settings
from link_validator.schema.models import OriginFormat

logger = structlog.get_logger()

JSON_SCHEMA_TYPES = {"string", "number", "integer", "boolean", "array", "object", "null"}

# Keys that only make sense inside a rule object
RULE_EXCLUSIVE_KEYS = {
    "fields",
    "defaultField",
    "len",
    "min",
    "max",
    "message",
    "validator",
    "asyncValidator",
    "trigger",
    "whitespace",
    "transform",
}

# Type tokens that JSON Schema does not know
RULE_ONLY_TYPES = {"email", "url", "hex", "method", "regexp", "date", "any"}

_RULE_KEYS = RULE_EXCLUSIVE_KEYS | {"type", "required", "pattern", "enum"}


def detect(schema: Any, ambiguous_default: Optional[OriginFormat] = None) -> OriginFormat:
    """Classify ``schema`` by surface syntax.

    Args:
        schema: Raw, already-parsed schema value
        ambiguous_default: Format to assume when both readings fit.
            Falls back to the AMBIGUOUS_FORMAT setting.

    Returns:
        The detected OriginFormat
    """
    if not isinstance(schema, dict):
        return OriginFormat.CANONICAL_SCHEMA

    if _has_strong_canonical_marker(schema):
        return OriginFormat.CANONICAL_SCHEMA

    if any(_looks_like_rule(value) for value in schema.values()):
        return OriginFormat.RULE_SYNTAX

    if _has_weak_canonical_marker(schema):
        return OriginFormat.CANONICAL_SCHEMA

    if ambiguous_default is None:
        ambiguous_default = OriginFormat(get_settings().AMBIGUOUS_FORMAT)
    logger.debug("format_ambiguous", assumed=ambiguous_default.value, keys=sorted(schema))
    return ambiguous_default


def _has_strong_canonical_marker(schema: dict) -> bool:
    if "$schema" in schema:
        return True
    # A rule-syntax field never maps to a bare type name or list of them
    declared = schema.get("type")
    if isinstance(declared, str):
        return declared in JSON_SCHEMA_TYPES
    return isinstance(declared, list) and bool(declared) and all(
        isinstance(t, str) and t in JSON_SCHEMA_TYPES for t in declared
    )


def _looks_like_rule(value: Any) -> bool:
    """True when a top-level value carries rule-only evidence."""
    if isinstance(value, list):
        return bool(value) and isinstance(value[0], dict)
    if not isinstance(value, dict):
        return False
    if RULE_EXCLUSIVE_KEYS & value.keys():
        return True
    if isinstance(value.get("required"), bool):
        return True
    return value.get("type") in RULE_ONLY_TYPES


def _has_weak_canonical_marker(schema: dict) -> bool:
    for key, value in schema.items():
        # Rule fields are always a rule object or a list of them
        if not isinstance(value, (dict, list)):
            return True
        if isinstance(value, list) and not all(isinstance(v, dict) for v in value):
            return True
        if key == "properties" and isinstance(value, dict) and value:
            # {"properties": {"name": {...}}} reads as a JSON Schema property map
            if all(isinstance(v, dict) for v in value.values()) and not (value.keys() & _RULE_KEYS):
                return True
    return False


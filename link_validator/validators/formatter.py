"""Result formatter — renders errors with the path key of the schema's own syntax.

JSON Schema users get ``instancePath``; rule-syntax users get ``field``.
"""

from typing import TYPE_CHECKING, Sequence

from link_validator.schema.models import OriginFormat

if TYPE_CHECKING:
    from link_validator.validators.models import ValidationError

PATH_KEYS = {
    OriginFormat.CANONICAL_SCHEMA: "instancePath",
    OriginFormat.RULE_SYNTAX: "field",
}


def render_errors(origin: OriginFormat, errors: Sequence["ValidationError"]) -> list[dict]:
    """Render errors as JSON-serializable dicts, preserving their order.

    Root-level errors render with an empty path string.
    """
    key = PATH_KEYS[origin]
    return [{"message": error.message, key: error.location} for error in errors]

"""Canonical parser — reads native JSON Schema into a SchemaNode tree.

Covers the keyword subset the validation engine implements. Composition
and reference keywords are rejected outright rather than ignored, since
ignoring them would let invalid data through.
"""

from typing import Any

import structlog

from link_validator.schema.errors import CompileError, CompileErrorCode
from link_validator.schema.models import KEYWORDS_BY_TYPE, PathSegment, SchemaNode, SchemaType

logger = structlog.get_logger()

ANNOTATION_KEYWORDS = {
    "$schema",
    "$id",
    "id",
    "$comment",
    "title",
    "description",
    "default",
    "examples",
    "definitions",
    "$defs",
    "readOnly",
    "writeOnly",
    "deprecated",
}

UNSUPPORTED_KEYWORDS = {
    "$ref",
    "allOf",
    "anyOf",
    "oneOf",
    "not",
    "if",
    "then",
    "else",
    "patternProperties",
    "propertyNames",
    "dependencies",
    "dependentRequired",
    "dependentSchemas",
    "prefixItems",
    "contains",
}

NUMERIC_KEYWORDS = {
    "minLength": "min_length",
    "maxLength": "max_length",
    "minimum": "minimum",
    "maximum": "maximum",
    "exclusiveMinimum": "exclusive_minimum",
    "exclusiveMaximum": "exclusive_maximum",
    "multipleOf": "multiple_of",
    "minItems": "min_items",
    "maxItems": "max_items",
}

STRING_VALUED_KEYWORDS = {"pattern": "pattern", "format": "format", "errorMessage": "message"}

HANDLED_KEYWORDS = (
    {"type", "items", "properties", "required", "additionalProperties", "uniqueItems", "enum", "const", "instanceof"}
    | set(NUMERIC_KEYWORDS)
    | set(STRING_VALUED_KEYWORDS)
)


def parse_json_schema(schema: Any, path: tuple[PathSegment, ...] = ()) -> SchemaNode:
    """Parse a JSON Schema document (or sub-schema) into a SchemaNode.

    Args:
        schema: JSON Schema as a dict, or ``True`` for "accept anything"
        path: Location of this sub-schema, used in error messages

    Raises:
        CompileError: on malformed or unsupported schema constructs
    """
    if schema is True:
        return SchemaNode()
    if not isinstance(schema, dict):
        raise CompileError(
            CompileErrorCode.MALFORMED_SCHEMA,
            f"schema must be a JSON object, got {type(schema).__name__}",
            path,
        )

    unsupported = sorted(schema.keys() & UNSUPPORTED_KEYWORDS)
    if unsupported:
        raise CompileError(
            CompileErrorCode.UNSUPPORTED_KEYWORD,
            f"unsupported keyword(s): {', '.join(unsupported)}",
            path,
        )

    for keyword in sorted(schema.keys() - HANDLED_KEYWORDS - ANNOTATION_KEYWORDS):
        logger.warning("unknown_keyword", keyword=keyword, path="/".join(str(s) for s in path))

    schema_type = _parse_type(schema.get("type"), path)
    attrs: dict[str, Any] = {}

    for keyword, attr in NUMERIC_KEYWORDS.items():
        if keyword in schema:
            value = schema[keyword]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise CompileError(CompileErrorCode.MALFORMED_SCHEMA, f"'{keyword}' must be a number", path)
            attrs[attr] = value

    for keyword, attr in STRING_VALUED_KEYWORDS.items():
        if keyword in schema:
            if not isinstance(schema[keyword], str):
                raise CompileError(CompileErrorCode.MALFORMED_SCHEMA, f"'{keyword}' must be a string", path)
            attrs[attr] = schema[keyword]

    if "uniqueItems" in schema:
        attrs["unique_items"] = _parse_bool(schema, "uniqueItems", path)

    if "items" in schema:
        if isinstance(schema["items"], list):
            raise CompileError(CompileErrorCode.UNSUPPORTED_KEYWORD, "tuple-form 'items' is not supported", path)
        attrs["items"] = parse_json_schema(schema["items"], path + ("items",))

    if "properties" in schema:
        properties = schema["properties"]
        if not isinstance(properties, dict):
            raise CompileError(CompileErrorCode.MALFORMED_SCHEMA, "'properties' must be an object", path)
        attrs["properties"] = {
            name: parse_json_schema(child, path + ("properties", name)) for name, child in properties.items()
        }

    if "required" in schema:
        required = schema["required"]
        if not isinstance(required, list) or not all(isinstance(name, str) for name in required):
            raise CompileError(CompileErrorCode.MALFORMED_SCHEMA, "'required' must be a list of strings", path)
        attrs["required"] = tuple(dict.fromkeys(required))

    if "additionalProperties" in schema:
        if isinstance(schema["additionalProperties"], dict):
            raise CompileError(
                CompileErrorCode.UNSUPPORTED_KEYWORD, "schema-valued 'additionalProperties' is not supported", path
            )
        attrs["additional_properties"] = _parse_bool(schema, "additionalProperties", path)

    if "enum" in schema:
        if not isinstance(schema["enum"], list):
            raise CompileError(CompileErrorCode.MALFORMED_SCHEMA, "'enum' must be a list", path)
        attrs["enum"] = tuple(schema["enum"])
    if "const" in schema:
        attrs["enum"] = (schema["const"],)

    if schema.get("instanceof") == "Function":
        attrs["is_callable"] = True

    return SchemaNode(type=schema_type, **_drop_inapplicable(schema_type, attrs, path))


def _parse_type(value: Any, path: tuple[PathSegment, ...]):
    if value is None:
        return None
    if isinstance(value, list):
        raise CompileError(CompileErrorCode.UNSUPPORTED_KEYWORD, "a list of types is not supported", path)
    try:
        return SchemaType(value)
    except ValueError:
        raise CompileError(CompileErrorCode.MALFORMED_SCHEMA, f"unknown type {value!r}", path) from None


def _parse_bool(schema: dict, keyword: str, path: tuple[PathSegment, ...]) -> bool:
    value = schema[keyword]
    if not isinstance(value, bool):
        raise CompileError(CompileErrorCode.MALFORMED_SCHEMA, f"'{keyword}' must be a boolean", path)
    return value


def _drop_inapplicable(schema_type, attrs: dict[str, Any], path: tuple[PathSegment, ...]) -> dict[str, Any]:
    """Remove keywords that JSON Schema would never apply under ``schema_type``."""
    if schema_type is None:
        return attrs
    allowed = set(KEYWORDS_BY_TYPE[schema_type]) | {"enum", "is_callable", "message"}
    kept = {}
    for attr, value in attrs.items():
        if attr in allowed:
            kept[attr] = value
        else:
            logger.info(
                "inapplicable_keyword",
                keyword=attr,
                type=schema_type.value,
                path="/".join(str(s) for s in path),
            )
    return kept

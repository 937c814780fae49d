"""Rule normalizer — rewrites rule-syntax schemas into canonical SchemaNode trees.

Rule syntax maps each field to a rule object, or to an ordered list of rule
objects that are folded into one before conversion:

    {"username": {"type": "string", "required": True, "min": 3}}
    {"tags": [{"type": "array", "required": True}, {"min": 1, "max": 5}]}

Keys with no canonical counterpart (validator functions, triggers, ...) are
dropped and reported as ConversionWarning, one per occurrence.
"""

from functools import reduce
from typing import Any, Optional

import structlog

from link_validator.schema.errors import ConversionError
from link_validator.schema.models import ConversionWarning, PathSegment, SchemaNode, SchemaType

logger = structlog.get_logger()

HEX_PATTERN = "^[0-9a-fA-F]+$"

# Rule type token → (canonical type, implied constraints)
RULE_TYPES: dict[str, tuple[Optional[SchemaType], dict[str, Any]]] = {
    "string": (SchemaType.STRING, {}),
    "number": (SchemaType.NUMBER, {}),
    "integer": (SchemaType.INTEGER, {}),
    "boolean": (SchemaType.BOOLEAN, {}),
    "array": (SchemaType.ARRAY, {}),
    "object": (SchemaType.OBJECT, {}),
    "any": (None, {}),
    "method": (SchemaType.OBJECT, {"is_callable": True}),
    "regexp": (SchemaType.STRING, {}),
    "date": (SchemaType.STRING, {"format": "date-time"}),
    "email": (SchemaType.STRING, {"format": "email"}),
    "url": (SchemaType.STRING, {"format": "uri"}),
    "hex": (SchemaType.STRING, {"pattern": HEX_PATTERN}),
}

SUPPORTED_KEYS = {"type", "required", "min", "max", "len", "pattern", "enum", "fields", "defaultField", "message"}

# Recognized keys that cannot be expressed as data constraints
UNSUPPORTED_KEYS = {
    "validator": "validator function not supported",
    "asyncValidator": "asyncValidator function not supported",
    "trigger": "trigger option not supported",
    "whitespace": "whitespace rule not supported",
    "transform": "transform function not supported",
}

# Where min/max/len land for each canonical type
BOUND_KEYWORDS: dict[Optional[SchemaType], tuple[str, str]] = {
    SchemaType.STRING: ("min_length", "max_length"),
    SchemaType.ARRAY: ("min_items", "max_items"),
    SchemaType.NUMBER: ("minimum", "maximum"),
    SchemaType.INTEGER: ("minimum", "maximum"),
    None: ("minimum", "maximum"),
}


def normalize(schema: Any) -> tuple[SchemaNode, list[ConversionWarning]]:
    """Convert a rule-syntax schema into a canonical root node.

    Returns:
        The root object node and every warning raised along the way
    """
    normalizer = RuleNormalizer()
    root = normalizer.normalize(schema)
    logger.debug("rules_normalized", fields=len(root.properties), warnings=len(normalizer.warnings))
    return root, normalizer.warnings


def merge_rules(rules: list[dict]) -> dict:
    """Fold an ordered rule list into one rule.

    Later entries win on conflicting keys, except ``required``, which is
    true as soon as any entry sets it.
    """
    return reduce(_merge_pair, rules, {})


def _merge_pair(merged: dict, rule: dict) -> dict:
    combined = {**merged, **rule}
    if "required" in merged or "required" in rule:
        combined["required"] = merged.get("required") is True or rule.get("required") is True
    return combined


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class RuleNormalizer:
    """Recursive rule → SchemaNode converter. Collects warnings on ``self.warnings``."""

    def __init__(self):
        self.warnings: list[ConversionWarning] = []

    def normalize(self, schema: Any) -> SchemaNode:
        if not isinstance(schema, dict):
            raise ConversionError("rule schema must be an object mapping field names to rules")
        return self._convert_fields(schema, ())

    # ── Fields ──

    def _convert_fields(self, fields: dict, path: tuple[PathSegment, ...]) -> SchemaNode:
        """Build an object node from a field → rule(s) mapping."""
        properties: dict[str, SchemaNode] = {}
        required: list[str] = []

        for name, value in fields.items():
            field_path = path + (name,)
            node, is_required = self._convert_field(self._rule_list(value, field_path), field_path)
            properties[name] = node
            if is_required:
                required.append(name)

        return SchemaNode(type=SchemaType.OBJECT, properties=properties, required=tuple(required))

    def _rule_list(self, value: Any, path: tuple[PathSegment, ...]) -> list[dict]:
        if isinstance(value, dict):
            return [value]
        if isinstance(value, list):
            for index, rule in enumerate(value):
                if not isinstance(rule, dict):
                    raise ConversionError(f"rule {index} is not an object", path)
            return value
        raise ConversionError("invalid rule format, expected a rule object or a list of rule objects", path)

    def _convert_field(self, rules: list[dict], path: tuple[PathSegment, ...]) -> tuple[SchemaNode, bool]:
        for rule in rules:
            self._scan_keys(rule, path)
            self._check_values(rule, path)
        return self._convert_rule(merge_rules(rules), path)

    def _scan_keys(self, rule: dict, path: tuple[PathSegment, ...]) -> None:
        """Warn once per unsupported or unknown key on a single rule entry."""
        for key in rule:
            if key in UNSUPPORTED_KEYS:
                self._warn(path, key, UNSUPPORTED_KEYS[key])
            elif key not in SUPPORTED_KEYS:
                self._warn(path, key, f"unsupported rule '{key}'")

    # ── Single merged rule ──

    def _convert_rule(self, rule: dict, path: tuple[PathSegment, ...]) -> tuple[SchemaNode, bool]:
        if "fields" in rule and rule.get("type") not in ("object", "array"):
            raise ConversionError(
                f"'fields' requires type 'object' or 'array', got {rule.get('type')!r}", path
            )

        schema_type, attrs = self._resolve_type(rule.get("type"), path)
        self._apply_bounds(rule, schema_type, attrs, path)

        if "pattern" in rule:
            if schema_type in (SchemaType.STRING, None):
                attrs["pattern"] = rule["pattern"]  # Replaces the implicit hex pattern
            else:
                self._warn(path, "pattern", f"pattern rule ignored for type '{rule.get('type')}'")

        if "enum" in rule:
            attrs["enum"] = tuple(rule["enum"])

        if "message" in rule:
            attrs["message"] = rule["message"]

        if "fields" in rule:
            self._apply_fields(rule, attrs, path)

        if "defaultField" in rule:
            self._apply_default_field(rule, attrs, path)

        return SchemaNode(type=schema_type, **attrs), rule.get("required") is True

    def _check_values(self, rule: dict, path: tuple[PathSegment, ...]) -> None:
        if "type" in rule and not isinstance(rule["type"], str):
            raise ConversionError(f"'type' must be a string, got {rule['type']!r}", path)
        if "required" in rule and not isinstance(rule["required"], bool):
            raise ConversionError(f"'required' must be a boolean, got {rule['required']!r}", path)
        for key in ("min", "max", "len"):
            if key in rule and not _is_number(rule[key]):
                raise ConversionError(f"'{key}' must be numeric, got {rule[key]!r}", path)
        if "enum" in rule and not isinstance(rule["enum"], list):
            raise ConversionError("'enum' must be a list", path)
        if "pattern" in rule and not isinstance(rule["pattern"], str):
            raise ConversionError("'pattern' must be a string", path)
        if "message" in rule and not isinstance(rule["message"], str):
            raise ConversionError("'message' must be a string", path)
        if "fields" in rule and not isinstance(rule["fields"], dict):
            raise ConversionError("'fields' must be an object mapping field names to rules", path)

    def _resolve_type(
        self, token: Optional[str], path: tuple[PathSegment, ...]
    ) -> tuple[Optional[SchemaType], dict[str, Any]]:
        if token is None:
            return None, {}
        if token not in RULE_TYPES:
            self._warn(path, "type", f"unsupported type '{token}'")
            return None, {}
        schema_type, implied = RULE_TYPES[token]
        return schema_type, dict(implied)

    def _apply_bounds(
        self,
        rule: dict,
        schema_type: Optional[SchemaType],
        attrs: dict[str, Any],
        path: tuple[PathSegment, ...],
    ) -> None:
        """Map min/max/len onto the keyword pair for ``schema_type``.

        ``len`` pins both ends and takes precedence over min/max.
        """
        keywords = BOUND_KEYWORDS.get(schema_type)
        if keywords is None:
            for key in ("min", "max", "len"):
                if key in rule:
                    self._warn(path, key, f"{key} rule ignored for type '{rule.get('type')}'")
            return

        low, high = keywords
        if "min" in rule:
            attrs[low] = rule["min"]
        if "max" in rule:
            attrs[high] = rule["max"]
        if "len" in rule:
            if schema_type in (SchemaType.STRING, SchemaType.ARRAY):
                attrs[low] = attrs[high] = rule["len"]
            else:
                self._warn(path, "len", "len rule only supported for string and array types")

    def _apply_fields(self, rule: dict, attrs: dict[str, Any], path: tuple[PathSegment, ...]) -> None:
        nested = self._convert_fields(rule["fields"], path)
        if rule["type"] == "array":
            # Each element is an object described by the nested fields
            attrs["items"] = nested
        else:
            attrs["properties"] = nested.properties
            attrs["required"] = nested.required

    def _apply_default_field(self, rule: dict, attrs: dict[str, Any], path: tuple[PathSegment, ...]) -> None:
        if rule.get("type") != "array":
            self._warn(path, "defaultField", "defaultField only supported for array types")
            return
        if "fields" in rule:
            raise ConversionError("'fields' and 'defaultField' cannot be combined on one array rule", path)
        item_path = path + ("defaultField",)
        item, _ = self._convert_field(self._rule_list(rule["defaultField"], item_path), item_path)
        attrs["items"] = item

    def _warn(self, path: tuple[PathSegment, ...], key: str, message: str) -> None:
        self.warnings.append(ConversionWarning(field_path=path, unsupported_key=key, message=message))

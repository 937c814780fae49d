"""Schema models — the canonical node tree and the compiled artifact built from it.

Every surface syntax ends up as a tree of SchemaNode objects. The tree is
frozen; once wrapped in a CompiledSchema it is shared read-only by every
validate call.
"""

import copy
import re
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

Number = Union[int, float]
PathSegment = Union[str, int]


class OriginFormat(str, Enum):
    """Which surface syntax the user supplied."""

    CANONICAL_SCHEMA = "canonical_schema"  # Native JSON Schema
    RULE_SYNTAX = "rule_syntax"            # Per-field constraint rules


class SchemaType(str, Enum):
    """Canonical value types. An untyped node (``type=None``) accepts anything."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"


STRING_KEYWORDS = ("min_length", "max_length", "pattern", "format")
NUMERIC_KEYWORDS = ("minimum", "maximum", "exclusive_minimum", "exclusive_maximum", "multiple_of")
ARRAY_KEYWORDS = ("min_items", "max_items", "unique_items", "items")
OBJECT_KEYWORDS = ("properties", "required", "additional_properties")

# Keywords a typed node may carry. Untyped nodes may carry all of them.
KEYWORDS_BY_TYPE: dict[SchemaType, tuple[str, ...]] = {
    SchemaType.STRING: STRING_KEYWORDS,
    SchemaType.NUMBER: NUMERIC_KEYWORDS,
    SchemaType.INTEGER: NUMERIC_KEYWORDS,
    SchemaType.BOOLEAN: (),
    SchemaType.ARRAY: ARRAY_KEYWORDS,
    SchemaType.OBJECT: OBJECT_KEYWORDS,
    SchemaType.NULL: (),
}

# Python attribute → JSON Schema keyword
JSON_SCHEMA_KEYWORDS = {
    "min_length": "minLength",
    "max_length": "maxLength",
    "pattern": "pattern",
    "format": "format",
    "minimum": "minimum",
    "maximum": "maximum",
    "exclusive_minimum": "exclusiveMinimum",
    "exclusive_maximum": "exclusiveMaximum",
    "multiple_of": "multipleOf",
    "min_items": "minItems",
    "max_items": "maxItems",
    "unique_items": "uniqueItems",
}


class SchemaNode(BaseModel):
    """One node of the canonical schema tree."""

    type: Optional[SchemaType] = None

    # string
    min_length: Optional[Number] = None
    max_length: Optional[Number] = None
    pattern: Optional[str] = None
    format: Optional[str] = None

    # number / integer
    minimum: Optional[Number] = None
    maximum: Optional[Number] = None
    exclusive_minimum: Optional[Number] = None
    exclusive_maximum: Optional[Number] = None
    multiple_of: Optional[Number] = None

    # array
    min_items: Optional[Number] = None
    max_items: Optional[Number] = None
    unique_items: bool = False
    items: Optional["SchemaNode"] = None

    # object
    properties: Mapping[str, "SchemaNode"] = Field(default_factory=dict, validate_default=True)
    required: tuple[str, ...] = ()
    additional_properties: bool = True

    # any type
    enum: Optional[tuple[Any, ...]] = None
    is_callable: bool = False         # Value must be a function (rule type "method")
    message: Optional[str] = None     # Replaces generated messages for errors at this node

    model_config = {"frozen": True}

    @field_validator("properties", mode="after")
    @classmethod
    def _freeze_properties(cls, value: Mapping[str, "SchemaNode"]) -> Mapping[str, "SchemaNode"]:
        return MappingProxyType(dict(value))

    @field_validator("enum", mode="after")
    @classmethod
    def _detach_enum(cls, value: Optional[tuple[Any, ...]]) -> Optional[tuple[Any, ...]]:
        # Candidates may be dicts or lists owned by the caller
        return None if value is None else copy.deepcopy(value)

    @property
    def is_any(self) -> bool:
        return self.type is None

    def populated_keywords(self) -> list[str]:
        """Names of the type-specific constraint fields that carry a value."""
        populated = []
        for name in STRING_KEYWORDS + NUMERIC_KEYWORDS + ARRAY_KEYWORDS:
            value = getattr(self, name)
            if value is not None and value is not False:
                populated.append(name)
        if self.properties:
            populated.append("properties")
        if self.required:
            populated.append("required")
        if not self.additional_properties:
            populated.append("additional_properties")
        return populated

    def to_json_schema(self) -> dict:
        """Render this node (and its children) as a plain JSON Schema dict."""
        out: dict[str, Any] = {}
        if self.type is not None:
            out["type"] = self.type.value
        for attr, keyword in JSON_SCHEMA_KEYWORDS.items():
            value = getattr(self, attr)
            if value is not None and value is not False:
                out[keyword] = value
        if self.items is not None:
            out["items"] = self.items.to_json_schema()
        if self.properties:
            out["properties"] = {name: child.to_json_schema() for name, child in self.properties.items()}
        if self.required:
            out["required"] = list(self.required)
        if not self.additional_properties:
            out["additionalProperties"] = False
        if self.enum is not None:
            out["enum"] = list(self.enum)
        if self.is_callable:
            out["instanceof"] = "Function"
        if self.message is not None:
            out["errorMessage"] = self.message
        return out


class ConversionWarning(BaseModel):
    """A recognized rule-syntax construct that has no canonical counterpart."""

    field_path: tuple[PathSegment, ...]
    unsupported_key: str
    message: str

    model_config = {"frozen": True}

    @property
    def field(self) -> str:
        return "/".join(str(segment) for segment in self.field_path)


class CompiledSchema(BaseModel):
    """Immutable compile output: the canonical tree plus its origin tag.

    ``patterns`` holds every regex in the tree, compiled once up front.
    """

    root: SchemaNode
    origin: OriginFormat
    patterns: Mapping[str, re.Pattern] = Field(default_factory=dict, validate_default=True)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("patterns", mode="after")
    @classmethod
    def _freeze_patterns(cls, value: Mapping[str, re.Pattern]) -> Mapping[str, re.Pattern]:
        return MappingProxyType(dict(value))

    def to_json_schema(self) -> dict:
        return self.root.to_json_schema()

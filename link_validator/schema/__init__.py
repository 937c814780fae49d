"""Schema pipeline — format detection, rule normalization, canonical parsing, compilation."""

from link_validator.schema.compiler import compile_schema
from link_validator.schema.detector import detect
from link_validator.schema.errors import CompileError, CompileErrorCode, ConversionError, LinkValidatorError
from link_validator.schema.models import (
    CompiledSchema,
    ConversionWarning,
    OriginFormat,
    SchemaNode,
    SchemaType,
)
from link_validator.schema.normalizer import merge_rules, normalize
from link_validator.schema.parser import parse_json_schema

__all__ = [
    "compile_schema",
    "detect",
    "normalize",
    "merge_rules",
    "parse_json_schema",
    "CompiledSchema",
    "ConversionWarning",
    "OriginFormat",
    "SchemaNode",
    "SchemaType",
    "LinkValidatorError",
    "ConversionError",
    "CompileError",
    "CompileErrorCode",
]

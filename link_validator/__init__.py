"""link_validator — validate data against rule-syntax or JSON Schema definitions.

Rule-syntax schemas (fields mapped to constraint rules) are normalized into
canonical JSON-Schema-shaped trees; both syntaxes then share one compiler and
one validation engine. Errors come back keyed the way the schema was written:
``field`` for rule syntax, ``instancePath`` for JSON Schema.

Usage:
    from link_validator import compile

    validator = compile(schema)
    result = validator.validate(data)
    if not result.is_valid:
        errors = result.render()
"""

from link_validator.schema import (
    CompiledSchema,
    CompileError,
    CompileErrorCode,
    ConversionError,
    ConversionWarning,
    LinkValidatorError,
    OriginFormat,
    SchemaNode,
    SchemaType,
    compile_schema,
    detect,
    merge_rules,
    normalize,
    parse_json_schema,
)
from link_validator.validator import Validator, compile, validate
from link_validator.validators import (
    ErrorCode,
    ValidationEngine,
    ValidationError,
    ValidationResult,
    render_errors,
    validate_compiled,
)

__version__ = "1.0.0"

__all__ = [
    "compile",
    "validate",
    "Validator",
    "detect",
    "normalize",
    "merge_rules",
    "parse_json_schema",
    "compile_schema",
    "validate_compiled",
    "render_errors",
    "ValidationEngine",
    "CompiledSchema",
    "SchemaNode",
    "SchemaType",
    "OriginFormat",
    "ConversionWarning",
    "ValidationResult",
    "ValidationError",
    "ErrorCode",
    "LinkValidatorError",
    "ConversionError",
    "CompileError",
    "CompileErrorCode",
]

"""Public entry point — compile a schema once, validate many times.

Usage:
    from link_validator import compile

    validator = compile({"username": {"type": "string", "required": True, "min": 3}})
    result = validator.validate({"username": "jo"})
    result.render()  # [{"message": '"jo" is shorter than 3 characters', "field": "username"}]
"""

from typing import Any, Callable, Optional

import structlog

from link_validator.config import Settings, get_settings
from link_validator.schema.compiler import compile_schema
from link_validator.schema.detector import detect
from link_validator.schema.models import CompiledSchema, ConversionWarning, OriginFormat
from link_validator.schema.normalizer import normalize
from link_validator.schema.parser import parse_json_schema
from link_validator.validators.engine import ValidationEngine, get_engine
from link_validator.validators.models import ValidationResult

logger = structlog.get_logger()

WarningHandler = Callable[[ConversionWarning], None]


class Validator:
    """A compiled schema bound to a validation engine.

    Holds nothing mutable: ``validate`` may be called from many threads at once.
    """

    def __init__(self, compiled: CompiledSchema, engine: Optional[ValidationEngine] = None):
        self._compiled = compiled
        self._engine = engine or get_engine()

    @property
    def compiled(self) -> CompiledSchema:
        return self._compiled

    @property
    def origin(self) -> OriginFormat:
        return self._compiled.origin

    def validate(self, data: Any) -> ValidationResult:
        """Check ``data`` against the compiled schema."""
        return self._engine.validate(self._compiled, data)

    def to_json_schema(self) -> dict:
        """The canonical schema as a plain JSON Schema dict."""
        return self._compiled.to_json_schema()

    def __repr__(self) -> str:
        return f"Validator(origin={self.origin.value!r})"


def compile(
    schema: Any,
    *,
    on_warning: Optional[WarningHandler] = None,
    settings: Optional[Settings] = None,
) -> Validator:
    """Detect the schema's syntax, normalize it if needed, and compile it.

    Args:
        schema: Rule-syntax rules or a JSON Schema document, already parsed
        on_warning: Called once per ConversionWarning; warnings are also logged
        settings: Overrides the process-wide settings

    Returns:
        A reusable Validator

    Raises:
        ConversionError: rule syntax that cannot be translated
        CompileError: canonical schema that is inconsistent or unsupported
    """
    active = settings or get_settings()

    origin = detect(schema, ambiguous_default=OriginFormat(active.AMBIGUOUS_FORMAT))
    logger.debug("format_detected", origin=origin.value)

    if origin == OriginFormat.RULE_SYNTAX:
        root, warnings = normalize(schema)
        for warning in warnings:
            logger.warning(
                "unsupported_rule",
                field=warning.field,
                key=warning.unsupported_key,
                message=warning.message,
            )
            if on_warning is not None:
                on_warning(warning)
    else:
        root = parse_json_schema(schema)

    compiled = compile_schema(root, origin, strict_required=active.STRICT_REQUIRED)

    engine = None
    if settings is not None:
        engine = ValidationEngine(assert_formats=settings.ASSERT_FORMATS)
    return Validator(compiled, engine)


def validate(schema: Any, data: Any) -> ValidationResult:
    """Compile ``schema`` and validate ``data`` in one go.

    Prefer ``compile`` when the same schema checks more than one instance.
    """
    return compile(schema).validate(data)

"""Schema API — compile a schema, or validate data against one."""

import structlog
from fastapi import APIRouter

from link_validator.models.requests import CompileRequest, ValidateRequest
from link_validator.models.responses import CompileResponse, ValidateResponse, WarningResponse
from link_validator.services.validator_cache import validator_cache

logger = structlog.get_logger()

router = APIRouter()


@router.post("/compile", response_model=CompileResponse)
async def compile_endpoint(request: CompileRequest):
    """Compile a schema and return its canonical JSON Schema form.

    Compile failures are turned into 422 responses by the app's exception handlers.
    """
    validator, warnings = validator_cache.get_or_compile(request.schema_)

    return CompileResponse(
        format=validator.origin.value,
        schema=validator.to_json_schema(),
        warnings=[
            WarningResponse(field=w.field, key=w.unsupported_key, message=w.message)
            for w in warnings
        ],
    )


@router.post("/validate", response_model=ValidateResponse)
async def validate_endpoint(request: ValidateRequest):
    """Validate one data instance; errors use the path key of the schema's syntax."""
    validator, _ = validator_cache.get_or_compile(request.schema_)
    result = validator.validate(request.data)

    logger.info(
        "data_validated",
        origin=validator.origin.value,
        is_valid=result.is_valid,
        total_errors=len(result.errors),
    )

    return ValidateResponse(
        is_valid=result.is_valid,
        format=validator.origin.value,
        errors=result.render(),
    )

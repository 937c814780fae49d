"""link_validator HTTP service.

FastAPI application exposing compile and validate endpoints, with lifespan
logging and global error handling.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from link_validator import __version__
from link_validator.api.router import api_router
from link_validator.config import get_settings
from link_validator.log_config import configure_logging
from link_validator.schema.errors import LinkValidatorError
from link_validator.services.validator_cache import validator_cache

configure_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    settings = get_settings()

    # ── Startup ──
    logger.info(
        "app_started",
        debug=settings.DEBUG,
        ambiguous_format=settings.AMBIGUOUS_FORMAT,
        cache_size=validator_cache.max_size,
    )

    yield

    # ── Shutdown ──
    validator_cache.clear()
    logger.info("app_stopped")


# ── Create Application ──

app = FastAPI(
    title="link-validator",
    description=(
        "Validate JSON data against rule-syntax or JSON Schema definitions. "
        "Rule-syntax schemas are normalized into JSON Schema before compilation."
    ),
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ── Global Exception Handlers ──

@app.exception_handler(LinkValidatorError)
async def schema_error_handler(request: Request, exc: LinkValidatorError):
    """Schemas that cannot be converted or compiled."""
    logger.info("schema_rejected", path=request.url.path, error=str(exc), error_type=type(exc).__name__)
    return JSONResponse(status_code=422, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all error handler for unhandled exceptions."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again.",
        },
    )


# ── Routes ──

app.include_router(api_router, prefix="/api/v1")


# ── Root endpoint ──

@app.get("/")
async def root():
    """Service name, version and entry points."""
    return {
        "name": "link-validator",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/v1/health",
    }

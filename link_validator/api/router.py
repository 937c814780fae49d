"""Main API router — mounts the health and schema routers."""

from fastapi import APIRouter

from link_validator.api.health import router as health_router
from link_validator.api.schemas import router as schemas_router

api_router = APIRouter()

# Health check
api_router.include_router(health_router, tags=["Health"])

# Compile / validate
api_router.include_router(schemas_router, tags=["Schemas"])

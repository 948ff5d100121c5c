"""FastAPI application factory serving a resource type registry over JSON:API."""

import logging

from fastapi import FastAPI

from jsonapi_pipeline.api.error_handlers import register_error_handlers
from jsonapi_pipeline.api.router import router
from jsonapi_pipeline.config import Settings, get_settings
from jsonapi_pipeline.controller import APIController
from jsonapi_pipeline.registry import ResourceTypeRegistry


def create_app(registry: ResourceTypeRegistry, settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The registry is built by the caller (adapters, hooks and label mappers
    are application code) and shared by every request through the
    controller stored on ``app.state.controller``.
    """
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    app = FastAPI(
        title="JSON:API Pipeline",
        version="0.1.0",
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )
    app.state.controller = APIController(
        registry, supported_extensions=settings.supported_extensions
    )

    app.include_router(router, prefix=settings.api_prefix)
    register_error_handlers(app)

    return app

"""Global exception handlers so errors outside the pipeline still render as JSON:API."""

import logging

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from jsonapi_pipeline.api.router import to_http_response
from jsonapi_pipeline.controller import APIController
from jsonapi_pipeline.errors import APIError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register JSON:API error handlers on the FastAPI app."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render routing errors (unknown path, etc.) as JSON:API errors."""
        error = APIError(exc.status_code, title=str(exc.detail))
        response = APIController.response_from_external_error(
            error, request.headers.get("accept")
        )
        return to_http_response(response)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        """Catch-all: never leak internal details."""
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
        response = APIController.response_from_external_error(
            exc, request.headers.get("accept")
        )
        return to_http_response(response)

"""Shared FastAPI dependencies."""

from fastapi import Request

from jsonapi_pipeline.controller import APIController


async def get_controller(request: Request) -> APIController:
    """Return the APIController stored on app state.

    The controller is created by :func:`jsonapi_pipeline.app.create_app`
    and stored on ``request.app.state.controller``.
    """
    return request.app.state.controller

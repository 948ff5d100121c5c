"""Method and body-presence checks that run before anything else."""

from __future__ import annotations

from jsonapi_pipeline.errors import bad_request, method_not_allowed
from jsonapi_pipeline.models.http import Request

SUPPORTED_METHODS = ("get", "post", "patch", "delete")


def check_method(request: Request) -> None:
    """Raise a 405 APIError unless the request uses a supported method."""
    if request.method not in SUPPORTED_METHODS:
        raise method_not_allowed(request.method)


def check_body_existence(request: Request) -> None:
    """Raise a 400 APIError if the body is missing when required, or present when not.

    POST and PATCH always need a body; DELETE needs one only when it
    targets a relationship (the body lists the linkage to remove).
    """
    needs_body = request.method in ("post", "patch") or (
        request.method == "delete" and request.about_relationship
    )

    if request.has_body == needs_body:
        return

    if needs_body:
        raise bad_request("This request needs a body, but didn't have one.")
    raise bad_request("This request should not have a body, but does.")

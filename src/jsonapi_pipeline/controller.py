"""Request lifecycle orchestration.

APIController runs one request through every pipeline step in a fixed
order and always returns a complete Response. Steps raise on failure; the
controller is the only place those exceptions are caught, converted to
APIErrors, and turned into an error document.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from jsonapi_pipeline.config import get_settings
from jsonapi_pipeline.document import build_document, build_error_document
from jsonapi_pipeline.errors import UNKNOWN_ERROR_TITLE, APIError, flatten_errors, not_found
from jsonapi_pipeline.models.http import JSON_MEDIA_TYPE, JSONAPI_MEDIA_TYPE, Request, Response
from jsonapi_pipeline.models.resource import Collection, Resource
from jsonapi_pipeline.registry import HookName, ResourceTypeRegistry
from jsonapi_pipeline.steps.do_query import METHOD_HANDLERS
from jsonapi_pipeline.steps.hooks import apply_transform
from jsonapi_pipeline.steps.label_to_ids import label_to_ids
from jsonapi_pipeline.steps.negotiate import negotiate_content_type, validate_content_type
from jsonapi_pipeline.steps.pre_query import (
    parse_request_primary,
    validate_document,
    validate_resources,
)
from jsonapi_pipeline.steps.validate_request import check_body_existence, check_method

logger = logging.getLogger(__name__)


def pick_status(errors: Sequence[APIError]) -> int:
    """Return the status that represents a set of errors: the first one's."""
    return errors[0].status


class APIController:
    """Turns Requests into Responses using a resource type registry.

    Args:
        registry: The resource type registry shared by every request.
        supported_extensions: JSON:API extensions accepted in request
            bodies. Defaults to ``Settings.supported_extensions``.
    """

    def __init__(
        self,
        registry: ResourceTypeRegistry,
        supported_extensions: Sequence[str] | None = None,
    ) -> None:
        self.registry = registry
        if supported_extensions is None:
            supported_extensions = get_settings().supported_extensions
        self.supported_extensions = list(supported_extensions)

    async def handle(
        self,
        request: Request,
        framework_req: Any = None,
        framework_res: Any = None,
    ) -> Response:
        """Run the full pipeline for one request.

        ``framework_req`` and ``framework_res`` are whatever the web framework
        provides. The controller never inspects them; it only passes them on
        to hooks and label mappers.
        """
        response = Response()

        try:
            await self._fulfill(request, response, framework_req, framework_res)

            response.primary = await apply_transform(
                response.primary, HookName.BEFORE_RENDER, self.registry, framework_req, framework_res
            )
            response.included = await apply_transform(
                response.included, HookName.BEFORE_RENDER, self.registry, framework_req, framework_res
            )
        except Exception as exc:
            errors = flatten_errors(exc)
            for err in errors:
                if not isinstance(err, APIError):
                    logger.error(
                        "Unexpected error handling %s %s",
                        request.method.upper(),
                        request.uri or request.type,
                        exc_info=err,
                    )
            response.errors.extend(APIError.from_error(err) for err in errors)

            # JSON:API is the only error format we produce, but plain JSON
            # clients get the same body under their own media type.
            if response.content_type != JSON_MEDIA_TYPE:
                response.content_type = JSONAPI_MEDIA_TYPE

        if response.errors:
            response.status = pick_status(response.errors)
            response.primary = None
            response.included = Collection()
            response.headers.pop("location", None)
            response.body = build_error_document(response.errors)
            logger.warning(
                "%s %s failed with status %d (%d error(s))",
                request.method.upper(),
                request.uri or request.type,
                response.status,
                len(response.errors),
            )
            return response

        if response.status != 204:
            response.body = build_document(
                response.primary,
                response.included,
                self.registry.url_templates(),
                request.uri,
            )
        return response

    async def _fulfill(
        self,
        request: Request,
        response: Response,
        framework_req: Any,
        framework_res: Any,
    ) -> None:
        registry = self.registry

        check_method(request)
        check_body_existence(request)

        response.content_type = negotiate_content_type(request.accepts, [JSONAPI_MEDIA_TYPE])

        if not registry.has_type(request.type):
            raise not_found(f"{request.type} is not a valid type.")

        if request.has_body:
            validate_content_type(request, self.supported_extensions)
            validate_document(request.body, request.about_relationship)

            parsed = parse_request_primary(request.body["data"], request.about_relationship)
            if not request.about_relationship:
                validate_resources(
                    request.type, parsed, registry, require_ids=request.method == "patch"
                )

            request.primary = await apply_transform(
                parsed, HookName.BEFORE_SAVE, registry, framework_req, framework_res
            )

        # A label that maps to nothing means the answer is already known.
        primary_resolved = False
        if request.id_or_ids is not None and request.allow_label and not request.label_resolved:
            mapped = await label_to_ids(request.type, request.id_or_ids, registry, framework_req)
            if isinstance(mapped, tuple):
                mapped = list(mapped)
            request.id_or_ids = mapped
            request.label_resolved = True

            if mapped is None or mapped == []:
                response.primary = None if mapped is None else Collection()
                primary_resolved = True

        if request.method == "delete":
            await apply_transform(
                _deletion_target(request), HookName.BEFORE_DELETE, registry, framework_req, framework_res
            )

        if not primary_resolved:
            await METHOD_HANDLERS[request.method](request, response, registry)

    @staticmethod
    def response_from_external_error(
        errors: BaseException | Sequence[BaseException],
        request_accepts: str | None,
    ) -> Response:
        """Build an error Response for failures that happened outside ``handle``.

        If the Accept header can't be satisfied it is ignored, as HTTP allows,
        and the body is sent as JSON:API.
        """
        if isinstance(errors, BaseException):
            raw_errors = flatten_errors(errors)
        else:
            raw_errors = [e for err in errors for e in flatten_errors(err)]

        response = Response()
        response.errors = [APIError.from_error(err) for err in raw_errors] or [
            APIError(500, title=UNKNOWN_ERROR_TITLE)
        ]
        response.status = pick_status(response.errors)
        response.body = build_error_document(response.errors)

        try:
            content_type = negotiate_content_type(request_accepts, [JSONAPI_MEDIA_TYPE])
        except APIError:
            content_type = JSONAPI_MEDIA_TYPE

        response.content_type = (
            content_type if content_type.lower() == JSON_MEDIA_TYPE else JSONAPI_MEDIA_TYPE
        )
        return response


def _deletion_target(request: Request) -> Resource | Collection | None:
    if isinstance(request.id_or_ids, list):
        return Collection([Resource(type=request.type, id=str(i)) for i in request.id_or_ids])
    if isinstance(request.id_or_ids, str):
        return Resource(type=request.type, id=request.id_or_ids)
    return None

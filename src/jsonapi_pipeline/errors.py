"""Client-facing error model.

Every failure the pipeline reports ends up as an :class:`APIError`. Errors
raised by the pipeline's own steps are APIErrors already; anything else that
escapes a step (an adapter exception, a hook bug) is normalized through
:meth:`APIError.from_error` so the response body is always a valid JSON:API
error document.
"""

from __future__ import annotations

from typing import Any

from jsonapi_pipeline.schemas.jsonapi import JSONAPIError

UNKNOWN_ERROR_TITLE = "An unknown error occurred while trying to process this request."


class APIError(Exception):
    """A single JSON:API error object that can also be raised.

    Args:
        status: HTTP status code that best describes this error.
        code: Application-specific error code.
        title: Short, human-readable summary of the problem.
        detail: Explanation specific to this occurrence of the problem.
        source: Locator for the cause, e.g. ``{"parameter": "page[limit]"}``
            or ``{"pointer": "/data/attributes/name"}``.
        links: Optional links object (``about`` etc.).
    """

    def __init__(
        self,
        status: int = 500,
        code: str | None = None,
        title: str | None = None,
        detail: str | None = None,
        source: dict[str, str] | None = None,
        links: dict[str, str] | None = None,
    ) -> None:
        super().__init__(detail or title or f"HTTP {status}")
        self.status = int(status)
        self.code = code
        self.title = title
        self.detail = detail
        self.source = source
        self.links = links

    def __repr__(self) -> str:
        return f"APIError(status={self.status}, code={self.code!r}, title={self.title!r})"

    @classmethod
    def from_error(cls, err: BaseException) -> APIError:
        """Convert an arbitrary exception into an APIError.

        APIErrors pass through untouched. Exceptions flagged with a truthy
        ``is_jsonapi_display_ready`` attribute are trusted to carry
        client-safe ``status``/``title``/``detail`` attributes. Everything
        else becomes an opaque 500 so internals never leak to clients.
        """
        if isinstance(err, APIError):
            return err

        if getattr(err, "is_jsonapi_display_ready", False):
            status = getattr(err, "status", None) or getattr(err, "status_code", None) or 500
            return cls(
                status=status,
                code=getattr(err, "code", None),
                title=getattr(err, "title", None) or UNKNOWN_ERROR_TITLE,
                detail=getattr(err, "detail", None),
                source=getattr(err, "source", None),
                links=getattr(err, "links", None),
            )

        return cls(status=500, title=UNKNOWN_ERROR_TITLE)

    def to_schema(self) -> JSONAPIError:
        """Build the Pydantic error object used in response documents."""
        return JSONAPIError(
            status=str(self.status),
            code=self.code,
            title=self.title,
            detail=self.detail,
            source=self.source,
            links=self.links,
        )


class AdapterConfigurationError(RuntimeError):
    """Raised when a registered adapter can't serve a query it was routed."""


def flatten_errors(exc: BaseException) -> list[BaseException]:
    """Unwrap (possibly nested) exception groups into a flat list."""
    if isinstance(exc, BaseExceptionGroup):
        flat: list[BaseException] = []
        for inner in exc.exceptions:
            flat.extend(flatten_errors(inner))
        return flat
    return [exc]


# ---------------------------------------------------------------------------
# Constructors for the common cases
# ---------------------------------------------------------------------------


def method_not_allowed(method: str) -> APIError:
    detail = f'The method "{method}" is not supported.'
    if method == "put":
        detail += " See http://jsonapi.org/faq/#wheres-put"
    return APIError(405, "method_not_allowed", "Method not supported.", detail)


def bad_request(title: str, detail: str | None = None, **kwargs: Any) -> APIError:
    return APIError(400, kwargs.pop("code", "bad_request"), title, detail, **kwargs)


def not_acceptable(detail: str | None = None) -> APIError:
    return APIError(
        406,
        "not_acceptable",
        "No acceptable Content-Type could be found.",
        detail,
    )


def unsupported_media_type(title: str, detail: str | None = None) -> APIError:
    return APIError(415, "unsupported_media_type", title, detail)


def not_found(detail: str | None = None) -> APIError:
    return APIError(404, "not_found", "Not found.", detail)


def invalid_query_param_value(detail: str, parameter: str) -> APIError:
    return APIError(
        400,
        "invalid_query_param_value",
        "Invalid parameter value.",
        detail,
        source={"parameter": parameter},
    )


def invalid_document(detail: str | None = None, pointer: str | None = None) -> APIError:
    return APIError(
        400,
        "invalid_document",
        "Request body is not a valid JSON API document.",
        detail,
        source={"pointer": pointer} if pointer else None,
    )

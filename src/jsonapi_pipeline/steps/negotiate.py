"""Content negotiation for responses and Content-Type checks for request bodies.

Only the small subset of media-type syntax JSON:API cares about is handled
here: ``type/subtype`` plus ``;key=value`` parameters and ``q`` weights.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from jsonapi_pipeline.errors import not_acceptable, unsupported_media_type
from jsonapi_pipeline.models.http import JSON_MEDIA_TYPE, JSONAPI_MEDIA_TYPE, Request

# Parameters a client may put on a request body's Content-Type.
_ALLOWED_BODY_PARAMS = {"ext", "supported"}


@dataclass(frozen=True)
class MediaRange:
    """One entry of an Accept header."""

    type: str
    subtype: str
    params: dict[str, str] = field(default_factory=dict)
    q: float = 1.0

    @property
    def full_type(self) -> str:
        return f"{self.type}/{self.subtype}"

    def matches(self, media_type: str) -> bool:
        type_, _, subtype = media_type.lower().partition("/")
        return self.type in ("*", type_) and self.subtype in ("*", subtype)


def parse_media_type(value: str) -> tuple[str, dict[str, str]]:
    """Split ``"type/subtype; a=b"`` into the lower-cased type and its params."""
    media, *raw_params = [part.strip() for part in value.split(";")]
    params: dict[str, str] = {}
    for raw in raw_params:
        key, sep, val = raw.partition("=")
        if not sep:
            continue
        params[key.strip().lower()] = val.strip().strip('"')
    return media.lower(), params


def parse_accept(header: str | None) -> list[MediaRange]:
    """Parse an Accept header into ranges sorted by client preference.

    A missing or blank header accepts everything. Ranges with ``q=0`` (or a
    malformed ``q``) are dropped; ties keep header order.
    """
    if header is None or not header.strip():
        header = "*/*"

    ranges: list[MediaRange] = []
    for entry in header.split(","):
        if not entry.strip():
            continue
        media, params = parse_media_type(entry)
        type_, sep, subtype = media.partition("/")
        if not sep or not type_ or not subtype:
            continue
        try:
            q = float(params.pop("q", "1"))
        except ValueError:
            continue
        if q <= 0:
            continue
        ranges.append(MediaRange(type_, subtype, params, q))

    # sorted() is stable, so equal weights keep their header order
    return sorted(ranges, key=lambda r: -r.q)


def negotiate_content_type(accept_header: str | None, supported: Sequence[str]) -> str:
    """Pick the response media type.

    Returns the first supported type acceptable to the client, in the
    client's preference order. A JSON:API range only matches when it has
    no parameters. If nothing supported is acceptable but the client takes
    plain JSON, plain JSON is returned.

    Raises:
        APIError: 406 when the client lists the JSON:API media type only with
            parameters, or when no acceptable type exists at all.
    """
    ranges = parse_accept(accept_header)

    jsonapi_ranges = [r for r in ranges if r.full_type == JSONAPI_MEDIA_TYPE]
    if jsonapi_ranges and all(r.params for r in jsonapi_ranges):
        raise not_acceptable(
            "Every instance of the JSON:API media type in your Accept header "
            "has media type parameters, which this server doesn't support."
        )

    for media_range in ranges:
        for media_type in supported:
            if not media_range.matches(media_type):
                continue
            if media_type == JSONAPI_MEDIA_TYPE and media_range.params:
                continue
            return media_type

    if any(r.matches(JSON_MEDIA_TYPE) for r in ranges):
        return JSON_MEDIA_TYPE

    raise not_acceptable(
        f"This server can only respond with: {', '.join(supported)}."
    )


def validate_content_type(request: Request, supported_ext: Sequence[str]) -> None:
    """Check a request body's Content-Type.

    ``charset`` is ignored because some browsers add it on their own.

    Raises:
        APIError: 415 for a non-JSON:API type, unknown parameters, or
            extensions this server doesn't support.
    """
    media_type, params = parse_media_type(request.content_type or "")
    params.pop("charset", None)

    if media_type != JSONAPI_MEDIA_TYPE:
        provided = media_type or "no Content-Type"
        raise unsupported_media_type(
            "Unsupported Content-Type.",
            f"The request's Content-Type must be {JSONAPI_MEDIA_TYPE}, "
            f"but you provided {provided}.",
        )

    extra = sorted(set(params) - _ALLOWED_BODY_PARAMS)
    if extra:
        raise unsupported_media_type(
            "Invalid Media Type Parameter(s)",
            f"Unsupported media type parameter(s): {', '.join(extra)}.",
        )

    requested_ext = [ext.strip() for ext in params.get("ext", "").split(",") if ext.strip()]
    unsupported = [ext for ext in requested_ext if ext not in supported_ext]
    if unsupported:
        raise unsupported_media_type(
            "Unsupported Extension(s)",
            f"This server doesn't support the extension(s): {', '.join(unsupported)}.",
        )

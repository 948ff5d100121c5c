"""Content negotiation and request Content-Type validation."""

import pytest

from conftest import make_request
from jsonapi_pipeline.errors import APIError
from jsonapi_pipeline.models import JSON_MEDIA_TYPE, JSONAPI_MEDIA_TYPE
from jsonapi_pipeline.steps.negotiate import (
    negotiate_content_type,
    parse_accept,
    validate_content_type,
)

SUPPORTED = [JSONAPI_MEDIA_TYPE]


def test_parse_accept_orders_by_q_then_header_order():
    ranges = parse_accept("text/html;q=0.5, application/json, */*;q=0.5, image/png;q=0")

    assert [r.full_type for r in ranges] == ["application/json", "text/html", "*/*"]


@pytest.mark.parametrize(
    "accept",
    [None, "", "*/*", JSONAPI_MEDIA_TYPE, "application/*", "text/html, application/vnd.api+json"],
)
def test_negotiates_jsonapi(accept):
    assert negotiate_content_type(accept, SUPPORTED) == JSONAPI_MEDIA_TYPE


def test_falls_back_to_json():
    assert negotiate_content_type("application/json", SUPPORTED) == JSON_MEDIA_TYPE


def test_prefers_jsonapi_over_json_fallback():
    accept = "application/json, application/vnd.api+json;q=0.1"
    assert negotiate_content_type(accept, SUPPORTED) == JSONAPI_MEDIA_TYPE


def test_no_overlap_is_406():
    with pytest.raises(APIError) as exc_info:
        negotiate_content_type("text/html", SUPPORTED)
    assert exc_info.value.status == 406


def test_jsonapi_only_with_params_is_406():
    with pytest.raises(APIError) as exc_info:
        negotiate_content_type('application/vnd.api+json; ext="bulk", */*', SUPPORTED)
    assert exc_info.value.status == 406


def test_jsonapi_with_and_without_params_negotiates():
    accept = 'application/vnd.api+json; ext="bulk", application/vnd.api+json'
    assert negotiate_content_type(accept, SUPPORTED) == JSONAPI_MEDIA_TYPE


def test_zero_weight_is_excluded():
    with pytest.raises(APIError):
        negotiate_content_type("application/vnd.api+json;q=0, text/plain", SUPPORTED)


def test_content_type_accepts_jsonapi_and_ignores_charset():
    request = make_request(content_type="application/vnd.api+json; charset=utf-8")
    validate_content_type(request, [])


@pytest.mark.parametrize("content_type", [None, "application/json", "text/plain"])
def test_content_type_must_be_jsonapi(content_type):
    with pytest.raises(APIError) as exc_info:
        validate_content_type(make_request(content_type=content_type), [])
    assert exc_info.value.status == 415


def test_content_type_rejects_unknown_params():
    request = make_request(content_type="application/vnd.api+json; version=2")
    with pytest.raises(APIError) as exc_info:
        validate_content_type(request, [])
    assert exc_info.value.title == "Invalid Media Type Parameter(s)"


def test_content_type_checks_extensions():
    request = make_request(content_type='application/vnd.api+json; ext="bulk,patch"')

    validate_content_type(request, ["bulk", "patch"])
    with pytest.raises(APIError) as exc_info:
        validate_content_type(request, ["bulk"])
    assert exc_info.value.title == "Unsupported Extension(s)"
    assert "patch" in exc_info.value.detail

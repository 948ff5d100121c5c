"""Shared fixtures: a mocked storage adapter and a small registry.

Invariants:
    - ``adapter`` is a MagicMock specced on Adapter, so every query method
      is an AsyncMock and calls can be asserted on
    - ``schools`` paginates with default 2 / max 4
    - ``people`` has no pagination policy and a ``self`` URL template
"""

from unittest.mock import MagicMock

import pytest

from jsonapi_pipeline.adapters import Adapter
from jsonapi_pipeline.models import Collection, Request
from jsonapi_pipeline.registry import ResourceTypeRegistry


def make_adapter() -> MagicMock:
    adapter = MagicMock(spec=Adapter)
    adapter.find.return_value = (Collection(), None)
    adapter.get_model.return_value = "model-handle"
    return adapter


def make_request(**overrides) -> Request:
    fields = {
        "method": "get",
        "type": "schools",
        "accepts": "application/vnd.api+json",
    }
    fields.update(overrides)
    return Request(**fields)


def jsonapi_body_request(method: str, body: dict, **overrides) -> Request:
    fields = {
        "content_type": "application/vnd.api+json",
        "has_body": True,
        "body": body,
    }
    fields.update(overrides)
    return make_request(method=method, **fields)


@pytest.fixture
def adapter():
    return make_adapter()


@pytest.fixture
def registry(adapter):
    return ResourceTypeRegistry(
        {
            "schools": {
                "pagination": {"default_page_size": 2, "max_page_size": 4},
                "url_templates": {"self": "http://api.test/schools/{id}"},
            },
            "people": {
                "url_templates": {
                    "self": "http://api.test/people/{id}",
                    "relationship": "http://api.test/people/{id}/relationships/{relationship}",
                },
                "relationship_names": ("school",),
            },
        },
        defaults={"db_adapter": adapter},
    )

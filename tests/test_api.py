"""FastAPI binding: routes, body handling, and errors raised outside the pipeline."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from jsonapi_pipeline.app import create_app
from jsonapi_pipeline.config import Settings
from jsonapi_pipeline.models import Collection, Resource

JSONAPI = "application/vnd.api+json"


@pytest_asyncio.fixture
async def client(registry):
    app = create_app(registry, Settings())
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://api.test") as c:
        yield c


@pytest.mark.asyncio
async def test_get_collection(client, adapter):
    adapter.find.return_value = (Collection([Resource("schools", "1", attrs={"name": "Elm"})]), None)

    resp = await client.get("/schools", headers={"Accept": JSONAPI})

    assert resp.status_code == 200
    assert resp.headers["content-type"] == JSONAPI
    assert resp.headers["vary"] == "Accept"
    assert resp.json()["data"] == [
        {
            "type": "schools",
            "id": "1",
            "attributes": {"name": "Elm"},
            "links": {"self": "http://api.test/schools/1"},
        }
    ]
    assert adapter.find.await_args.args[0].limit == 2


@pytest.mark.asyncio
async def test_comma_separated_ids_become_a_list(client, adapter):
    await client.get("/schools/1,2")

    assert adapter.find.await_args.args[0].id_or_ids == ["1", "2"]


@pytest.mark.asyncio
async def test_query_string_reaches_criteria(client, adapter):
    resp = await client.get("/schools", params={"page[limit]": "9"})

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["source"] == {"parameter": "page[limit]"}
    adapter.find.assert_not_called()


@pytest.mark.asyncio
async def test_create_returns_201_with_location(client, adapter):
    adapter.create.return_value = Resource("schools", "42", attrs={"name": "Elm"})

    resp = await client.post(
        "/schools",
        json={"data": {"type": "schools", "attributes": {"name": "Elm"}}},
        headers={"Content-Type": JSONAPI, "Accept": JSONAPI},
    )

    assert resp.status_code == 201
    assert resp.headers["location"] == "http://api.test/schools/42"
    assert resp.json()["data"]["id"] == "42"


@pytest.mark.asyncio
async def test_delete_returns_empty_204(client, adapter):
    resp = await client.delete("/schools/1")

    assert resp.status_code == 204
    assert resp.content == b""
    assert adapter.delete.await_args.args[0].id_or_ids == "1"


@pytest.mark.asyncio
async def test_relationship_route(client, adapter):
    resp = await client.post(
        "/people/1/relationships/school",
        json={"data": {"type": "schools", "id": "3"}},
        headers={"Content-Type": JSONAPI},
    )

    query = adapter.add_to_relationship.await_args.args[0]
    assert (query.id, query.relationship_name) == ("1", "school")
    assert resp.status_code == 204


@pytest.mark.asyncio
async def test_put_is_405(client, adapter):
    resp = await client.put("/schools/1", json={"data": {"type": "schools", "id": "1"}})

    assert resp.status_code == 405
    assert resp.headers["content-type"] == JSONAPI
    adapter.update.assert_not_called()


@pytest.mark.asyncio
async def test_invalid_json_is_400(client, adapter):
    resp = await client.post(
        "/schools", content=b"{not json", headers={"Content-Type": JSONAPI}
    )

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["title"] == "Request contains invalid JSON."
    adapter.create.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_type_honours_plain_json(client):
    resp = await client.get("/martians", headers={"Accept": "application/json"})

    assert resp.status_code == 404
    assert resp.headers["content-type"] == "application/json"


@pytest.mark.asyncio
async def test_unmatched_route_is_jsonapi_404(client):
    resp = await client.get("/a/b/c/d")

    assert resp.status_code == 404
    assert resp.headers["content-type"] == JSONAPI
    assert resp.json()["errors"][0]["status"] == "404"

"""Saved query API tests."""

import pytest
from httpx import AsyncClient

from query_manager.config import settings


async def _create(client: AsyncClient, name: str, body: str, **extra) -> dict:
    resp = await client.post("/api/queries/", json={"name": name, "body": body, **extra})
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_list_queries_empty(client: AsyncClient):
    resp = await client.get("/api/queries/")
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_create_and_get_query(client: AsyncClient):
    payload = {
        "name": "find_by_email",
        "body": "SELECT * FROM users WHERE email = :email",
        "description": "Look a user up by email",
        "parameter_spec": {"email": "string"},
    }
    resp = await client.post("/api/queries/", json=payload, headers={"X-User-Id": "alice"})
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "find_by_email"
    assert data["is_active"] is True
    assert data["created_by"] == "alice"
    assert data["parameter_spec"] == {"email": "string"}

    # By id and by name
    by_id = await client.get(f"/api/queries/{data['id']}")
    by_name = await client.get("/api/queries/find_by_email")
    assert by_id.status_code == 200
    assert by_id.json() == by_name.json()


@pytest.mark.asyncio
async def test_create_defaults_to_anonymous(client: AsyncClient):
    data = await _create(client, "anon", "SELECT 1")
    assert data["created_by"] == settings.anonymous_user


@pytest.mark.asyncio
async def test_create_requires_name_and_body(client: AsyncClient):
    resp = await client.post("/api/queries/", json={"name": "no_body"})
    assert resp.status_code == 422
    resp = await client.post("/api/queries/", json={"body": "SELECT 1"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_create_rejects_uuid_name(client: AsyncClient):
    resp = await client.post(
        "/api/queries/",
        json={"name": "3f2b8c8e-2f0a-4a51-9d8e-4c6a1b2f7d10", "body": "SELECT 1"},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_create_duplicate_query(client: AsyncClient):
    await _create(client, "dup", "SELECT 1")
    resp = await client.post("/api/queries/", json={"name": "dup", "body": "SELECT 2"})
    assert resp.status_code == 409
    assert resp.json()["detail"] == "A query with this name already exists"


@pytest.mark.asyncio
async def test_list_is_ordered_by_name(client: AsyncClient):
    for name in ("zeta", "alpha", "mid"):
        await _create(client, name, "SELECT 1")
    resp = await client.get("/api/queries/")
    names = [q["name"] for q in resp.json()]
    assert names == ["alpha", "mid", "zeta"]
    assert "body" not in resp.json()[0]


@pytest.mark.asyncio
async def test_partial_update(client: AsyncClient):
    created = await _create(client, "before", "SELECT 1", description="keep me")
    resp = await client.patch(f"/api/queries/{created['id']}", json={"name": "after"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "after"
    assert data["body"] == "SELECT 1"
    assert data["description"] == "keep me"

    # Explicit null clears the description
    resp = await client.patch(f"/api/queries/{created['id']}", json={"description": None})
    assert resp.status_code == 200
    assert resp.json()["description"] is None
    assert resp.json()["name"] == "after"


@pytest.mark.asyncio
async def test_update_rejects_null_body(client: AsyncClient):
    created = await _create(client, "nonnull", "SELECT 1")
    resp = await client.patch(f"/api/queries/{created['id']}", json={"body": None})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_update_duplicate_name(client: AsyncClient):
    await _create(client, "taken", "SELECT 1")
    other = await _create(client, "other", "SELECT 1")
    resp = await client.patch(f"/api/queries/{other['id']}", json={"name": "taken"})
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_update_unknown_query(client: AsyncClient):
    resp = await client.patch("/api/queries/nope", json={"name": "x"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_soft_delete_hides_query(client: AsyncClient):
    created = await _create(client, "doomed", "SELECT 1")
    resp = await client.delete(f"/api/queries/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Query deleted successfully"}

    for identifier in (created["id"], "doomed"):
        resp = await client.get(f"/api/queries/{identifier}")
        assert resp.status_code == 404
    assert (await client.get("/api/queries/")).json() == []

    # Reactivation through a partial update
    resp = await client.patch(f"/api/queries/{created['id']}", json={"is_active": True})
    assert resp.status_code == 200
    assert (await client.get("/api/queries/doomed")).status_code == 200


@pytest.mark.asyncio
async def test_delete_unknown_query(client: AsyncClient):
    resp = await client.delete("/api/queries/nope")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_permission_gate(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "authorized_users", ["alice"])

    resp = await client.get("/api/queries/")
    assert resp.status_code == 403
    assert resp.json()["detail"] == "You do not have permission to execute SQL queries"

    resp = await client.get("/api/queries/", headers={"X-User-Id": "mallory"})
    assert resp.status_code == 403

    resp = await client.get("/api/queries/", headers={"X-User-Id": "alice"})
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_store_engine_echoes_sql_only_in_development():
    from query_manager.database import engine

    assert engine.echo == (settings.env == "development")

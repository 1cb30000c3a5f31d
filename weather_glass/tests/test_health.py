import pytest


@pytest.mark.asyncio
async def test_liveness(client):
    r = await client.get("/api/health/liveness")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_root_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_unknown_route_has_error_field(client):
    r = await client.get("/api/nope")
    assert r.status_code == 404
    assert r.json()["error"] == "Not Found"

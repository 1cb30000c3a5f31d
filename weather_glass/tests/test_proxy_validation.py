import pytest

from weather_glass.core.config import PLACEHOLDER_ACCESS_KEY
from weather_glass.core.deps import get_settings
from weather_glass.main import app
from weather_glass.tests.conftest import make_settings

BLANK_VALUES = [None, "", "   "]


def _params(**kwargs):
    return {k: v for k, v in kwargs.items() if v is not None}


@pytest.mark.asyncio
@pytest.mark.parametrize("query", BLANK_VALUES)
async def test_current_requires_query(client, upstream, query):
    r = await client.get("/api/weather", params=_params(query=query))
    assert r.status_code == 400
    assert r.json()["error"] == 'Missing or invalid "query" parameter'
    assert upstream.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("query", BLANK_VALUES)
async def test_historical_requires_query(client, upstream, query):
    r = await client.get(
        "/api/historical", params=_params(query=query, historical_date="2024-01-01")
    )
    assert r.status_code == 400
    assert "query" in r.json()["error"]
    assert upstream.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("historical_date", BLANK_VALUES)
async def test_historical_requires_date(client, upstream, historical_date):
    r = await client.get(
        "/api/historical", params=_params(query="London", historical_date=historical_date)
    )
    assert r.status_code == 400
    assert "historical_date" in r.json()["error"]
    assert upstream.calls == []


@pytest.mark.asyncio
async def test_historical_date_format_is_not_checked_locally(client, upstream):
    # 日期格式交给上游校验
    r = await client.get("/api/historical", params={"query": "London", "historical_date": "yesterday"})
    assert r.status_code == 200
    assert upstream.last_params["historical_date"] == "yesterday"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [
        {},
        {"query": "  "},
        {"lat": "36.7783"},
        {"lon": "-119.4179"},
        {"lat": " ", "lon": "-119.4179"},
    ],
)
async def test_marine_requires_query_or_coordinates(client, upstream, params):
    r = await client.get("/api/marine", params=params)
    assert r.status_code == 400
    assert "lat" in r.json()["error"]
    assert upstream.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("key", [None, "", "   ", PLACEHOLDER_ACCESS_KEY])
async def test_missing_key_fails_fast(client, upstream, key):
    app.dependency_overrides[get_settings] = lambda: make_settings(weatherstack_key=key)

    for path, params in [
        ("/api/weather", {"query": "London"}),
        ("/api/historical", {"query": "London", "historical_date": "2024-01-01"}),
        ("/api/marine", {"lat": "36.7783", "lon": "-119.4179"}),
    ]:
        r = await client.get(path, params=params)
        assert r.status_code == 500
        assert "Missing API key" in r.json()["error"]

    assert upstream.calls == []


@pytest.mark.asyncio
async def test_validation_runs_before_key_check(client, upstream):
    app.dependency_overrides[get_settings] = lambda: make_settings(weatherstack_key=None)
    r = await client.get("/api/weather")
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_build_time_key_is_used_as_fallback(client, upstream):
    app.dependency_overrides[get_settings] = lambda: make_settings(
        weatherstack_key=None, vite_weatherstack_key=" vite-key "
    )
    r = await client.get("/api/weather", params={"query": "London"})
    assert r.status_code == 200
    assert upstream.last_params["access_key"] == "vite-key"


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["POST", "PUT", "DELETE"])
async def test_non_get_is_rejected(client, upstream, method):
    r = await client.request(method, "/api/weather", params={"query": "London"})
    assert r.status_code == 405
    assert r.json()["error"] == "Method not allowed. Use GET."
    assert upstream.calls == []


def test_resolve_access_key_prefers_runtime_name():
    s = make_settings(weatherstack_key="runtime", vite_weatherstack_key="build")
    assert s.resolve_access_key() == "runtime"


def test_settings_read_both_env_names(monkeypatch):
    monkeypatch.delenv("WEATHERSTACK_KEY", raising=False)
    monkeypatch.delenv("WEATHERSTACK_UNITS", raising=False)
    monkeypatch.setenv("VITE_WEATHERSTACK_KEY", "from-vite")
    monkeypatch.setenv("VITE_WEATHERSTACK_UNITS", "f")

    from weather_glass.core.config import Settings

    s = Settings(_env_file=None)
    assert s.weatherstack_key is None
    assert s.resolve_access_key() == "from-vite"
    assert s.weatherstack_units == "f"

# weather_glass/tests/conftest.py
from __future__ import annotations

from typing import Callable, List

import httpx
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager

from weather_glass.core.config import Settings
from weather_glass.core.deps import get_http_client, get_settings
from weather_glass.main import app

UPSTREAM_BASE = "https://api.weatherstack.test"


class FakeUpstream:
    """
    代替 Weatherstack 的 MockTransport：
    - calls 记录收到的所有请求
    - respond 可以在测试里替换成任意 handler
    """

    def __init__(self) -> None:
        self.calls: List[httpx.Request] = []
        self.respond: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"request": {"type": "City"}, "location": {"name": "London"}, "current": {"temperature": 12}}
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        return self.respond(request)

    @property
    def last_params(self) -> httpx.QueryParams:
        return self.calls[-1].url.params


def make_settings(**overrides) -> Settings:
    values = {
        "weatherstack_key": "test-key",
        "vite_weatherstack_key": None,
        "weatherstack_base_url": UPSTREAM_BASE,
        "weatherstack_units": "m",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest_asyncio.fixture
async def client(upstream, settings):
    """
    驱动整个 FastAPI 应用的测试客户端：
    - 触发 lifespan
    - 上游 http client 换成 MockTransport
    - settings 用测试专用的实例
    """
    upstream_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    app.dependency_overrides[get_http_client] = lambda: upstream_client
    app.dependency_overrides[get_settings] = lambda: settings

    async with LifespanManager(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac

    await upstream_client.aclose()
    app.dependency_overrides.clear()

from __future__ import annotations

import httpx
from fastapi import Request

from weather_glass.core.config import Settings, settings


def get_settings() -> Settings:
    return settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    # lifespan 里创建的全局 client
    return request.app.state.http_client

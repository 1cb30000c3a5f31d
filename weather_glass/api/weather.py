# weather_glass/api/weather.py
from __future__ import annotations

from typing import Any, Optional

import httpx
from fastapi import APIRouter, Depends, Query

from weather_glass.core.config import Settings
from weather_glass.core.deps import get_http_client, get_settings
from weather_glass.services.proxy_service import ProxyService

router = APIRouter(prefix="/api", tags=["weather"])

# 必填参数也声明成 Optional：缺失时要返回 400 + 可读的 error，而不是 FastAPI 默认的 422


def get_proxy_service(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> ProxyService:
    return ProxyService(http_client=http_client, settings=settings)


@router.get("/weather")
async def get_current_weather(
    query: Optional[str] = Query(None, description="城市名、坐标、邮编或 fetch:ip"),
    units: Optional[str] = Query(None, description="m / f / s"),
    service: ProxyService = Depends(get_proxy_service),
) -> Any:
    return await service.current(query, units=units)


@router.get("/historical")
async def get_historical_weather(
    query: Optional[str] = Query(None),
    historical_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    hourly: Optional[str] = Query(None),
    interval: Optional[str] = Query(None),
    units: Optional[str] = Query(None),
    service: ProxyService = Depends(get_proxy_service),
) -> Any:
    return await service.historical(
        query,
        historical_date,
        hourly=hourly,
        interval=interval,
        units=units,
    )


@router.get("/marine")
async def get_marine_weather(
    query: Optional[str] = Query(None),
    lat: Optional[str] = Query(None),
    lon: Optional[str] = Query(None),
    tide: Optional[str] = Query(None),
    units: Optional[str] = Query(None),
    service: ProxyService = Depends(get_proxy_service),
) -> Any:
    return await service.marine(query, lat=lat, lon=lon, tide=tide, units=units)

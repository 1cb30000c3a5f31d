# weather_glass/clients/proxy_client.py
"""调用本服务代理路由的客户端，所有结果都以 Outcome 返回，不抛异常"""
from __future__ import annotations

import logging
import math
from typing import Dict, Optional, Union

import httpx

from weather_glass.core.config import settings
from weather_glass.schemas.weather_schemas import ErrOutcome, Outcome, UnitSystem
from weather_glass.services.outcome import NETWORK_ERROR_MESSAGE, classify_response

logger = logging.getLogger(__name__)

INVALID_COORDINATES_MESSAGE = "Please enter valid numeric latitude and longitude."

ParamValue = Union[str, int, float, bool, None]


def to_query(params: Dict[str, ParamValue]) -> Dict[str, str]:
    """丢掉 None，其余转成字符串"""
    return {k: str(v) for k, v in params.items() if v is not None}


def _finite(value: Union[str, float, None]) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class WeatherProxyClient:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: Optional[str] = None,
        units: Optional[str] = None,
    ):
        self.http_client = http_client
        self.base_url = (base_url or settings.weather_proxy_url).rstrip("/")
        self.units = UnitSystem.from_code(units or settings.weatherstack_units)

    async def request(self, route: str, params: Dict[str, ParamValue]) -> Outcome:
        query = to_query({"units": self.units.value, **params})
        url = f"{self.base_url}/{route.lstrip('/')}"

        try:
            resp = await self.http_client.get(url, params=query)
        except httpx.HTTPError as e:
            logger.warning("Weather proxy request to %s failed: %s", url, e)
            return ErrOutcome(message=NETWORK_ERROR_MESSAGE, details=str(e))

        return classify_response(resp)

    async def get_current_weather(self, query: str) -> Outcome:
        return await self.request("/weather", {"query": query})

    async def get_historical_weather(
        self, query: str, date: str, hourly: bool = True
    ) -> Outcome:
        return await self.request(
            "/historical",
            {
                "query": query,
                "historical_date": date,
                "hourly": 1 if hourly else 0,
                "interval": 1,
            },
        )

    async def get_marine_weather(
        self,
        query: Optional[str] = None,
        lat: Union[str, float, None] = None,
        lon: Union[str, float, None] = None,
        tide: bool = False,
    ) -> Outcome:
        # 上游 marine 接口用 "lat,lon" 作为 query
        if not (query and query.strip()):
            lat_num, lon_num = _finite(lat), _finite(lon)
            if lat_num is None or lon_num is None:
                return ErrOutcome(message=INVALID_COORDINATES_MESSAGE)
            query = f"{str(lat).strip()},{str(lon).strip()}"

        return await self.request("/marine", {"query": query, "tide": 1 if tide else 0})

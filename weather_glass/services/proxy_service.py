# weather_glass/services/proxy_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from weather_glass.clients.weatherstack_client import WeatherstackClient
from weather_glass.core.config import Settings
from weather_glass.core.errors import ProxyError
from weather_glass.schemas.weather_schemas import UnitSystem, is_provider_error

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "Missing API key. Set WEATHERSTACK_KEY or VITE_WEATHERSTACK_KEY environment variable."
)

# 每种模式对应的上游路径和失败提示
MODES: Dict[str, Dict[str, str]] = {
    "current": {"endpoint": "/current", "failure": "Failed to fetch weather data"},
    "historical": {
        "endpoint": "/historical",
        "failure": "Failed to fetch historical weather data",
    },
    "marine": {"endpoint": "/marine", "failure": "Failed to fetch marine weather data"},
}


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or value.strip() == ""


def _flag(value: str) -> str:
    return "1" if value in ("true", "1") else "0"


class ProxyService:
    """
    三个代理路由共用的转发逻辑：
    - 参数只做存在性/非空校验（格式交给上游校验）
    - key 缺失时直接 500，不往上游发
    - 上游响应统一映射成 (status, body)
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        self.http_client = http_client
        self.settings = settings

    # ---------- 参数校验 ----------
    @staticmethod
    def _require(value: Optional[str], message: str) -> str:
        if _is_blank(value):
            raise ProxyError.with_message(400, message)
        return value.strip()

    def _units(self, units: Optional[str]) -> str:
        return units or UnitSystem.METRIC.value

    # ---------- 三种模式 ----------
    async def current(self, query: Optional[str], units: Optional[str] = None) -> Any:
        q = self._require(query, 'Missing or invalid "query" parameter')
        return await self._forward("current", {"query": q, "units": self._units(units)})

    async def historical(
        self,
        query: Optional[str],
        historical_date: Optional[str],
        hourly: Optional[str] = None,
        interval: Optional[str] = None,
        units: Optional[str] = None,
    ) -> Any:
        q = self._require(query, 'Missing or invalid "query" parameter')
        date = self._require(
            historical_date,
            'Missing or invalid "historical_date" parameter (format: YYYY-MM-DD)',
        )
        params = {"query": q, "historical_date": date, "units": self._units(units)}
        if hourly is not None:
            params["hourly"] = _flag(hourly)
        if interval is not None:
            params["interval"] = str(interval)
        return await self._forward("historical", params)

    async def marine(
        self,
        query: Optional[str],
        lat: Optional[str] = None,
        lon: Optional[str] = None,
        tide: Optional[str] = None,
        units: Optional[str] = None,
    ) -> Any:
        # 没给 query 时用 lat,lon 拼
        value = query
        if _is_blank(value) and not _is_blank(lat) and not _is_blank(lon):
            value = f"{lat.strip()},{lon.strip()}"
        q = self._require(
            value,
            'Missing or invalid "query" parameter (or provide both "lat" and "lon")',
        )
        params = {"query": q, "units": self._units(units)}
        if tide is not None:
            params["tide"] = _flag(tide)
        return await self._forward("marine", params)

    # ---------- 转发 + 响应映射 ----------
    def _client(self) -> WeatherstackClient:
        access_key = self.settings.resolve_access_key()
        if access_key is None:
            logger.error(
                "API key missing: WEATHERSTACK_KEY=%s VITE_WEATHERSTACK_KEY=%s",
                "set" if self.settings.weatherstack_key else "not set",
                "set" if self.settings.vite_weatherstack_key else "not set",
            )
            raise ProxyError.with_message(500, MISSING_KEY_MESSAGE)
        return WeatherstackClient(
            self.http_client, self.settings.weatherstack_base_url, access_key
        )

    async def _forward(self, mode: str, params: Dict[str, str]) -> Any:
        mode_info = MODES[mode]
        client = self._client()

        try:
            resp = await client.fetch(mode_info["endpoint"], params)

            if not resp.is_success:
                body = self._try_json(resp)
                if is_provider_error(body):
                    raise ProxyError(400, body)
                raise ProxyError.with_message(
                    resp.status_code,
                    f"Weatherstack API error: {resp.status_code}",
                    details=resp.text,
                )

            data = resp.json()
        except ProxyError:
            raise
        except Exception as e:
            logger.exception("Weatherstack %s API request failed: %s", mode, e)
            raise ProxyError.with_message(500, mode_info["failure"], details=str(e))

        # 上游错误信封原样返回，客户端据此判断套餐限制
        if is_provider_error(data):
            logger.warning(
                "Weatherstack %s error: code=%s type=%s",
                mode,
                data["error"].get("code"),
                data["error"].get("type"),
            )
            raise ProxyError(400, data)

        return data

    @staticmethod
    def _try_json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError:
            return None

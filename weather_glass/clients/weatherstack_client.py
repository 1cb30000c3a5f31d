# weather_glass/clients/weatherstack_client.py
from __future__ import annotations

import logging
from typing import Dict

import httpx

logger = logging.getLogger(__name__)


def masked_url(url: httpx.URL) -> str:
    """日志里不能出现明文 key；按参数替换，不受 URL 编码影响"""
    if "access_key" not in url.params:
        return str(url)
    return str(url.copy_set_param("access_key", "***"))


class WeatherstackClient:
    """
    上游 Weatherstack 的薄封装：只负责拼 URL、发 GET，
    不做重试，不解析响应，错误映射交给 ProxyService。
    """

    def __init__(self, http_client: httpx.AsyncClient, base_url: str, access_key: str):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.access_key = access_key

    async def fetch(self, endpoint: str, params: Dict[str, str]) -> httpx.Response:
        query = {"access_key": self.access_key, **params}
        request = self.http_client.build_request(
            "GET", f"{self.base_url}/{endpoint.lstrip('/')}", params=query
        )
        logger.info("Weatherstack API request: %s", masked_url(request.url))
        return await self.http_client.send(request)

# weather_glass/schemas/weather_schemas.py
from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator

# 特殊 query：让上游按调用方 IP 定位
FETCH_IP_QUERY = "fetch:ip"


class UnitSystem(str, Enum):
    METRIC = "m"
    IMPERIAL = "f"
    SCIENTIFIC = "s"

    @property
    def label(self) -> str:
        return _UNIT_LABELS[self]

    @classmethod
    def from_code(cls, code: Optional[str]) -> "UnitSystem":
        """未知或空的单位代码按公制处理"""
        try:
            return cls((code or "").strip().lower())
        except ValueError:
            return cls.METRIC


_UNIT_LABELS = {
    UnitSystem.METRIC: "°C",
    UnitSystem.IMPERIAL: "°F",
    UnitSystem.SCIENTIFIC: "K",
}


class WeatherQuery(BaseModel):
    """
    用户输入的查询参数。
    query 去掉空白后不能为空；只有 marine 模式可以改用 lat/lon。
    """

    mode: Literal["current", "historical", "marine"] = "current"
    query: Optional[str] = None
    historical_date: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    hourly: Optional[bool] = None
    tide: Optional[bool] = None
    units: UnitSystem = UnitSystem.METRIC

    @model_validator(mode="after")
    def _check_location(self) -> "WeatherQuery":
        if self.query is not None:
            self.query = self.query.strip() or None
        if self.query:
            return self
        if self.mode == "marine" and self.lat is not None and self.lon is not None:
            return self
        if self.mode == "marine":
            raise ValueError("query or both lat and lon are required")
        raise ValueError("query must not be blank")


class ProviderResponse(BaseModel):
    """
    上游成功响应。不同订阅等级返回的字段不一样，
    这里只声明几个顶层 key，值的形状不做校验，其余字段全部原样保留。
    """

    model_config = ConfigDict(extra="allow")

    request: Optional[Any] = None
    location: Optional[Any] = None
    current: Optional[Any] = None
    historical: Optional[Any] = None
    marine: Optional[Any] = None
    tides: Optional[Any] = None
    forecast: Optional[Any] = None


def is_provider_error(body: Any) -> bool:
    """
    上游错误信封：{"success": false, "error": {"code", "type", "info"}}
    success 字面量为 false 且 error 是对象才算
    """
    return (
        isinstance(body, dict)
        and body.get("success") is False
        and isinstance(body.get("error"), dict)
    )


class OkOutcome(BaseModel):
    ok: Literal[True] = True
    data: Any


class ErrOutcome(BaseModel):
    ok: Literal[False] = False
    message: str
    details: Optional[Any] = None


Outcome = Union[OkOutcome, ErrOutcome]

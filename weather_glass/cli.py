# weather_glass/cli.py
"""命令行查询：通过代理拉取 current / historical / marine 天气并打印结果"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import date, timedelta
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from weather_glass.clients.proxy_client import WeatherProxyClient
from weather_glass.core.config import settings
from weather_glass.schemas.weather_schemas import (
    ErrOutcome,
    Outcome,
    ProviderResponse,
    UnitSystem,
    WeatherQuery,
)

PLANS_HINT = """Available Plans:
  - Free Plan: Current weather only
  - Standard Plan: Current + Historical weather
  - Professional Plan: All features including Marine weather
View plans and upgrade: https://weatherstack.com/product"""


def _yesterday() -> str:
    return (date.today() - timedelta(days=1)).isoformat()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query weather through the Weather Glass proxy")
    parser.add_argument("--proxy-url", default=None, help="proxy base URL, e.g. http://127.0.0.1:8000/api")
    parser.add_argument("--units", choices=[u.value for u in UnitSystem], default=None)
    parser.add_argument("--raw", action="store_true", help="print the raw JSON response")

    sub = parser.add_subparsers(dest="mode", required=True)

    current = sub.add_parser("current", help="current weather")
    current.add_argument("query", help="city, coordinates, postal code or fetch:ip")

    historical = sub.add_parser("historical", help="historical weather")
    historical.add_argument("query")
    historical.add_argument("--date", default=_yesterday(), help="YYYY-MM-DD (default: yesterday)")
    historical.add_argument("--no-hourly", dest="hourly", action="store_false")

    marine = sub.add_parser("marine", help="marine weather")
    marine.add_argument("--query", default=None)
    marine.add_argument("--lat", type=float, default=36.7783)
    marine.add_argument("--lon", type=float, default=-119.4179)
    marine.add_argument("--no-tide", dest="tide", action="store_false")

    return parser


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _location_line(resp: ProviderResponse) -> Optional[str]:
    location = _as_dict(resp.location)
    parts = [location.get(k) for k in ("name", "region", "country")]
    parts = [str(p) for p in parts if p]
    return ", ".join(parts) if parts else None


def render(mode: str, outcome: Outcome, units: UnitSystem, raw: bool = False) -> str:
    if isinstance(outcome, ErrOutcome):
        lines = [f"Error: {outcome.message}"]
        if "Plan Limitation" in outcome.message:
            lines += ["", PLANS_HINT]
        return "\n".join(lines)

    data: Any = outcome.data
    if raw or not isinstance(data, dict):
        return json.dumps(data, ensure_ascii=False, indent=2)

    # 字段形状随套餐变化，不是 dict 的块直接跳过
    resp = ProviderResponse.model_validate(data)
    lines = []
    where = _location_line(resp)
    if where:
        lines.append(where)

    if mode == "current":
        current = _as_dict(resp.current)
        descriptions = current.get("weather_descriptions")
        if not isinstance(descriptions, list):
            descriptions = []
        text = ", ".join(str(d) for d in descriptions)
        if current.get("temperature") is not None:
            lines.append(f"{current['temperature']}{units.label} {text}".rstrip())
        if current.get("feelslike") is not None:
            lines.append(f"Feels like {current['feelslike']}{units.label}")
    elif mode == "historical":
        for day, values in _as_dict(resp.historical).items():
            if not isinstance(values, dict):
                continue
            lines.append(
                f"{day}: min {values.get('mintemp')}{units.label} / "
                f"max {values.get('maxtemp')}{units.label} / avg {values.get('avgtemp')}{units.label}"
            )
    else:
        # marine 响应字段随套餐变化，直接打印原始块
        for key in ("marine", "forecast", "tides"):
            value = getattr(resp, key)
            if value is not None:
                lines.append(f"{key}: {json.dumps(value, ensure_ascii=False)}")

    return "\n".join(lines) if lines else json.dumps(data, ensure_ascii=False, indent=2)


def query_from_args(args: argparse.Namespace) -> WeatherQuery:
    units = UnitSystem.from_code(args.units or settings.weatherstack_units)
    if args.mode == "marine":
        return WeatherQuery(
            mode="marine", query=args.query, lat=args.lat, lon=args.lon, tide=args.tide, units=units
        )
    if args.mode == "historical":
        return WeatherQuery(
            mode="historical", query=args.query, historical_date=args.date, hourly=args.hourly, units=units
        )
    return WeatherQuery(mode="current", query=args.query, units=units)


async def run(mode: str, wq: WeatherQuery, proxy_url: Optional[str] = None) -> Outcome:
    async with httpx.AsyncClient() as http_client:
        client = WeatherProxyClient(http_client, base_url=proxy_url, units=wq.units.value)
        if mode == "current":
            return await client.get_current_weather(wq.query)
        if mode == "historical":
            return await client.get_historical_weather(wq.query, wq.historical_date, bool(wq.hourly))
        return await client.get_marine_weather(wq.query, lat=wq.lat, lon=wq.lon, tide=bool(wq.tide))


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        wq = query_from_args(args)
    except ValidationError as e:
        parser.error(e.errors()[0]["msg"])
    outcome = asyncio.run(run(args.mode, wq, proxy_url=args.proxy_url))
    print(render(args.mode, outcome, wq.units, raw=args.raw))
    return 0 if outcome.ok else 1


if __name__ == "__main__":
    sys.exit(main())

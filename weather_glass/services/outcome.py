# weather_glass/services/outcome.py
"""
把代理返回的 HTTP 响应归类成 Outcome，并识别“套餐不支持”类错误

判断顺序：
1. 网络异常（由调用方处理）
2. JSON 解析失败
3. 代理自己的错误信封 {"error": "..."}（没有 success 字段）
4. 上游错误信封 {"success": false, "error": {...}} -> 套餐限制识别
5. 非 2xx
6. 成功
"""
from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from weather_glass.schemas.weather_schemas import (
    ErrOutcome,
    OkOutcome,
    Outcome,
    is_provider_error,
)

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error while contacting the weather proxy."
PARSE_ERROR_MESSAGE = "Failed to parse API response JSON."
GENERIC_PROVIDER_MESSAGE = "Weatherstack error."

# 上游的 usage restricted 错误码
USAGE_RESTRICTED_CODE = 603

PLAN_LIMITED_TYPES = {
    "historical_queries_not_supported_on_plan",
    "bulk_queries_not_supported_on_plan",
    "forecast_days_not_supported_on_plan",
}

# 上游文案可能改动，文本匹配只是兜底
PLAN_LIMITED_PHRASES = ("subscription plan", "upgrade your account", "does not support")

PLANS_URL = "https://weatherstack.com/product"

HISTORICAL_REMEDIATION = (
    "Plan Limitation: Historical weather data requires Standard plan or higher. "
    f"Upgrade at {PLANS_URL}"
)
MARINE_REMEDIATION = (
    "Plan Limitation: Marine weather data requires Professional plan or higher. "
    f"Upgrade at {PLANS_URL}"
)
GENERIC_REMEDIATION = (
    "Plan Limitation: This feature requires a higher subscription plan. "
    f"Upgrade at {PLANS_URL}"
)


def is_plan_limitation(error: Dict[str, Any]) -> bool:
    if str(error.get("code")) == str(USAGE_RESTRICTED_CODE):
        return True
    if error.get("type") in PLAN_LIMITED_TYPES:
        return True
    info = str(error.get("info") or "").lower()
    return any(phrase in info for phrase in PLAN_LIMITED_PHRASES)


def plan_remediation(error: Dict[str, Any]) -> str:
    error_type = str(error.get("type") or "").lower()
    info = str(error.get("info") or "").lower()
    if "historical" in error_type:
        return HISTORICAL_REMEDIATION
    if "marine" in info:
        return MARINE_REMEDIATION
    return GENERIC_REMEDIATION


def classify_provider_error(body: Dict[str, Any]) -> ErrOutcome:
    error = body["error"]
    # info 不一定是字符串（上游偶尔返回数字或对象）
    info = str(error.get("info") or GENERIC_PROVIDER_MESSAGE)

    if is_plan_limitation(error):
        logger.info(
            "Plan limitation detected: code=%s type=%s", error.get("code"), error.get("type")
        )
        return ErrOutcome(message=f"{info}\n\n{plan_remediation(error)}", details=error)

    return ErrOutcome(message=info, details=error)


def classify_response(resp: httpx.Response) -> Outcome:
    try:
        body = resp.json()
    except ValueError as e:
        # 非 2xx 且不是 JSON（比如网关 503 页面）按 HTTP 错误报
        if not resp.is_success:
            return ErrOutcome(message=f"HTTP error ({resp.status_code}).", details=resp.text)
        return ErrOutcome(message=PARSE_ERROR_MESSAGE, details=str(e))

    if isinstance(body, dict) and "error" in body and "success" not in body:
        return ErrOutcome(message=str(body["error"]), details=body)

    if is_provider_error(body):
        return classify_provider_error(body)

    if not resp.is_success:
        return ErrOutcome(message=f"HTTP error ({resp.status_code}).", details=body)

    return OkOutcome(data=body)

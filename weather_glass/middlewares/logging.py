# weather_glass/middlewares/logging.py
"""请求/响应日志中间件

使用纯 ASGI 中间件而非 BaseHTTPMiddleware，避免 Python 3.11+ 中的
ExceptionGroup 兼容性问题。
"""
from __future__ import annotations

import json
import logging
import re
import time
from urllib.parse import parse_qsl

from starlette.types import ASGIApp, Receive, Scope, Send, Message

logger = logging.getLogger("api.access")
logger.setLevel(logging.DEBUG)

if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)s | %(message)s"
    ))
    logger.addHandler(handler)

# 响应日志最多保留的字符数
MAX_LOGGED_BODY = 2000

# 不允许出现在日志里的查询参数
SENSITIVE_PARAMS = {"access_key"}


class AccessKeyFilter(logging.Filter):
    """
    把日志里 URL 的 access_key 值换成 ***。
    httpx 自己的 "httpx" logger 会在 INFO 打出完整上游 URL，需要挂上这个过滤器。
    """

    pattern = re.compile(r"(access_key=)[^&\s\"']+")

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = self.pattern.sub(r"\1***", message)
        if masked != message:
            record.msg = masked
            record.args = ()
        return True


def _masked_query(query_string: str) -> dict:
    params = {}
    for k, v in parse_qsl(query_string, keep_blank_values=True):
        params[k] = "***" if k in SENSITIVE_PARAMS else v
    return params


class LoggingMiddleware:
    """
    记录请求参数和响应内容
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        method = scope.get("method", "")
        path = scope.get("path", "")
        query_params = _masked_query(scope.get("query_string", b"").decode("utf-8"))

        req_log = f">>> {method} {path}"
        if query_params:
            req_log += f" | Query: {json.dumps(query_params, ensure_ascii=False)}"

        response_status = 0
        response_body_parts: list[bytes] = []

        async def send_wrapper(message: Message) -> None:
            nonlocal response_status
            if message["type"] == "http.response.start":
                response_status = message.get("status", 0)
            elif message["type"] == "http.response.body":
                body = message.get("body", b"")
                if body:
                    response_body_parts.append(body)
            await send(message)

        logger.info(req_log)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            duration = time.time() - start_time

            resp_content = None
            if response_body_parts:
                try:
                    resp_content = json.loads(b"".join(response_body_parts).decode("utf-8"))
                except ValueError:
                    resp_content = None

            resp_log = f"<<< {method} {path} | Status: {response_status} | Time: {duration:.3f}s"
            if resp_content:
                resp_json = json.dumps(resp_content, ensure_ascii=False, indent=2)
                # 截断过长的响应
                if len(resp_json) > MAX_LOGGED_BODY:
                    resp_json = resp_json[:MAX_LOGGED_BODY] + "...[truncated]"
                resp_log += f"\n{resp_json}"

            logger.info(resp_log)


def install_access_key_filter(logger_name: str = "httpx") -> None:
    target = logging.getLogger(logger_name)
    if not any(isinstance(f, AccessKeyFilter) for f in target.filters):
        target.addFilter(AccessKeyFilter())

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ProxyError(Exception):
    """
    代理层的终止性错误：带 HTTP 状态码和要原样返回给调用方的 JSON body。
    由 service 抛出，proxy_error_handler 统一渲染。
    """

    def __init__(self, status_code: int, content: Any):
        super().__init__(status_code, content)
        self.status_code = status_code
        self.content = content

    @classmethod
    def with_message(cls, status_code: int, message: str, **extra: Any) -> "ProxyError":
        return cls(status_code, {"error": message, **extra})


async def proxy_error_handler(request: Request, exc: ProxyError):
    return JSONResponse(status_code=exc.status_code, content=exc.content)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail
    if exc.status_code == 405:
        message = "Method not allowed. Use GET."
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": message,
            "path": str(request.url.path),
            "requestId": getattr(request.state, "request_id", None),
        },
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request parameters",
            "details": exc.errors(),
            "path": str(request.url.path),
            "requestId": getattr(request.state, "request_id", None),
        },
    )

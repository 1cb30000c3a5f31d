# weather_glass/main.py
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from weather_glass.api.weather import router as weather_router
from weather_glass.api.health import router as health_router
from weather_glass.core.errors import (
    ProxyError,
    http_exception_handler,
    proxy_error_handler,
    validation_exception_handler,
)
from weather_glass.middlewares.request_id import request_id_middleware
from weather_glass.middlewares.logging import LoggingMiddleware, install_access_key_filter


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 全局 httpx.AsyncClient，超时沿用 httpx 默认值
    http_client = httpx.AsyncClient()
    app.state.http_client = http_client
    yield
    await http_client.aclose()


app = FastAPI(
    title="Weather Glass Proxy",
    lifespan=lifespan,
)

# httpx 会在 INFO 记录完整上游 URL（含 access_key）
install_access_key_filter()

# middleware
app.middleware("http")(request_id_middleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

# exception handlers
app.add_exception_handler(ProxyError, proxy_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# routers
app.include_router(weather_router)
app.include_router(health_router)


@app.get("/health")
async def health():
    return {"status": "ok", "message": "Weather proxy is running!"}

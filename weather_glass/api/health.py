from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/liveness")
async def liveness():
    # 进程活着就算 OK；代理本身无状态，没有 readiness 依赖
    return {"status": "ok"}

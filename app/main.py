"""
FastAPI 应用主入口
"""

import sys
from contextlib import asynccontextmanager
from pathlib import Path

# 将项目根目录添加到 python path，以便直接运行 main.py 时能找到 app 模块
sys.path.append(str(Path(__file__).resolve().parent.parent))

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from sqlalchemy import text

from app.cache.redis_client import redis_client
from app.config import get_settings
from app.db.engine import async_session, engine
from app.observability.logging_config import setup_logging
from app.observability.metrics import ERROR_TOTAL
from app.observability.metrics_middleware import MetricsMiddleware
from app.observability.request_logger import RequestLoggerMiddleware

settings = get_settings()

# 初始化日志（在 import 时就生效）
setup_logging(env=settings.ENV, level=settings.log_level)
log = structlog.get_logger()

from app.api.health import router as health_router
from app.api.playground import router as playground_router, tool_registry
from app.playground.service import list_active_tools
from app.security.login import router as auth_router


async def check_tool_coverage() -> list[str]:
    """启动自检：已启用但没有执行实现的工具只告警，不阻止启动"""
    async with async_session() as db:
        active = await list_active_tools(db)
    missing = tool_registry.missing_implementations(t.slug for t in active)
    if missing:
        log.warning("已启用工具缺少执行实现，execute 将返回 Tool not implemented", slugs=missing)
    return missing


@asynccontextmanager
async def lifespan(application: FastAPI):
    """应用生命周期：启动时预检依赖服务，关闭时清理资源"""
    log.info("应用启动", env=settings.ENV, app=settings.APP_NAME)

    # ── Warm-up：Fail Fast，依赖不可用时拒绝启动 ──
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    log.info("数据库连接正常")

    await redis_client.ping()
    log.info("Redis 连接正常")

    await check_tool_coverage()
    log.info("工具注册完成", count=tool_registry.tool_count, slugs=tool_registry.slugs)

    yield

    # 关闭数据库连接池
    await engine.dispose()
    # 关闭 Redis 连接池
    await redis_client.aclose()
    log.info("应用关闭，资源已释放")


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

# ── 中间件（执行顺序：从下往上注册，从上往下执行） ──
app.add_middleware(RequestLoggerMiddleware)
app.add_middleware(MetricsMiddleware)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """兜底：未预期异常统一记录上下文后返回 500，领域错误不会走到这里"""
    endpoint = request.scope.get("endpoint")
    log.error(
        "未处理异常",
        method=request.method,
        path=request.url.path,
        operation=getattr(endpoint, "__name__", None),
        path_params=request.path_params,
        error=str(exc),
        exc_info=exc,
    )
    ERROR_TOTAL.labels(error_type=type(exc).__name__).inc()
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


# ── Prometheus 指标端点 ──
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# ── 路由注册 ──
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(playground_router)


if __name__ == "__main__":
    import uvicorn
    # 允许直接运行 python app/main.py 启动服务
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.APP_PORT, reload=True)

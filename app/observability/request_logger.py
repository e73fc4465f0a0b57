"""
请求日志中间件：每个请求绑定 trace_id，结束时记录路由模板、状态码与耗时

/metrics 与 /health 是探针流量，不打日志。
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

log = structlog.get_logger()

_QUIET_PATHS = ("/metrics", "/health")


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """HTTP 请求日志 + trace_id 上下文注入"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        trace_id = request.headers.get("X-Trace-ID") or uuid.uuid4().hex

        # 路由里再 bind 的 tool_slug / operation 也会出现在本请求的后续日志中
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(trace_id=trace_id)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = int((time.monotonic() - start) * 1000)

        if not request.url.path.startswith(_QUIET_PATHS):
            route = request.scope.get("route")
            log.info(
                "请求完成",
                method=request.method,
                path=request.url.path,
                route=getattr(route, "path", None),
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

        response.headers["X-Trace-ID"] = trace_id
        response.headers["X-Duration-Ms"] = str(duration_ms)
        return response

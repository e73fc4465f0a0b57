"""
Prometheus 指标定义

所有指标统一在此文件定义，中间件和业务代码按需引用。
"""

from prometheus_client import Counter, Histogram

# ── 请求级指标 ──

REQUEST_TOTAL = Counter(
    "playground_request_total",
    "HTTP 请求总数",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "playground_request_duration_ms",
    "HTTP 请求耗时（毫秒）",
    ["method", "endpoint"],
    buckets=[10, 25, 50, 100, 200, 500, 1000, 2000, 5000],
)

# ── 工具执行指标 ──

TOOL_CALL_TOTAL = Counter(
    "playground_tool_call_total",
    "工具执行总数",
    ["tool_slug", "status"],  # status: success/error
)

# ── 错误指标 ──

ERROR_TOTAL = Counter(
    "playground_error_total",
    "未处理异常总数",
    ["error_type"],
)

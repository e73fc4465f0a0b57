"""
工具注册中心：按 slug 封闭映射到工具实现，统一入参校验与执行分发

- execute：未注册的 slug 返回 {"error": "Tool not implemented"}，入参不合法返回 {"error": "Invalid input: ..."}
- 工具内部的意外异常不在这里吞掉，交给应用顶层异常处理转成 500
- missing_implementations：启动时对照库中已启用工具，缺实现的只告警不阻断
"""

from typing import Any, Iterable, Mapping

import structlog
from pydantic import ValidationError

from app.observability.metrics import TOOL_CALL_TOTAL
from app.tools.base import BaseTool, ToolResult

log = structlog.get_logger()

NOT_IMPLEMENTED = "Tool not implemented"


def _describe_validation_error(exc: ValidationError) -> str:
    """把 Pydantic 错误压成一行：text: Input should be a valid string"""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "input"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class ToolRegistry:
    """工具注册中心"""

    def __init__(self):
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """注册一个工具实例，slug 重复视为编程错误"""
        if tool.slug in self._tools:
            raise ValueError(f"工具 slug 重复注册: {tool.slug}")
        self._tools[tool.slug] = tool
        log.debug("工具已注册", tool=tool.slug)

    def has_tool(self, slug: str) -> bool:
        return slug in self._tools

    def get(self, slug: str) -> BaseTool | None:
        return self._tools.get(slug)

    def execute(
        self,
        slug: str,
        arguments: dict[str, Any] | None,
        config: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        执行工具，返回响应体 dict。

        - 成功: 工具结果字段平铺
        - 失败: {"error": "...", ...}

        config 缺省时工具按自身上限与默认值执行。
        """
        tool = self._tools.get(slug)
        if tool is None:
            TOOL_CALL_TOTAL.labels(tool_slug=slug, status="not_implemented").inc()
            return ToolResult.fail(NOT_IMPLEMENTED).to_dict()

        try:
            params = tool.params_model.model_validate(arguments or {})
        except ValidationError as e:
            TOOL_CALL_TOTAL.labels(tool_slug=slug, status="error").inc()
            return ToolResult.fail(f"Invalid input: {_describe_validation_error(e)}").to_dict()

        result = tool.execute(params, config or {})
        TOOL_CALL_TOTAL.labels(tool_slug=slug, status=result.status).inc()
        if not result.ok:
            log.info("工具返回领域错误", tool=slug, error=result.error)
        return result.to_dict()

    def missing_implementations(self, slugs: Iterable[str]) -> list[str]:
        """返回没有对应实现的 slug 列表（保持输入顺序、去重）"""
        seen: set[str] = set()
        missing = []
        for slug in slugs:
            if slug in seen:
                continue
            seen.add(slug)
            if slug not in self._tools:
                missing.append(slug)
        return missing

    @property
    def slugs(self) -> list[str]:
        """获取所有已注册工具 slug"""
        return list(self._tools.keys())

    @property
    def tool_count(self) -> int:
        """已注册工具总数"""
        return len(self._tools)

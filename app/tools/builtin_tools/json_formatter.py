"""
JsonFormatterTool：JSON 校验 / 美化 / 压缩

严格解析：NaN / Infinity 等非标准字面量以及溢出为无穷大的数字（1e400）视为非法。
解析失败只返回 error + valid=false，不带任何 size 字段。
size_* 为 UTF-8 字节长度。

大小上限取工具配置 max_json_size，且不超过 MAX_JSON_SIZE；
输入与美化后的输出都受此限制，输出大小在真正生成之前先算出。
"""

import json
from typing import Any, Mapping

from pydantic import BaseModel, Field

from app.tools.base import BaseTool, ToolResult

MAX_JSON_SIZE = 100_000
DEFAULT_INDENT = 2


class _Params(BaseModel):
    json_text: str = Field(alias="json", description="待处理的 JSON 字符串")
    indent: int | None = Field(default=None, ge=1, le=8, description="缩进空格数，缺省取工具配置 indent_size")


def _reject_constant(name: str):
    raise ValueError(f"Invalid JSON literal: {name}")


def _byte_size(text: str) -> int:
    return len(text.encode("utf-8"))


def formatted_size(document: Any, indent: int, minified_size: int, limit: int) -> int | None:
    """
    json.dumps(document, indent=indent) 的字节数，超过 limit 时返回 None。

    与压缩输出相比只多出空白：每个键后的一个空格，
    以及非空容器中每个元素前、收尾括号前的换行 + 缩进。迭代遍历，不受嵌套深度影响。
    """
    size = minified_size
    stack = [(document, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, dict):
            children = list(node.values())
            size += len(children)
        elif isinstance(node, list):
            children = node
        else:
            continue
        if not children:
            continue
        size += len(children) * (1 + indent * (depth + 1)) + 1 + indent * depth
        if size > limit:
            return None
        stack.extend((child, depth + 1) for child in children)
    return size


class JsonFormatterTool(BaseTool):

    @property
    def slug(self) -> str:
        return "json-formatter"

    @property
    def params_model(self) -> type[BaseModel]:
        return _Params

    def execute(self, params: _Params, config: Mapping[str, Any]) -> ToolResult:
        limit = min(config.get("max_json_size", MAX_JSON_SIZE), MAX_JSON_SIZE)
        raw = params.json_text
        size_original = _byte_size(raw)
        if size_original > limit:
            return ToolResult.fail(f"JSON exceeds maximum size of {limit} bytes", valid=False)

        try:
            document = json.loads(raw, parse_constant=_reject_constant)
            minified = json.dumps(document, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        except ValueError as e:
            # JSONDecodeError 也是 ValueError
            return ToolResult.fail(str(e), valid=False)
        except RecursionError:
            return ToolResult.fail("Maximum nesting depth exceeded", valid=False)

        indent = params.indent or config.get("indent_size", DEFAULT_INDENT)
        size_minified = _byte_size(minified)
        size_formatted = formatted_size(document, indent, size_minified, limit)
        if size_formatted is None:
            return ToolResult.fail(f"Formatted JSON exceeds maximum size of {limit} bytes", valid=False)

        formatted = json.dumps(document, indent=indent, ensure_ascii=False, allow_nan=False)

        return ToolResult.success(
            formatted=formatted,
            minified=minified,
            valid=True,
            size_original=size_original,
            size_formatted=size_formatted,
            size_minified=size_minified,
        )

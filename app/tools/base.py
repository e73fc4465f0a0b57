"""
工具抽象基类 + 标准化结果

BaseTool 强制约束：
1. slug / params_model：工具的分发键与入参 Schema（Pydantic 校验，杜绝手写 dict 取值出错）
2. execute：纯函数，入参 + 工具级配置 → ToolResult，不访问数据库、不持有状态

ToolResult 标准化：
- 成功：data 原样平铺为响应体
- 失败：{"error": "..."} 加上工具附带的字段（如 JSON 格式化的 valid=false）
失败是值而不是异常，调用方以 200 返回，由前端内联展示。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import BaseModel


@dataclass
class ToolResult:
    """工具执行标准化结果"""

    status: str  # "success" | "error"
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict[str, Any]:
        """序列化为响应体"""
        if self.status == "error":
            return {"error": self.error, **self.data}
        return dict(self.data)

    @classmethod
    def success(cls, **data: Any) -> "ToolResult":
        """快捷构造成功结果"""
        return cls(status="success", data=data)

    @classmethod
    def fail(cls, error: str, **data: Any) -> "ToolResult":
        """快捷构造失败结果，data 为随错误一起返回的附加字段"""
        return cls(status="error", error=error, data=data)


class BaseTool(ABC):
    """工具抽象基类，所有工具必须继承"""

    @property
    @abstractmethod
    def slug(self) -> str:
        """分发键，与 playground_tools.slug 一致"""
        ...

    @property
    @abstractmethod
    def params_model(self) -> type[BaseModel]:
        """参数 Pydantic Model，registry 在调用前完成校验"""
        ...

    @abstractmethod
    def execute(self, params: BaseModel, config: Mapping[str, Any]) -> ToolResult:
        """
        执行工具，返回标准化结果；领域错误必须返回 ToolResult.fail 而不是抛异常。

        config 为该工具的 configuration（已按配置视图补齐默认值），工具只读取自己认识的键。
        """
        ...

"""
工具系统：BaseTool 抽象基类 + ToolRegistry 注册中心 + 内置工具集

execute 接口按 slug 分发到纯计算实现，不依赖数据库。
"""

from app.tools.base import BaseTool, ToolResult
from app.tools.registry import ToolRegistry

__all__ = ["BaseTool", "ToolResult", "ToolRegistry"]

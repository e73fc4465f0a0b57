"""
内置工具集：自动注册所有内置工具到 ToolRegistry

使用方式：
    from app.tools.builtin_tools import create_builtin_registry
    registry = create_builtin_registry()
"""

from app.tools.builtin_tools.calculator import CalculatorTool
from app.tools.builtin_tools.color_palette import ColorPaletteTool
from app.tools.builtin_tools.json_formatter import JsonFormatterTool
from app.tools.builtin_tools.todo_list import TodoListTool
from app.tools.builtin_tools.word_counter import WordCounterTool
from app.tools.registry import ToolRegistry


def create_builtin_registry() -> ToolRegistry:
    """创建并注册所有内置工具的 Registry 实例"""
    registry = ToolRegistry()

    registry.register(WordCounterTool())
    registry.register(JsonFormatterTool())
    registry.register(ColorPaletteTool())

    # 旧版执行接口，新版前端已改为直接保存 saved_data
    registry.register(CalculatorTool())
    registry.register(TodoListTool())

    return registry

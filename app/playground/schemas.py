"""
Playground 请求/响应模型 + 工具配置的类型化视图

存储层 configuration 是不约束形状的 JSON 文档；应用层按 component_name 选择对应的
配置模型（标签联合），已知字段做类型校验，未知字段放行。
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ── 工具记录 ──

class ToolOut(BaseModel):
    """工具对外展示形状"""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    description: str | None = None
    icon: str
    component_name: str
    configuration: dict[str, Any] = Field(default_factory=dict)
    is_active: bool
    owner_user_id: uuid.UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ToolUpdateRequest(BaseModel):
    """
    PUT 请求体：两个字段各自可选、各自生效。
    缺省或 null 表示"保持不变"，不是清空。
    """

    saved_data: list[Any] | dict[str, Any] | None = None
    configuration: dict[str, Any] | None = None


class ToolUpdateResponse(BaseModel):
    tool: ToolOut
    saved_data: list[Any] | dict[str, Any]


# ── 配置视图（按 component_name 区分） ──

class ToolConfiguration(BaseModel):
    """配置视图基类：未知字段原样保留"""

    model_config = ConfigDict(extra="allow")


class WordCounterConfiguration(ToolConfiguration):
    max_text_length: int = Field(default=50000, gt=0)
    reading_speed_wpm: int = Field(default=200, gt=0)


class JsonFormatterConfiguration(ToolConfiguration):
    max_json_size: int = Field(default=100000, gt=0)
    indent_size: int = Field(default=2, ge=1, le=8)


class ColorPaletteConfiguration(ToolConfiguration):
    default_harmony: str = "complementary"
    max_colors: int = Field(default=10, gt=0)


class CalculatorConfiguration(ToolConfiguration):
    pass


class TodoListConfiguration(ToolConfiguration):
    pass


CONFIGURATION_VIEWS: dict[str, type[ToolConfiguration]] = {
    "WordCounter": WordCounterConfiguration,
    "JsonFormatter": JsonFormatterConfiguration,
    "ColorPalette": ColorPaletteConfiguration,
    "Calculator": CalculatorConfiguration,
    "TodoList": TodoListConfiguration,
}


def configuration_view(component_name: str, data: dict[str, Any] | None) -> ToolConfiguration:
    """
    把存储层的配置文档解析成类型化视图。

    未登记的组件退回宽松的 ToolConfiguration；已知字段类型不符时抛 pydantic.ValidationError。
    """
    view = CONFIGURATION_VIEWS.get(component_name, ToolConfiguration)
    return view.model_validate(data or {})

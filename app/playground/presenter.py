"""
页面渲染桥：把视图名 + props 组装成前端页面对象

{"component": "Playground/Tools/WordCounter", "props": {...}, "url": "/playground/tools/word-counter"}
前端按 component 加载对应组件，后端不关心其后的渲染细节。
"""

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

INDEX_VIEW = "Playground/Index"


def tool_view(component_name: str) -> str:
    return f"Playground/Tools/{component_name}"


def render(request: Request, view_name: str, props: dict[str, Any]) -> JSONResponse:
    page = {
        "component": view_name,
        "props": jsonable_encoder(props),
        "url": request.url.path,
    }
    return JSONResponse(page)

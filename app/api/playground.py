"""
Playground 接口：工具列表 / 工具页 / 保存 / 执行

端点（全部要求登录）：
- GET  /playground：已启用工具列表
- GET  /playground/tools/{slug}：工具页 + 当前用户 saved_data
- PUT  /playground/tools/{tool_id}：保存 saved_data / configuration
- POST /playground/tools/{tool_id}/execute：执行工具计算，领域错误以 200 + {"error"} 返回

依赖解析顺序保证：鉴权 → 工具解析（404）→ 请求体校验（422）。
"""

from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.engine import get_db
from app.db.models.tool import PlaygroundTool
from app.playground.presenter import INDEX_VIEW, render, tool_view
from app.playground.schemas import ToolOut, ToolUpdateRequest, ToolUpdateResponse, configuration_view
from app.playground.service import (
    ToolNotFoundError,
    get_tool_for_display,
    list_active_tools,
    resolve_active_tool,
    update_tool,
)
from app.security.auth import AuthenticatedUser, get_current_user
from app.tools.builtin_tools import create_builtin_registry

router = APIRouter(prefix="/playground", tags=["Playground"])
log = structlog.get_logger()

# ── 单例组件（无状态，可复用） ──
tool_registry = create_builtin_registry()

TOOL_NOT_FOUND = "工具不存在"


async def get_active_tool(
    tool_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PlaygroundTool:
    """路径参数 tool_id → 已启用工具；user 依赖放在最前，保证先鉴权再查库"""
    try:
        return await resolve_active_tool(db, tool_id=tool_id)
    except ToolNotFoundError:
        raise HTTPException(status_code=404, detail=TOOL_NOT_FOUND)


def _tool_props(tool: PlaygroundTool) -> dict[str, Any]:
    return ToolOut.model_validate(tool).model_dump(mode="json")


@router.get("")
async def index(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """已启用工具列表"""
    tools = await list_active_tools(db)
    return render(request, INDEX_VIEW, {"tools": [_tool_props(t) for t in tools]})


@router.get("/tools/{slug}")
async def show(
    request: Request,
    slug: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """工具页：首次访问时为当前用户创建空的 saved_data"""
    structlog.contextvars.bind_contextvars(tool_slug=slug, operation="show")
    try:
        tool, saved_data = await get_tool_for_display(db, slug, user.uuid)
    except ToolNotFoundError:
        raise HTTPException(status_code=404, detail=TOOL_NOT_FOUND)

    return render(
        request,
        tool_view(tool.component_name),
        {"tool": _tool_props(tool), "savedData": saved_data},
    )


@router.put("/tools/{tool_id}", response_model=ToolUpdateResponse)
async def update(
    tool: PlaygroundTool = Depends(get_active_tool),
    body: ToolUpdateRequest | None = None,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """保存 saved_data（用户级）/ configuration（工具级），缺省字段不变"""
    structlog.contextvars.bind_contextvars(tool_slug=tool.slug, operation="update")
    try:
        tool, saved_data = await update_tool(db, tool, user.uuid, body or ToolUpdateRequest())
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        raise RequestValidationError(
            [{**err, "loc": ("body", "configuration", *err["loc"])} for err in errors]
        )

    return ToolUpdateResponse(tool=ToolOut.model_validate(tool), saved_data=saved_data)


@router.post("/tools/{tool_id}/execute")
async def execute(
    tool: PlaygroundTool = Depends(get_active_tool),
    arguments: Any = Body(default=None),
):
    """按 tool.slug 分发到对应计算；未实现的工具返回 {"error": "Tool not implemented"}"""
    structlog.contextvars.bind_contextvars(tool_slug=tool.slug, operation="execute")
    try:
        config = configuration_view(tool.component_name, tool.configuration).model_dump()
    except ValidationError:
        # 存量配置不合法时按工具内置默认值执行
        log.warning("工具配置无法解析，使用默认值", tool=tool.slug)
        config = {}
    return tool_registry.execute(tool.slug, arguments, config)

"""
Playground 业务层：工具查询、访问门禁、用户数据 get-or-create、更新

门禁规则：工具不存在与未启用对外表现一致（ToolNotFoundError → 404），避免泄露未启用工具。
get-or-create：先查 → INSERT ... ON CONFLICT DO NOTHING → 再查，
并发首次访问依赖 (user_id, tool_id) 唯一约束收敛为一行，不加锁。
"""

import uuid
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from uuid6 import uuid7

from app.db.models.tool import PlaygroundTool, UserToolState, normalize_slug
from app.playground.schemas import ToolUpdateRequest, configuration_view

log = structlog.get_logger()

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ToolNotFoundError(Exception):
    """工具不存在或未启用"""

    def __init__(self, ref: str):
        super().__init__(f"工具不存在: {ref}")
        self.ref = ref


# ── 查询 ──

async def list_active_tools(db: AsyncSession) -> list[PlaygroundTool]:
    """所有已启用工具，按 name 升序（按码点比较，区分大小写，与数据库排序规则无关）"""
    result = await db.execute(select(PlaygroundTool).where(PlaygroundTool.is_active.is_(True)))
    return sorted(result.scalars().all(), key=lambda t: (t.name, t.slug))


async def find_tool_by_slug(db: AsyncSession, slug: str) -> PlaygroundTool | None:
    result = await db.execute(
        select(PlaygroundTool).where(PlaygroundTool.slug == normalize_slug(slug))
    )
    return result.scalar_one_or_none()


async def find_tool_by_id(db: AsyncSession, tool_id: str | uuid.UUID) -> PlaygroundTool | None:
    """id 不是合法 UUID 时直接视为不存在"""
    if not isinstance(tool_id, uuid.UUID):
        try:
            tool_id = uuid.UUID(str(tool_id))
        except ValueError:
            return None
    return await db.get(PlaygroundTool, tool_id)


async def resolve_active_tool(
    db: AsyncSession, *, slug: str | None = None, tool_id: str | uuid.UUID | None = None
) -> PlaygroundTool:
    """按 slug 或 id 解析工具，不存在或未启用统一抛 ToolNotFoundError"""
    if slug is not None:
        tool = await find_tool_by_slug(db, slug)
    elif tool_id is not None:
        tool = await find_tool_by_id(db, tool_id)
    else:
        raise ValueError("slug 与 tool_id 至少提供一个")

    ref = slug if slug is not None else str(tool_id)
    if tool is None or not tool.is_active:
        log.info("工具不可访问", ref=ref, exists=tool is not None)
        raise ToolNotFoundError(ref)
    return tool


# ── 用户数据 ──

async def find_state(db: AsyncSession, tool: PlaygroundTool, user_id: uuid.UUID) -> UserToolState | None:
    result = await db.execute(
        select(UserToolState).where(
            UserToolState.user_id == user_id,
            UserToolState.tool_id == tool.id,
        )
    )
    return result.scalar_one_or_none()


async def get_or_create_state(db: AsyncSession, tool: PlaygroundTool, user_id: uuid.UUID) -> UserToolState:
    """
    获取用户在该工具下的数据行，不存在则创建空行。

    并发首访时另一方的 INSERT 会因唯一约束被忽略，随后的查询拿到已存在的行。
    调用方负责 commit。
    """
    state = await find_state(db, tool, user_id)
    if state is not None:
        return state

    dialect = db.get_bind().dialect.name
    insert = _UPSERT_DIALECTS.get(dialect)
    if insert is None:
        raise RuntimeError(f"不支持的数据库方言: {dialect}")

    stmt = (
        insert(UserToolState)
        .values(id=uuid7(), user_id=user_id, tool_id=tool.id, saved_data=[])
        .on_conflict_do_nothing(index_elements=["user_id", "tool_id"])
    )
    await db.execute(stmt)

    state = await find_state(db, tool, user_id)
    if state is None:
        # 唯一约束冲突却查不到，只可能是对方行在此期间被删除
        raise RuntimeError(f"用户数据创建失败: tool={tool.slug}")
    log.info("用户数据已初始化", tool=tool.slug, user_id=str(user_id))
    return state


async def get_tool_for_display(
    db: AsyncSession, slug: str, user_id: uuid.UUID
) -> tuple[PlaygroundTool, list | dict]:
    """show 页数据：工具 + 当前用户的 saved_data（首次访问时惰性创建）"""
    tool = await resolve_active_tool(db, slug=slug)
    state = await get_or_create_state(db, tool, user_id)
    await db.commit()
    return tool, state.saved_data


def validate_configuration(tool: PlaygroundTool, configuration: dict[str, Any]) -> None:
    """按工具的配置视图校验，不合法时抛 pydantic.ValidationError"""
    configuration_view(tool.component_name, configuration)


async def update_tool(
    db: AsyncSession, tool: PlaygroundTool, user_id: uuid.UUID, payload: ToolUpdateRequest
) -> tuple[PlaygroundTool, list | dict]:
    """
    saved_data / configuration 各自独立整体替换，缺省字段保持不变。

    校验全部在写入前完成。configuration 是工具级的：任何有权调用者的修改对所有用户生效。
    只有写 saved_data 时才 get-or-create 状态行；仅改配置时只读取已有状态。
    返回 (tool, 当前用户的 saved_data)。
    """
    if payload.configuration is not None:
        validate_configuration(tool, payload.configuration)

    if payload.saved_data is not None:
        state = await get_or_create_state(db, tool, user_id)
        state.saved_data = payload.saved_data
        saved_data = state.saved_data
    else:
        state = await find_state(db, tool, user_id)
        saved_data = state.saved_data if state else []

    if payload.configuration is not None:
        tool.configuration = payload.configuration
        log.info("工具配置已更新", tool=tool.slug, user_id=str(user_id))

    await db.commit()
    return tool, saved_data

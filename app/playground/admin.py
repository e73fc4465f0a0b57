"""
Playground 运维操作：默认工具种子、工具列表、工具移除、创建登录用户

供 scripts/ 下的命令行脚本调用，脚本只负责参数解析和输出。
"""

import uuid
from dataclasses import dataclass
from typing import Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.tool import PlaygroundTool, UserToolState, normalize_slug
from app.db.models.user import User
from app.security.login import hash_password

log = structlog.get_logger()

# ── 默认工具（系统工具，owner_user_id 为空） ──
# configuration 与 app.playground.schemas 中的配置视图默认值保持一致

DEFAULT_TOOLS: list[dict[str, Any]] = [
    {
        "name": "Word Counter",
        "slug": "word-counter",
        "description": "Count words, characters, lines and paragraphs for any text.",
        "icon": "Type",
        "component_name": "WordCounter",
        "configuration": {"max_text_length": 50000, "reading_speed_wpm": 200},
    },
    {
        "name": "JSON Formatter",
        "slug": "json-formatter",
        "description": "Format, minify, and validate JSON with error detection.",
        "icon": "Braces",
        "component_name": "JsonFormatter",
        "configuration": {"max_json_size": 100000, "indent_size": 2},
    },
    {
        "name": "Color Palette",
        "slug": "color-palette",
        "description": "Generate harmonious color schemes from a base color.",
        "icon": "Palette",
        "component_name": "ColorPalette",
        "configuration": {"default_harmony": "complementary", "max_colors": 10},
    },
    {
        "name": "Calculator",
        "slug": "calculator",
        "description": "A calculator with the ability to save and label results",
        "icon": "Calculator",
        "component_name": "Calculator",
        "configuration": {},
    },
    {
        "name": "Todo List",
        "slug": "todo-list",
        "description": "Track tasks efficiently",
        "icon": "CheckSquare",
        "component_name": "TodoList",
        "configuration": {},
    },
]


@dataclass
class SeedReport:
    created: list[str]
    updated: list[str]


async def seed_default_tools(db: AsyncSession, tools: list[dict[str, Any]] | None = None) -> SeedReport:
    """
    幂等写入默认工具：按 slug 判断，存在则更新展示字段，不存在则插入。
    已有工具的 configuration / is_active 视为线上数据，不覆盖。
    """
    report = SeedReport(created=[], updated=[])
    for data in tools if tools is not None else DEFAULT_TOOLS:
        slug = normalize_slug(data["slug"])
        result = await db.execute(select(PlaygroundTool).where(PlaygroundTool.slug == slug))
        existing = result.scalar_one_or_none()

        if existing:
            existing.name = data["name"]
            existing.description = data.get("description")
            existing.icon = data.get("icon", "Beaker")
            existing.component_name = data["component_name"]
            report.updated.append(slug)
        else:
            db.add(
                PlaygroundTool(
                    name=data["name"],
                    slug=slug,
                    description=data.get("description"),
                    icon=data.get("icon", "Beaker"),
                    component_name=data["component_name"],
                    configuration=dict(data.get("configuration") or {}),
                    is_active=data.get("is_active", True),
                    owner_user_id=None,
                )
            )
            report.created.append(slug)

    await db.commit()
    log.info("默认工具写入完成", created=report.created, updated=report.updated)
    return report


async def list_tools(
    db: AsyncSession,
    *,
    active: bool | None = None,
    owner_user_id: uuid.UUID | None = None,
) -> list[tuple[PlaygroundTool, User | None]]:
    """按 name 升序列出工具及其所属用户；active=None 表示不过滤启用状态"""
    stmt = select(PlaygroundTool, User).outerjoin(User, PlaygroundTool.owner_user_id == User.id)
    if active is not None:
        stmt = stmt.where(PlaygroundTool.is_active.is_(active))
    if owner_user_id is not None:
        stmt = stmt.where(PlaygroundTool.owner_user_id == owner_user_id)

    result = await db.execute(stmt)
    rows = [(tool, owner) for tool, owner in result.all()]
    return sorted(rows, key=lambda row: (row[0].name, row[0].slug))


@dataclass
class RemovalReport:
    slug: str
    name: str
    removed_states: int


async def remove_tool(db: AsyncSession, slug: str) -> RemovalReport | None:
    """
    删除工具行，用户数据由外键 ON DELETE CASCADE 一并清理。
    工具不存在返回 None。
    """
    slug = normalize_slug(slug)
    result = await db.execute(select(PlaygroundTool).where(PlaygroundTool.slug == slug))
    tool = result.scalar_one_or_none()
    if tool is None:
        return None

    state_count = await db.scalar(
        select(func.count()).select_from(UserToolState).where(UserToolState.tool_id == tool.id)
    )
    report = RemovalReport(slug=tool.slug, name=tool.name, removed_states=state_count or 0)

    await db.delete(tool)
    await db.commit()
    log.info("工具已移除", slug=report.slug, removed_states=report.removed_states)
    return report


async def create_user(db: AsyncSession, *, username: str, password: str, email: str | None = None) -> User:
    """创建登录用户，用户名重复时抛 ValueError"""
    result = await db.execute(select(User).where(User.username == username))
    if result.scalar_one_or_none() is not None:
        raise ValueError(f"用户名已存在: {username}")

    user = User(username=username, email=email, hashed_pwd=hash_password(password))
    db.add(user)
    await db.commit()
    log.info("用户已创建", username=username)
    return user

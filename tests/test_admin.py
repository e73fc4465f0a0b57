"""运维操作：默认工具种子、列表、移除、创建用户"""

import pytest
from sqlalchemy import func, select

from app.db.models import PlaygroundTool, UserToolState
from app.playground.admin import (
    DEFAULT_TOOLS,
    create_user,
    list_tools,
    remove_tool,
    seed_default_tools,
)
from app.playground.schemas import configuration_view
from app.playground.service import get_tool_for_display
from app.security.login import verify_password
from app.tools.builtin_tools import create_builtin_registry


class TestSeed:
    @pytest.mark.asyncio
    async def test_seed_creates_default_tools(self, db) -> None:
        report = await seed_default_tools(db)
        assert sorted(report.created) == sorted(t["slug"] for t in DEFAULT_TOOLS)
        assert report.updated == []

        rows = await list_tools(db)
        assert len(rows) == len(DEFAULT_TOOLS)
        assert all(tool.is_system and owner is None for tool, owner in rows)

    @pytest.mark.asyncio
    async def test_seed_is_idempotent_and_keeps_live_config(self, db) -> None:
        await seed_default_tools(db)
        tool = (await db.execute(select(PlaygroundTool).where(PlaygroundTool.slug == "word-counter"))).scalar_one()
        tool.configuration = {"max_text_length": 10}
        tool.is_active = False
        await db.commit()

        report = await seed_default_tools(db)
        assert report.created == []
        assert sorted(report.updated) == sorted(t["slug"] for t in DEFAULT_TOOLS)
        assert await db.scalar(select(func.count()).select_from(PlaygroundTool)) == len(DEFAULT_TOOLS)

        await db.refresh(tool)
        assert tool.configuration == {"max_text_length": 10}
        assert tool.is_active is False

    def test_default_tools_are_all_executable(self) -> None:
        registry = create_builtin_registry()
        assert registry.missing_implementations(t["slug"] for t in DEFAULT_TOOLS) == []

    def test_default_configurations_match_views(self) -> None:
        for data in DEFAULT_TOOLS:
            view = configuration_view(data["component_name"], data["configuration"])
            assert view.model_dump() == {**type(view)().model_dump(), **data["configuration"]}


class TestListTools:
    @pytest.mark.asyncio
    async def test_filters(self, db, make_tool, user) -> None:
        await make_tool("beta", name="Beta", owner_user_id=user.id)
        await make_tool("alpha", name="Alpha", is_active=False)

        rows = await list_tools(db)
        assert [tool.name for tool, _ in rows] == ["Alpha", "Beta"]
        assert rows[1][1].username == "alice"

        assert [t.slug for t, _ in await list_tools(db, active=True)] == ["beta"]
        assert [t.slug for t, _ in await list_tools(db, active=False)] == ["alpha"]
        assert [t.slug for t, _ in await list_tools(db, owner_user_id=user.id)] == ["beta"]


class TestRemoveTool:
    @pytest.mark.asyncio
    async def test_remove_cascades_states(self, db, make_tool, user, other_user) -> None:
        await make_tool("calculator")
        await get_tool_for_display(db, "calculator", user.id)
        await get_tool_for_display(db, "calculator", other_user.id)

        report = await remove_tool(db, "calculator")
        assert report.slug == "calculator"
        assert report.removed_states == 2
        assert await db.scalar(select(func.count()).select_from(UserToolState)) == 0
        assert await db.scalar(select(func.count()).select_from(PlaygroundTool)) == 0

    @pytest.mark.asyncio
    async def test_remove_missing(self, db) -> None:
        assert await remove_tool(db, "nonexistent") is None


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_create_and_duplicate(self, db) -> None:
        created = await create_user(db, username="carol", password="s3cret", email="carol@example.com")
        assert verify_password("s3cret", created.hashed_pwd)

        with pytest.raises(ValueError):
            await create_user(db, username="carol", password="other")

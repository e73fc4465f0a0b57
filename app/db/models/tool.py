"""
Playground 工具模型

- PlaygroundTool：工具定义（slug 全局唯一，configuration 为工具级配置，所有用户共享）
- UserToolState：用户在某个工具下的工作数据，(user_id, tool_id) 唯一，首次访问时惰性创建

configuration / saved_data 在存储层不做 schema 约束，类型化视图见 app.playground.schemas。
"""

import re
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from uuid6 import uuid7

from app.db.models.base import Base, JSONDocument, fk, utcnow


def normalize_slug(raw: str) -> str:
    """
    slug 归一化：小写 + 空白/下划线转连字符 + 去除非法字符 + 合并重复连字符
    "Word Counter" → "word-counter"
    " JSON_Formatter " → "json-formatter"
    "color--palette!" → "color-palette"
    """
    s = raw.strip().lower()
    s = re.sub(r"[\s_]+", "-", s)
    s = re.sub(r"[^a-z0-9-]", "", s)
    s = re.sub(r"-{2,}", "-", s)
    return s.strip("-")


class PlaygroundTool(Base):
    """工具定义表"""

    __tablename__ = "playground_tools"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid7)
    name: Mapped[str] = mapped_column(String(128), nullable=False, comment="展示名称")
    slug: Mapped[str] = mapped_column(String(128), unique=True, nullable=False, comment="URL 标识，全局唯一")
    description: Mapped[str | None] = mapped_column(Text, comment="工具描述")
    icon: Mapped[str] = mapped_column(
        String(64), nullable=False, default="Beaker", server_default="Beaker", comment="图标名"
    )
    component_name: Mapped[str] = mapped_column(
        String(128), unique=True, nullable=False, comment="前端组件名，与工具一一对应"
    )
    configuration: Mapped[dict] = mapped_column(
        JSONDocument, nullable=False, default=dict, comment="工具级配置（所有用户共享）"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true", index=True, comment="是否启用"
    )
    owner_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey(fk("users.id"), ondelete="SET NULL"),
        index=True,
        comment="所属用户，NULL 表示系统工具",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), comment="创建时间"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        comment="更新时间",
    )

    states: Mapped[list["UserToolState"]] = relationship(
        back_populates="tool", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def is_system(self) -> bool:
        return self.owner_user_id is None

    def __repr__(self) -> str:
        return f"<PlaygroundTool(slug={self.slug}, active={self.is_active})>"


class UserToolState(Base):
    """用户工具数据表：每个 (user, tool) 至多一行，saved_data 整体覆盖写"""

    __tablename__ = "user_tool_state"
    __table_args__ = (
        UniqueConstraint("user_id", "tool_id", name="uq_user_tool_state_user_tool"),
        {"schema": Base.__table_args__["schema"]},
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid7)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey(fk("users.id"), ondelete="CASCADE"), nullable=False, comment="用户ID"
    )
    tool_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey(fk("playground_tools.id"), ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="工具ID",
    )
    saved_data: Mapped[list | dict] = mapped_column(
        JSONDocument, nullable=False, default=list, comment="用户工作数据（形状由工具自定义）"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), comment="创建时间"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        comment="更新时间",
    )

    tool: Mapped["PlaygroundTool"] = relationship(back_populates="states")

"""
SQLAlchemy 声明基类：所有模型继承此 Base
配置了 DB_SCHEMA 时所有表放在该 schema 下做数据隔离
"""

from datetime import datetime, timezone

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

from app.config import get_settings

settings = get_settings()

# 结构化文档列：PG 用 JSONB，其他方言（SQLite 测试）退回通用 JSON
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def fk(target: str) -> str:
    """外键目标加上 schema 前缀，如 "users.id" → "playground.users.id" """
    return f"{settings.db_schema}.{target}" if settings.db_schema else target


class Base(DeclarativeBase):
    """声明基类，统一使用配置的 schema"""

    __abstract__ = True

    __table_args__ = {"schema": settings.db_schema}

"""
测试公共夹具

- 数据库：每个测试一个临时 SQLite 文件（aiosqlite），不使用 schema，开启外键
- Redis：AsyncMock 替身，黑名单默认为空
- HTTP：httpx.AsyncClient + ASGITransport 直接调用 app，不启动 lifespan
"""

import os

# 必须在导入 app 之前设置，Settings 在导入时即被实例化
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DB_SCHEMA"] = ""
os.environ["REDIS_URL"] = "redis://127.0.0.1:6379/15"
os.environ["JWT_SECRET"] = "test-secret-for-playground-tools-only"
os.environ["ENV"] = "test"

from typing import Any
from unittest.mock import AsyncMock

import bcrypt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.cache.redis_client import get_redis
from app.db.engine import enable_sqlite_foreign_keys, get_db
from app.db.models import Base, PlaygroundTool, User
from app.security.auth import create_access_token

TEST_PASSWORD = "correct horse battery staple"


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'playground.db'}")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_redis():
    redis = AsyncMock()
    redis.exists.return_value = 0
    return redis


@pytest_asyncio.fixture
async def client(session_factory, fake_redis):
    from app.main import app

    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_redis] = lambda: fake_redis

    # raise_app_exceptions=False：让兜底异常处理器的 500 响应回到客户端
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ── 数据构造 ──

async def _create_user(db, username: str) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_pwd=bcrypt.hashpw(TEST_PASSWORD.encode(), bcrypt.gensalt(rounds=4)).decode(),
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def user(db) -> User:
    return await _create_user(db, "alice")


@pytest_asyncio.fixture
async def other_user(db) -> User:
    return await _create_user(db, "bob")


def auth_headers_for(user: User) -> dict[str, str]:
    token = create_access_token(sub=str(user.id), username=user.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(user) -> dict[str, str]:
    return auth_headers_for(user)


@pytest.fixture
def make_tool(db):
    """工厂夹具：按 slug 生成一个工具，其余字段可覆盖"""

    async def _make(slug: str, **overrides: Any) -> PlaygroundTool:
        fields = {
            "name": slug.replace("-", " ").title(),
            "slug": slug,
            "description": f"{slug} tool",
            "component_name": "".join(part.title() for part in slug.split("-")),
            "configuration": {},
            "is_active": True,
        }
        fields.update(overrides)
        tool = PlaygroundTool(**fields)
        db.add(tool)
        await db.commit()
        return tool

    return _make

"""
JWT 鉴权模块：Token 签发 / 校验 / 黑名单检查
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
import redis.asyncio as aioredis
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.cache.redis_client import get_redis, is_token_revoked
from app.config import get_settings

settings = get_settings()
# auto_error=False：缺少凭证时统一返回 401，而不是 FastAPI 默认的 403
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthenticatedUser:
    """鉴权后的用户上下文，贯穿整个请求生命周期"""

    id: str
    username: str = ""

    @property
    def uuid(self) -> uuid.UUID:
        return uuid.UUID(self.id)


def create_access_token(*, sub: str, username: str) -> str:
    """签发 access_token"""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": sub,
        "jti": str(uuid.uuid4()),
        "username": username,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_refresh_token(*, sub: str) -> str:
    """签发 refresh_token"""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": sub,
        "jti": str(uuid.uuid4()),
        "token_type": "refresh",
        "iat": now,
        "exp": now + timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    redis: aioredis.Redis = Depends(get_redis),
) -> AuthenticatedUser:
    """FastAPI 依赖注入：校验 JWT 并返回用户上下文"""
    if credentials is None:
        raise _unauthorized("未登录")
    token = credentials.credentials

    # 1. 解码 JWT
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token 已过期")
    except jwt.InvalidTokenError:
        raise _unauthorized("无效 Token")

    # refresh_token 不能当 access_token 用
    if payload.get("token_type") == "refresh":
        raise _unauthorized("Token 类型错误")

    # 2. 检查黑名单（已注销的 Token）
    jti = payload.get("jti")
    if jti and await is_token_revoked(redis, jti):
        raise _unauthorized("Token 已注销")

    # 3. 构造用户上下文
    try:
        uuid.UUID(payload["sub"])
    except (KeyError, ValueError):
        raise _unauthorized("无效 Token")

    return AuthenticatedUser(id=payload["sub"], username=payload.get("username", ""))

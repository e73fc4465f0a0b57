"""
Redis 客户端：连接池 + Token 注销黑名单

Playground 的业务数据全部在数据库，Redis 只记录已注销的 JWT（按 jti）。
黑名单 Key 的 TTL 等于 token 剩余有效期，过期后自动消失。
"""

import redis.asyncio as aioredis

from app.config import get_settings

settings = get_settings()

# 命名规范：{应用}:{资源类型}:{标识}
BLACKLIST_PREFIX = f"{settings.APP_NAME}:bl:token"


def blacklist_key(jti: str) -> str:
    return f"{BLACKLIST_PREFIX}:{jti}"


async def revoke_token(redis: aioredis.Redis, jti: str, ttl_seconds: int) -> None:
    """写入黑名单，TTL 至少 1 秒（即将过期的 token 也要挡住）"""
    await redis.setex(blacklist_key(jti), max(ttl_seconds, 1), "1")


async def is_token_revoked(redis: aioredis.Redis, jti: str) -> bool:
    return bool(await redis.exists(blacklist_key(jti)))


redis_pool = aioredis.ConnectionPool.from_url(
    settings.REDIS_URL,
    max_connections=settings.REDIS_MAX_CONNECTIONS,
    decode_responses=True,
    socket_timeout=5,
    socket_connect_timeout=5,
    retry_on_timeout=True,
)

redis_client = aioredis.Redis(connection_pool=redis_pool)


async def get_redis() -> aioredis.Redis:
    """FastAPI 依赖注入：获取 Redis 客户端，测试中可整体替换"""
    return redis_client

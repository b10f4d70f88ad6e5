"""
Redis rate limiting for the authentication endpoints

Rate limiting is only active when Redis is configured (REDIS_URL or
REDIS_HOST). If Redis becomes unreachable the limiter fails open.
"""

import logging
import os
from typing import Optional

import redis
from fastapi import HTTPException, Request

from .config import TRUSTED_PROXIES

logger = logging.getLogger(__name__)

# Redis connection
redis_client: Optional[redis.Redis] = None


def get_redis_client() -> Optional[redis.Redis]:
    """Get or create the Redis client, or None when Redis isn't configured"""
    global redis_client

    if redis_client is not None:
        return redis_client

    redis_url = os.getenv("REDIS_URL")
    redis_host = os.getenv("REDIS_HOST")

    if redis_url:
        redis_client = redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            health_check_interval=30,
        )
        logger.info("📡 Rate limiting uses Redis URL connection")
    elif redis_host:
        redis_client = redis.Redis(
            host=redis_host,
            port=int(os.getenv("REDIS_PORT", "6379")),
            password=os.getenv("REDIS_PASSWORD"),
            db=int(os.getenv("REDIS_DB", "0")),
            ssl=os.getenv("REDIS_SSL", "false").lower() == "true",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        logger.info(f"📡 Rate limiting uses Redis at {redis_host}")

    return redis_client


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: redis.Redis
) -> tuple[bool, int, int]:
    """Fixed-window counter.

    Returns:
        Tuple of (is_allowed, current_count, ttl_seconds)
    """
    count = client.incr(key)
    ttl = client.ttl(key)
    if ttl < 0:
        # First hit in this window, or a key that lost its expiry
        client.expire(key, window_seconds)
        ttl = window_seconds
    return count <= limit, count, max(0, ttl)


def _client_ip(request: Request) -> str:
    """Caller address; X-Forwarded-For is only honoured when sent by a trusted proxy"""
    peer = request.client.host if request.client else "unknown"
    forwarded = request.headers.get("X-Forwarded-For")
    if not forwarded or peer not in TRUSTED_PROXIES:
        return peer

    # Proxies append to the header, so the rightmost untrusted hop is the client
    for hop in reversed([h.strip() for h in forwarded.split(",") if h.strip()]):
        if hop not in TRUSTED_PROXIES:
            return hop
    return peer


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str = "rate_limit"):
    """
    Create a per-IP rate limiter dependency

    Example usage:
        login_rate_limit = create_rate_limiter(limit=10, window_seconds=60, key_prefix="login")

        @router.post("/login")
        async def login(data: LoginRequest, _: None = Depends(login_rate_limit)):
            ...
    """

    async def rate_limiter(request: Request):
        client = get_redis_client()
        if client is None:
            return

        key = f"{key_prefix}:{_client_ip(request)}"
        try:
            is_allowed, current_count, ttl = check_rate_limit(key, limit, window_seconds, client)
        except redis.RedisError as e:
            logger.warning(f"⚠️ Rate limit check failed, allowing request (fail-open): {e}")
            return

        if not is_allowed:
            logger.warning(f"🚫 Rate limit EXCEEDED for {key} - {current_count}/{limit}")
            raise HTTPException(
                status_code=429,
                detail=f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                headers={"Retry-After": str(ttl)},
            )

    return rate_limiter

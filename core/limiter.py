from fastapi import Request, Response
import redis.asyncio as redis
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from core.config import settings

import logging

logger = logging.getLogger(__name__)

async def init_redis():
    try:
        redis_conn = redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
        # Ping to check connection
        await redis_conn.ping()
        return redis_conn
    except Exception as e:
        logger.warning(f"⚠️ Redis not available at {settings.REDIS_URL}: {e}. Click rate limiting will be disabled.")
        return None

async def get_real_ip(request: Request) -> str:
    """Extract real IP even behind a proxy/nginx"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"

async def click_identifier(request: Request) -> str:
    ip = await get_real_ip(request)
    return f"{ip}:ad-click"

_click_limiter = RateLimiter(
    times=settings.ADS_CLICK_RATE_LIMIT,
    seconds=settings.ADS_CLICK_RATE_WINDOW,
    identifier=click_identifier,
)

async def click_rate_limit(request: Request, response: Response):
    """Rate limit ad clicks per client; no-op while Redis is unavailable."""
    if not FastAPILimiter.redis:
        return
    await _click_limiter(request, response)

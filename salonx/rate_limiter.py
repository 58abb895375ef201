"""
Hybrid in-memory + Redis rate limiting
The in-memory window is authoritative; Redis (when configured) shares counts across workers
"""

import logging
import os
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None
_redis_checked = False

# Format: {key: {'count': int, 'reset_time': int, 'last_redis_sync': int}}
memory_cache: dict[str, dict] = {}
cache_lock = Lock()

MEMORY_CACHE_SYNC_INTERVAL = 10
MEMORY_CACHE_CLEANUP_INTERVAL = 60
last_cleanup_time = 0


def get_redis_client() -> Optional[redis.Redis]:
    """
    Get or create the Redis client.
    Returns None when Redis is not configured or unreachable.
    """
    global redis_client, _redis_checked

    if redis_client is not None or _redis_checked:
        return redis_client

    _redis_checked = True
    redis_url = os.getenv("REDIS_URL")
    redis_host = os.getenv("REDIS_HOST")

    if not redis_url and not redis_host:
        logger.info("ℹ️ Redis not configured - rate limiting uses in-memory windows only")
        return None

    try:
        if redis_url:
            client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30,
            )
        else:
            client = redis.Redis(
                host=redis_host,
                port=int(os.getenv("REDIS_PORT", "6379")),
                password=os.getenv("REDIS_PASSWORD"),
                db=int(os.getenv("REDIS_DB", "0")),
                ssl=os.getenv("REDIS_SSL", "false").lower() == "true",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
        client.ping()
        redis_client = client
        logger.info("✅ Redis connected for rate limiting")
    except Exception as e:
        logger.warning(f"⚠️ Redis unavailable, falling back to in-memory rate limiting: {e}")
        redis_client = None

    return redis_client


def cleanup_expired_cache():
    """Remove expired entries from memory cache"""
    global last_cleanup_time
    current_time = int(time.time())

    if current_time - last_cleanup_time < MEMORY_CACHE_CLEANUP_INTERVAL:
        return

    with cache_lock:
        expired_keys = [k for k, v in memory_cache.items() if current_time >= v.get("reset_time", 0)]
        for k in expired_keys:
            del memory_cache[k]

        if expired_keys:
            logger.debug(f"🧹 Cleaned up {len(expired_keys)} expired rate limit entries")

    last_cleanup_time = current_time


def check_rate_limit(
    key: str, limit: int, window_seconds: int, redis_client: Optional[redis.Redis] = None
) -> tuple[bool, int, int]:
    """Fixed-window check.

    Returns:
        Tuple of (is_allowed, current_count, ttl_seconds)
    """
    current_time = int(time.time())
    cleanup_expired_cache()

    with cache_lock:
        if key not in memory_cache:
            entry = {"count": 0, "reset_time": current_time + window_seconds, "last_redis_sync": 0}
            if redis_client is not None:
                try:
                    redis_count = redis_client.get(key)
                    redis_ttl = redis_client.ttl(key)
                    if redis_count and redis_ttl > 0:
                        entry = {
                            "count": int(redis_count),
                            "reset_time": current_time + redis_ttl,
                            "last_redis_sync": current_time,
                        }
                except Exception as e:
                    logger.warning(f"⚠️ Failed to load from Redis, using memory only: {e}")
            memory_cache[key] = entry

        cache_entry = memory_cache[key]

        if current_time >= cache_entry["reset_time"]:
            cache_entry["count"] = 0
            cache_entry["reset_time"] = current_time + window_seconds
            cache_entry["last_redis_sync"] = 0

        is_allowed = cache_entry["count"] < limit
        if is_allowed:
            cache_entry["count"] += 1

        if redis_client is not None:
            time_since_sync = current_time - cache_entry.get("last_redis_sync", 0)
            if time_since_sync >= MEMORY_CACHE_SYNC_INTERVAL:
                try:
                    redis_client.set(key, cache_entry["count"], ex=window_seconds)
                    cache_entry["last_redis_sync"] = current_time
                except Exception as e:
                    logger.warning(f"⚠️ Failed to sync to Redis: {e}")

        ttl = cache_entry["reset_time"] - current_time
        return is_allowed, cache_entry["count"], max(0, ttl)


def reset_rate_limit(key: str) -> None:
    """Forget a window, e.g. after a successful login"""
    with cache_lock:
        memory_cache.pop(key, None)

    client = get_redis_client()
    if client is not None:
        try:
            client.delete(key)
        except Exception as e:
            logger.warning(f"⚠️ Failed to clear Redis rate limit key {key}: {e}")


def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def rate_limit_exceeded(limit: int, window_seconds: int, retry_after: int, message: Optional[str] = None):
    return HTTPException(
        status_code=429,
        detail={
            "message": message or f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
            "retry_after": retry_after,
            "limit": limit,
            "window_seconds": window_seconds,
        },
        headers={"Retry-After": str(retry_after)},
    )


async def rate_limit_dependency(
    request: Request,
    limit: int,
    window_seconds: int,
    key_prefix: str = "rate_limit",
    use_ip: bool = True,
):
    """Count one request against `key_prefix` (per client IP unless use_ip is False)"""
    key = f"{key_prefix}:{get_client_ip(request)}" if use_ip else f"{key_prefix}:global"

    is_allowed, current_count, ttl = check_rate_limit(key, limit, window_seconds, get_redis_client())

    if not is_allowed:
        logger.warning(f"🚫 Rate limit EXCEEDED for {key} - {current_count}/{limit} requests used")
        raise rate_limit_exceeded(limit, window_seconds, ttl)

    request.state.rate_limit_remaining = limit - current_count


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str = "rate_limit", use_ip: bool = True):
    """Build a route dependency, e.g. 5 demo requests per hour per IP"""

    async def rate_limiter(request: Request):
        return await rate_limit_dependency(request, limit, window_seconds, key_prefix, use_ip)

    return rate_limiter

from __future__ import annotations

import logging
from dataclasses import dataclass

import redis
from fastapi import Depends, HTTPException, Request

from quizcore.core import redis_client
from quizcore.core.config import settings

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimit:
    key: str
    limit: int
    window_seconds: int


def _client_ip(request: Request) -> str:
    if bool(getattr(settings, "trust_proxy_headers", False)):
        xri = str(request.headers.get("x-real-ip") or "").strip()
        if xri:
            return xri
        xff = request.headers.get("x-forwarded-for")
        if xff:
            ip = xff.split(",")[0].strip()
            if ip:
                return ip
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit(*, key_prefix: str, limit_setting: str):
    """Fixed-window limiter keyed by route and client IP.

    ``limit_setting`` names the Settings attribute holding the per-window limit,
    so tests and deployments can tune it without touching routes.
    """

    async def _dep(request: Request) -> RateLimit:
        limit = int(getattr(settings, limit_setting))
        window_seconds = int(settings.rate_limit_window_seconds)
        key = f"rl:{key_prefix}:{request.method}:{request.url.path}:{_client_ip(request)}"

        if not settings.rate_limit_enabled:
            return RateLimit(key=key, limit=limit, window_seconds=window_seconds)

        r = redis_client.get_redis()
        try:
            current = r.incr(key)
            if current == 1:
                r.expire(key, window_seconds)
        except redis.RedisError:
            log.warning("rate limit skipped key=%s reason=redis_unavailable", key)
            return RateLimit(key=key, limit=limit, window_seconds=window_seconds)

        if int(current) > limit:
            ttl = r.ttl(key)
            retry_after = int(ttl) if ttl and ttl > 0 else window_seconds
            raise HTTPException(
                status_code=429,
                detail="rate limit exceeded",
                headers={"Retry-After": str(retry_after)},
            )

        return RateLimit(key=key, limit=limit, window_seconds=window_seconds)

    return Depends(_dep)

"""Middleware for the trust API.

Provides CORS, error handling and per-client rate limiting.
"""

from __future__ import annotations

import math
from typing import Any

from aiohttp import web

from trustgate.api.request_context import client_ip
from trustgate.logging import get_logger
from trustgate.ratelimit import RateLimiter, client_identifier

log = get_logger("trustgate.api.middleware")

# Paths that are never rate limited
PUBLIC_PATHS = frozenset({"/api/v1/health"})


def create_cors_middleware(allowed_origins: list[str] | None = None) -> Any:
    """Create CORS middleware.

    Args:
        allowed_origins: List of allowed origins, or None for no CORS headers.
    """

    @web.middleware
    async def cors_middleware(request: web.Request, handler: Any) -> web.StreamResponse:
        # Handle preflight
        if request.method == "OPTIONS":
            response: web.StreamResponse = web.Response(status=204)
        else:
            response = await handler(request)

        if allowed_origins:
            origin = request.headers.get("Origin", "")
            if origin and (origin in allowed_origins or "*" in allowed_origins):
                response.headers["Access-Control-Allow-Origin"] = origin
                response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
                response.headers["Access-Control-Allow-Headers"] = "Content-Type"
                response.headers["Access-Control-Max-Age"] = "86400"

        return response

    return cors_middleware


def create_error_middleware() -> Any:
    """Create middleware that turns unhandled exceptions into 500 JSON responses."""

    @web.middleware
    async def error_middleware(request: web.Request, handler: Any) -> web.StreamResponse:
        try:
            return await handler(request)  # type: ignore[no-any-return]
        except web.HTTPException:
            raise
        except Exception:
            log.exception("unhandled_request_error", method=request.method, path=request.path)
            return web.json_response({"error": "Internal server error"}, status=500)

    return error_middleware


def create_rate_limit_middleware(rate_limiter: RateLimiter) -> Any:
    """Create rate limiting middleware keyed on client IP and User-Agent."""

    @web.middleware
    async def rate_limit_middleware(request: web.Request, handler: Any) -> web.StreamResponse:
        if request.path in PUBLIC_PATHS or request.method == "OPTIONS":
            return await handler(request)  # type: ignore[no-any-return]

        ip = client_ip(request.headers, request.remote)
        identifier = client_identifier(ip, request.headers.get("User-Agent"))
        result = rate_limiter.check(f"{request.path}:{identifier}")

        if not result.allowed:
            retry_after = max(1, math.ceil(result.reset_at - rate_limiter.clock()))
            log.warning("rate_limited", ip=ip, path=request.path, retry_after=retry_after)
            return web.json_response(
                {"error": "Rate limit exceeded", "retry_after": retry_after},
                status=429,
                headers={"Retry-After": str(retry_after)},
            )

        return await handler(request)  # type: ignore[no-any-return]

    return rate_limit_middleware

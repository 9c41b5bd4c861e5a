"""Rate limiting backed by an injectable counter store.

Public API
----------
- :class:`CounterStore`, :class:`InMemoryCounterStore`: counter storage
- :class:`RateLimiter`, :func:`client_identifier`: per-client request limits
- :class:`ContentRateLimiter`, :class:`ContentType`: per-user posting limits
"""

from trustgate.ratelimit.content import (
    CONTENT_RATE_LIMITS,
    POST_COOLDOWNS,
    ContentLimitStatus,
    ContentRateLimiter,
    ContentRateLimitResult,
    ContentType,
    CooldownResult,
    WindowLimit,
    WindowStatus,
    format_reset_time,
)
from trustgate.ratelimit.limiter import RateLimiter, RateLimitResult, client_identifier
from trustgate.ratelimit.store import CounterEntry, CounterStore, InMemoryCounterStore

__all__ = [
    "CONTENT_RATE_LIMITS",
    "POST_COOLDOWNS",
    "ContentLimitStatus",
    "ContentRateLimitResult",
    "ContentRateLimiter",
    "ContentType",
    "CooldownResult",
    "CounterEntry",
    "CounterStore",
    "InMemoryCounterStore",
    "RateLimitResult",
    "RateLimiter",
    "WindowLimit",
    "WindowStatus",
    "client_identifier",
    "format_reset_time",
]

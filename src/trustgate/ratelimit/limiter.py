"""Fixed-window request rate limiting per client identifier."""

from __future__ import annotations

import base64
import time
from collections.abc import Callable
from dataclasses import dataclass

from trustgate.ratelimit.store import CounterEntry, CounterStore


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a rate-limit check."""

    allowed: bool
    remaining: int
    reset_at: float  # epoch seconds


class RateLimiter:
    """Allow ``max_requests`` hits per identifier per window."""

    def __init__(
        self,
        store: CounterStore,
        *,
        max_requests: int = 5,
        window_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize rate limiter.

        Args:
            store: Where window counters live.
            max_requests: Maximum hits allowed per window.
            window_seconds: Window length in seconds.
            clock: Returns the current time in epoch seconds.
        """
        self._store = store
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._clock = clock

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    @property
    def clock(self) -> Callable[[], float]:
        return self._clock

    def check(self, identifier: str) -> RateLimitResult:
        """Record a hit for ``identifier`` and report whether it is allowed."""
        now = self._clock()
        entry = self._store.get(identifier)

        # No entry or expired entry opens a new window
        if entry is None or entry.window_start + self._window_seconds < now:
            self._store.set(identifier, CounterEntry(count=1, window_start=now))
            return RateLimitResult(
                allowed=True,
                remaining=self._max_requests - 1,
                reset_at=now + self._window_seconds,
            )

        entry.count += 1
        self._store.set(identifier, entry)

        return RateLimitResult(
            allowed=entry.count <= self._max_requests,
            remaining=max(0, self._max_requests - entry.count),
            reset_at=entry.window_start + self._window_seconds,
        )

    def purge_expired(self) -> int:
        """Delete windows that have already reset. Returns how many were removed."""
        now = self._clock()
        removed = 0
        for key in list(self._store.keys()):
            entry = self._store.get(key)
            if entry is not None and entry.window_start + self._window_seconds < now:
                self._store.delete(key)
                removed += 1
        return removed


def client_identifier(ip: str | None, user_agent: str | None, email: str | None = None) -> str:
    """Build a rate-limit key from IP, a User-Agent digest and an optional email."""
    parts = [
        ip or "unknown-ip",
        base64.b64encode(user_agent.encode("utf-8")).decode("ascii")[:20]
        if user_agent
        else "unknown-ua",
    ]
    if email:
        parts.append(email)
    return ":".join(parts)

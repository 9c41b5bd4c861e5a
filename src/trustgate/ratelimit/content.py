"""Per-user limits on how often content can be posted.

Each content type has one or more named windows (for example three threads
per hour and ten per day) plus a minimum cooldown between consecutive posts.
``check`` is called before creating content, ``record_post`` after.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from trustgate.ratelimit.store import CounterEntry, CounterStore

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR


class ContentType(StrEnum):
    """Kinds of user-generated content with their own limits."""

    THREAD = "thread"
    POST = "post"
    REVIEW = "review"
    DEVLOG_COMMENT = "devlog_comment"
    REPORT = "report"
    TIP = "tip"
    BETA_FEEDBACK = "beta_feedback"


@dataclass(frozen=True)
class WindowLimit:
    """At most ``max`` posts per ``window_seconds``."""

    max: int
    window_seconds: int


# The first window listed for a type is its primary window
CONTENT_RATE_LIMITS: dict[ContentType, dict[str, WindowLimit]] = {
    ContentType.THREAD: {
        "hourly": WindowLimit(max=3, window_seconds=_HOUR),
        "daily": WindowLimit(max=10, window_seconds=_DAY),
    },
    ContentType.POST: {
        "short_term": WindowLimit(max=10, window_seconds=15 * _MINUTE),
        "hourly": WindowLimit(max=50, window_seconds=_HOUR),
    },
    ContentType.REVIEW: {"daily": WindowLimit(max=5, window_seconds=_DAY)},
    ContentType.DEVLOG_COMMENT: {"hourly": WindowLimit(max=15, window_seconds=_HOUR)},
    ContentType.REPORT: {"daily": WindowLimit(max=10, window_seconds=_DAY)},
    ContentType.TIP: {"daily": WindowLimit(max=20, window_seconds=_DAY)},
    ContentType.BETA_FEEDBACK: {"daily": WindowLimit(max=20, window_seconds=_DAY)},
}

# Minimum seconds between consecutive posts of a type
POST_COOLDOWNS: dict[ContentType, int] = {
    ContentType.THREAD: 60,
    ContentType.POST: 10,
    ContentType.REVIEW: 30,
    ContentType.DEVLOG_COMMENT: 10,
    ContentType.REPORT: 30,
    ContentType.TIP: 5,
    ContentType.BETA_FEEDBACK: 30,
}


@dataclass(frozen=True)
class ContentRateLimitResult:
    """Outcome of a content rate-limit check."""

    allowed: bool
    remaining: int
    reset_at: float
    limit: int
    limit_type: str


@dataclass(frozen=True)
class WindowStatus:
    """Current state of one named window, for display."""

    type: str
    remaining: int
    reset_at: float
    max: int


@dataclass(frozen=True)
class ContentLimitStatus:
    can_post: bool
    limits: list[WindowStatus]


@dataclass(frozen=True)
class CooldownResult:
    can_post: bool
    wait_seconds: int


class ContentRateLimiter:
    """Track posting windows and cooldowns per user and content type."""

    def __init__(
        self,
        store: CounterStore,
        *,
        limits: dict[ContentType, dict[str, WindowLimit]] | None = None,
        cooldowns: dict[ContentType, int] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._limits = limits or CONTENT_RATE_LIMITS
        self._cooldowns = cooldowns or POST_COOLDOWNS
        self._clock = clock

    @staticmethod
    def _window_key(content_type: ContentType, limit_type: str, user_id: str) -> str:
        return f"content:{content_type.value}:{limit_type}:{user_id}"

    @staticmethod
    def _cooldown_key(content_type: ContentType, user_id: str) -> str:
        return f"cooldown:{content_type.value}:{user_id}"

    def check(self, user_id: str, content_type: ContentType) -> ContentRateLimitResult:
        """Report whether ``user_id`` may post ``content_type`` now.

        Does not count a post; call :meth:`record_post` once the content
        has been created.
        """
        now = self._clock()
        limits = self._limits[content_type]

        for limit_type, config in limits.items():
            key = self._window_key(content_type, limit_type, user_id)
            entry = self._store.get(key)

            if entry is None or now - entry.window_start >= config.window_seconds:
                self._store.set(key, CounterEntry(count=0, window_start=now))
                continue

            if entry.count >= config.max:
                return ContentRateLimitResult(
                    allowed=False,
                    remaining=0,
                    reset_at=entry.window_start + config.window_seconds,
                    limit=config.max,
                    limit_type=limit_type,
                )

        limit_type, config = next(iter(limits.items()))
        entry = self._store.get(self._window_key(content_type, limit_type, user_id))
        count = entry.count if entry else 0
        window_start = entry.window_start if entry else now

        return ContentRateLimitResult(
            allowed=True,
            remaining=config.max - count - 1,
            reset_at=window_start + config.window_seconds,
            limit=config.max,
            limit_type=limit_type,
        )

    def record_post(self, user_id: str, content_type: ContentType) -> None:
        """Count one post against every window of ``content_type``."""
        now = self._clock()
        for limit_type, config in self._limits[content_type].items():
            key = self._window_key(content_type, limit_type, user_id)
            entry = self._store.get(key)
            if entry is None or now - entry.window_start >= config.window_seconds:
                self._store.set(key, CounterEntry(count=1, window_start=now))
            else:
                entry.count += 1
                self._store.set(key, entry)

    def user_limits(self, user_id: str) -> dict[ContentType, ContentLimitStatus]:
        """Status of every window for every content type, for display."""
        now = self._clock()
        result: dict[ContentType, ContentLimitStatus] = {}

        for content_type, limits in self._limits.items():
            statuses: list[WindowStatus] = []
            can_post = True
            for limit_type, config in limits.items():
                entry = self._store.get(self._window_key(content_type, limit_type, user_id))
                remaining = config.max
                reset_at = now + config.window_seconds
                if entry is not None and now - entry.window_start < config.window_seconds:
                    remaining = max(0, config.max - entry.count)
                    reset_at = entry.window_start + config.window_seconds
                    if remaining == 0:
                        can_post = False
                statuses.append(
                    WindowStatus(
                        type=limit_type, remaining=remaining, reset_at=reset_at, max=config.max
                    )
                )
            result[content_type] = ContentLimitStatus(can_post=can_post, limits=statuses)

        return result

    def check_cooldown(self, user_id: str, content_type: ContentType) -> CooldownResult:
        """Report whether the cooldown since the user's last post has passed."""
        entry = self._store.get(self._cooldown_key(content_type, user_id))
        if entry is None:
            return CooldownResult(can_post=True, wait_seconds=0)

        cooldown = self._cooldowns[content_type]
        elapsed = self._clock() - entry.window_start
        if elapsed >= cooldown:
            return CooldownResult(can_post=True, wait_seconds=0)

        return CooldownResult(can_post=False, wait_seconds=math.ceil(cooldown - elapsed))

    def record_post_time(self, user_id: str, content_type: ContentType) -> None:
        self._store.set(
            self._cooldown_key(content_type, user_id),
            CounterEntry(count=1, window_start=self._clock()),
        )


def format_reset_time(reset_at: float, now: float | None = None) -> str:
    """Human-readable time until ``reset_at``: ``now``, ``12m`` or ``2h 5m``."""
    diff = reset_at - (time.time() if now is None else now)
    if diff <= 0:
        return "now"

    minutes = int(diff // _MINUTE)
    hours = int(diff // _HOUR)
    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    return f"{minutes}m"

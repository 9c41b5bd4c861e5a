"""Data models for the trust detection engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any


class Confidence(StrEnum):
    """How certain the engine is that a score reflects bot behaviour."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def level(self) -> int:
        """Ordinal position, low=0 .. critical=3."""
        return list(Confidence).index(self)


class Category(StrEnum):
    """Classification of the combined score."""

    CLEAN = "clean"
    SUSPICIOUS = "suspicious"
    LIKELY_BOT = "likely_bot"
    DEFINITE_BOT = "definite_bot"

    @property
    def level(self) -> int:
        """Ordinal position, clean=0 .. definite_bot=3."""
        return list(Category).index(self)


class ProbeFailure(StrEnum):
    """Why a browser fingerprint probe produced no hash."""

    UNAVAILABLE = "unavailable"  # API missing (no-canvas / no-audio)
    ERROR = "error"  # API threw


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a canvas or audio fingerprint probe.

    Either ``value`` holds the hash or ``failure`` names why there is none.
    A failed probe is evidence in its own right.
    """

    value: str | None = None
    failure: ProbeFailure | None = None

    @property
    def failed(self) -> bool:
        return self.failure is not None

    @classmethod
    def ok(cls, value: str) -> ProbeResult:
        return cls(value=value)

    @classmethod
    def from_wire(cls, raw: str | None, *, unavailable_sentinel: str) -> ProbeResult:
        """Map the collector's string encoding onto a tagged result.

        ``"error"`` and ``unavailable_sentinel`` (``"no-canvas"`` or
        ``"no-audio"``) become failures; ``None`` means not collected.
        """
        if raw is None:
            return cls()
        if raw == "error":
            return cls(failure=ProbeFailure.ERROR)
        if raw == unavailable_sentinel:
            return cls(failure=ProbeFailure.UNAVAILABLE)
        return cls(value=raw)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HoneypotFields:
    """Decoy form fields. ``None`` means the field was not collected."""

    website: str | None = None
    email_confirm: str | None = None
    form_timestamp: float | None = None  # epoch millis when the form rendered
    form_token: str | None = None


@dataclass(frozen=True)
class BehavioralSignals:
    """Interaction summary observed by the client for one form submission."""

    mouse_movements: int = 0
    keystrokes: int = 0
    time_on_page_ms: int = 0
    form_fill_time_ms: int = 0
    clipboard_paste: bool = False
    rapid_submission: bool = False


@dataclass(frozen=True)
class BrowserSignals:
    """Environment fingerprint reported by the client.

    Nullable fields default to ``None``; automation markers default to not
    detected. Everything else is part of the fixed shape and required.
    """

    screen_width: int
    screen_height: int
    color_depth: int
    pixel_ratio: float
    cookies_enabled: bool
    languages: str
    platform: str
    hardware_concurrency: int
    timezone: str
    timezone_offset: int
    canvas: ProbeResult
    audio: ProbeResult
    touch_points: int
    fonts_detected: int
    plugin_count: int
    device_memory: float | None = None
    webgl_vendor: str | None = None
    webgl_renderer: str | None = None
    has_webdriver: bool = False
    has_automation: bool = False
    has_phantom: bool = False
    has_selenium: bool = False
    has_nightmare: bool = False
    has_casperjs: bool = False
    has_notification_api: bool = False
    has_battery_api: bool = False
    do_not_track: str | None = None


@dataclass(frozen=True)
class RequestMetadata:
    """Server-visible request facts.

    ``ip`` is only ever logged. Header names are matched case-insensitively.
    """

    ip: str = "unknown"
    user_agent: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        normalized = {k.lower(): v for k, v in self.headers.items()}
        object.__setattr__(self, "headers", normalized)

    def header(self, name: str) -> str | None:
        """Return a header value, or ``None`` when missing or empty."""
        value = self.headers.get(name.lower())
        return value or None


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


@dataclass
class SubScore:
    """A single scorer's 0-100 score and the reasons behind it."""

    score: int = 0
    reasons: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class HoneypotResult:
    """Verdict of the honeypot evaluator."""

    is_bot: bool
    confidence: Confidence = Confidence.LOW
    reason: str | None = None


@dataclass
class ScoreBreakdown:
    """Per-source sub-scores, exposed for observability."""

    behavioral: int = 0
    browser: int = 0
    honeypot: int = 0
    request: int = 0


@dataclass
class TrustVerdict:
    """The final trust decision handed to policy consumers."""

    score: int
    is_bot: bool
    confidence: Confidence
    category: Category
    reasons: list[str] = field(default_factory=list)
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "isBot": self.is_bot,
            "confidence": self.confidence.value,
            "category": self.category.value,
            "reasons": list(self.reasons),
            "breakdown": asdict(self.breakdown),
        }


@dataclass(frozen=True)
class QuickCheckResult:
    """Result of the lightweight pre-check."""

    is_bot: bool
    reason: str | None = None

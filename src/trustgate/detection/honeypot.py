"""Honeypot evaluation: decoy fields, submit timing and form tokens.

Runs before every other check. It is cheap, and a positive result is
treated as proof by the aggregator.
"""

from __future__ import annotations

import math
import re
import secrets
import string
import time
from collections.abc import Callable

from trustgate.detection.models import Confidence, HoneypotFields, HoneypotResult
from trustgate.detection.policy import DEFAULT_POLICY, ScoringPolicy

_BASE36 = string.digits + string.ascii_lowercase
_TOKEN_RANDOM_LENGTH = 8
# 13 base36 digits cover every epoch-millis value
_BASE36_RE = re.compile(r"[0-9a-z]{1,13}", re.IGNORECASE | re.ASCII)

# Names the form renderer must use for the hidden inputs
HONEYPOT_FIELD_NAMES = ("website", "email_confirm", "_formTimestamp", "_formToken")

# Hiding techniques for the honeypot container. The fields must stay in the
# DOM but be unreachable by mouse, keyboard and screen readers.
HONEYPOT_STYLES: dict[str, dict[str, str]] = {
    "container": {
        "position": "absolute",
        "left": "-9999px",
        "top": "-9999px",
        "width": "1px",
        "height": "1px",
        "overflow": "hidden",
        "opacity": "0",
        "pointer-events": "none",
        "z-index": "-9999",
    },
    "container_clip": {
        "position": "absolute",
        "clip": "rect(0,0,0,0)",
        "clip-path": "inset(50%)",
        "height": "1px",
        "width": "1px",
        "margin": "-1px",
        "overflow": "hidden",
        "padding": "0",
        "border": "0",
    },
}


def honeypot_css(selector: str, *, variant: str = "container") -> str:
    """Render one of :data:`HONEYPOT_STYLES` as a CSS rule."""
    styles = HONEYPOT_STYLES[variant]
    declarations = "; ".join(f"{prop}: {value}" for prop, value in styles.items())
    return f"{selector} {{ {declarations}; }}"


def now_ms() -> float:
    """Current wall-clock time in epoch milliseconds."""
    return time.time() * 1000


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_form_token(now: float | None = None) -> str:
    """Issue a ``<base36 millis>-<8 random chars>`` token at form render time."""
    timestamp = int(now_ms() if now is None else now)
    random_part = "".join(secrets.choice(_BASE36) for _ in range(_TOKEN_RANDOM_LENGTH))
    return f"{_to_base36(timestamp)}-{random_part}"


class HoneypotEvaluator:
    """Evaluate honeypot fields in strict priority order."""

    def __init__(
        self,
        *,
        policy: ScoringPolicy = DEFAULT_POLICY,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self._policy = policy
        self._clock = clock

    def evaluate(self, fields: HoneypotFields) -> HoneypotResult:
        """Return a bot verdict for the first rule that matches.

        1. ``website`` filled
        2. ``email_confirm`` filled
        3. form submitted too soon after render
        4. form token present but invalid
        """
        if fields.website and fields.website.strip():
            return HoneypotResult(
                is_bot=True,
                confidence=Confidence.HIGH,
                reason='Honeypot field "website" was filled',
            )

        if fields.email_confirm and fields.email_confirm.strip():
            return HoneypotResult(
                is_bot=True,
                confidence=Confidence.HIGH,
                reason='Honeypot field "email_confirm" was filled',
            )

        if fields.form_timestamp is not None and not math.isfinite(fields.form_timestamp):
            return HoneypotResult(
                is_bot=True,
                confidence=Confidence.MEDIUM,
                reason="Invalid form timestamp",
            )

        if fields.form_timestamp is not None:
            elapsed = int(self._clock() - fields.form_timestamp)
            instant, fast = self._policy.instant_submit_ms, self._policy.fast_submit_ms
            if elapsed < instant:
                return HoneypotResult(
                    is_bot=True,
                    confidence=Confidence.HIGH,
                    reason=f"Form submitted in {elapsed}ms (< {instant}ms)",
                )
            if elapsed < fast:
                return HoneypotResult(
                    is_bot=True,
                    confidence=Confidence.MEDIUM,
                    reason=f"Form submitted in {elapsed}ms (< {fast}ms)",
                )

        if fields.form_token is not None and not self.is_valid_form_token(fields.form_token):
            return HoneypotResult(
                is_bot=True,
                confidence=Confidence.MEDIUM,
                reason="Invalid form token",
            )

        return HoneypotResult(is_bot=False, confidence=Confidence.LOW)

    def is_valid_form_token(self, token: str) -> bool:
        """Check a token issued by :func:`generate_form_token`."""
        parts = token.split("-")
        if len(parts) != 2:
            return False

        timestamp_part, random_part = parts
        if not _BASE36_RE.fullmatch(timestamp_part):
            return False
        timestamp = int(timestamp_part, 36)

        age = self._clock() - timestamp
        if age > self._policy.form_token_max_age_ms:
            return False
        if age < -self._policy.form_token_clock_skew_ms:
            return False

        return len(random_part) == _TOKEN_RANDOM_LENGTH

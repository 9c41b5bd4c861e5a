"""Forensic logging for bot detection events.

Emits one WARNING per non-clean verdict for external observability tooling.
Nothing here feeds back into scoring.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import UTC, datetime

from trustgate.detection.models import Category, TrustVerdict
from trustgate.logging import get_logger

log = get_logger("trustgate.detection.forensics")


def log_bot_detection(verdict: TrustVerdict, ip: str, endpoint: str) -> None:
    """Log a structured record when ``verdict.category`` is not clean."""
    if verdict.category == Category.CLEAN:
        return

    log.warning(
        "bot_detection",
        category=verdict.category.value,
        ip=ip,
        endpoint=endpoint,
        score=verdict.score,
        is_bot=verdict.is_bot,
        confidence=verdict.confidence.value,
        reasons=list(verdict.reasons),
        breakdown=asdict(verdict.breakdown),
        timestamp=datetime.now(UTC).isoformat(),
    )

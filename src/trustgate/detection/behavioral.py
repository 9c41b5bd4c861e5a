"""Behavioral scoring from client interaction telemetry.

Each rule models one independent way a scripted submission differs from a
person filling in a form. Points add up so several weak signals compound
while none of them decides alone.
"""

from __future__ import annotations

from trustgate.detection.models import BehavioralSignals, SubScore

_MAX_SCORE = 100


class BehavioralScorer:
    """Score interaction telemetry on a 0-100 scale."""

    def score(self, signals: BehavioralSignals) -> SubScore:
        points = 0
        reasons: list[str] = []

        if signals.mouse_movements == 0:
            points += 30
            reasons.append("No mouse movement")
        elif signals.mouse_movements < 5:
            points += 15
            reasons.append("Very little mouse movement")

        if signals.keystrokes == 0:
            points += 25
            reasons.append("No keystrokes")
        elif signals.keystrokes < 10:
            points += 10
            reasons.append("Very few keystrokes")

        if signals.time_on_page_ms < 3000:
            points += 20
            reasons.append("Very short time on page")
        elif signals.time_on_page_ms < 5000:
            points += 10
            reasons.append("Short time on page")

        if signals.form_fill_time_ms < 2000:
            points += 15
            reasons.append("Form filled too quickly")

        if signals.clipboard_paste:
            points += 5
            reasons.append("Clipboard paste detected")

        if signals.rapid_submission:
            points += 25
            reasons.append("Rapid form submission")

        return SubScore(score=min(_MAX_SCORE, points), reasons=reasons)

"""Browser fingerprint scoring.

Automation markers dominate: they almost never appear in real browsers.
Environmental anomalies are weaker, independent corroborating evidence.
"""

from __future__ import annotations

from trustgate.detection.models import BrowserSignals, SubScore

_MAX_SCORE = 100

# (attribute, reason) for each automation framework marker, +50 each
_AUTOMATION_MARKERS: list[tuple[str, str]] = [
    ("has_webdriver", "WebDriver detected"),
    ("has_automation", "Browser automation detected"),
    ("has_phantom", "PhantomJS detected"),
    ("has_selenium", "Selenium detected"),
    ("has_nightmare", "Nightmare.js detected"),
    ("has_casperjs", "CasperJS detected"),
]
_AUTOMATION_POINTS = 50

# Default window size of several headless browsers
_HEADLESS_RESOLUTION = (800, 600)

_MIN_FONTS = 5


class BrowserSignalScorer:
    """Score a client-reported environment fingerprint on a 0-100 scale."""

    def score(self, signals: BrowserSignals) -> SubScore:
        points = 0
        reasons: list[str] = []

        for attr, reason in _AUTOMATION_MARKERS:
            if getattr(signals, attr):
                points += _AUTOMATION_POINTS
                reasons.append(reason)

        if not signals.webgl_vendor and not signals.webgl_renderer:
            points += 20
            reasons.append("No WebGL support")

        # Probe failures are evidence, not errors
        if signals.canvas.failed:
            points += 15
            reasons.append("Canvas fingerprint failed")
        if signals.audio.failed:
            points += 10
            reasons.append("Audio fingerprint failed")

        if signals.screen_width == 0 or signals.screen_height == 0:
            points += 30
            reasons.append("Invalid screen dimensions")
        if (signals.screen_width, signals.screen_height) == _HEADLESS_RESOLUTION:
            points += 15
            reasons.append("Typical headless resolution")

        if not signals.cookies_enabled:
            points += 15
            reasons.append("Cookies disabled")
        if signals.plugin_count == 0:
            points += 10
            reasons.append("No browser plugins")
        if signals.fonts_detected < _MIN_FONTS:
            points += 15
            reasons.append("Very few fonts installed")
        if signals.hardware_concurrency == 0:
            points += 10
            reasons.append("No hardware concurrency info")
        if not signals.languages:
            points += 10
            reasons.append("No language preference")

        return SubScore(score=min(_MAX_SCORE, points), reasons=reasons)

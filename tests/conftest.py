"""Pytest fixtures for trustgate tests."""

from __future__ import annotations

import os

import pytest

from trustgate.detection import (
    BehavioralSignals,
    BrowserSignals,
    HoneypotFields,
    ProbeFailure,
    ProbeResult,
    RequestMetadata,
)

# A fixed "now" in epoch milliseconds for honeypot clocks
NOW_MS = 1_700_000_000_000.0

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate, br",
}

CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
HEADLESS_UA = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) HeadlessChrome/120.0.0.0 Safari/537.36"
)


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Start every session from a clean settings cache and default policy."""
    os.environ.setdefault("ENVIRONMENT", "test")

    from trustgate.config import get_settings

    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest.fixture
def fixed_clock():
    """Honeypot clock frozen at NOW_MS."""
    return lambda: NOW_MS


@pytest.fixture
def human_behavior():
    """Interaction summary of a person who read and typed into a form."""
    return BehavioralSignals(
        mouse_movements=240,
        keystrokes=85,
        time_on_page_ms=45_000,
        form_fill_time_ms=30_000,
    )


@pytest.fixture
def scripted_behavior():
    """Interaction summary of a script that submitted immediately."""
    return BehavioralSignals(
        mouse_movements=0,
        keystrokes=0,
        time_on_page_ms=400,
        form_fill_time_ms=100,
        rapid_submission=True,
    )


def make_browser(**overrides) -> BrowserSignals:
    """A desktop Chrome fingerprint with nothing suspicious about it."""
    values = {
        "screen_width": 1920,
        "screen_height": 1080,
        "color_depth": 24,
        "pixel_ratio": 1.0,
        "cookies_enabled": True,
        "languages": "en-US,en",
        "platform": "Win32",
        "hardware_concurrency": 8,
        "device_memory": 8.0,
        "timezone": "Europe/London",
        "timezone_offset": 0,
        "webgl_vendor": "Google Inc. (NVIDIA)",
        "webgl_renderer": "ANGLE (NVIDIA GeForce RTX 3060)",
        "canvas": ProbeResult.ok("a1b2c3"),
        "audio": ProbeResult.ok("124.04347527516074"),
        "touch_points": 0,
        "fonts_detected": 24,
        "plugin_count": 5,
    }
    values.update(overrides)
    return BrowserSignals(**values)


@pytest.fixture
def real_browser():
    return make_browser()


@pytest.fixture
def headless_browser():
    """Every browser anomaly at once, which saturates the browser score."""
    return make_browser(
        screen_width=800,
        screen_height=600,
        hardware_concurrency=0,
        webgl_vendor=None,
        webgl_renderer=None,
        canvas=ProbeResult(failure=ProbeFailure.ERROR),
        audio=ProbeResult(failure=ProbeFailure.UNAVAILABLE),
        fonts_detected=2,
        plugin_count=0,
        has_webdriver=True,
    )


@pytest.fixture
def browser_request():
    return RequestMetadata(ip="203.0.113.7", user_agent=CHROME_UA, headers=dict(BROWSER_HEADERS))


@pytest.fixture
def headless_request():
    """Headless UA with no negotiation headers and an automation header."""
    return RequestMetadata(
        ip="198.51.100.20",
        user_agent=HEADLESS_UA,
        headers={"X-Puppeteer": "1"},
    )


@pytest.fixture
def empty_honeypot():
    return HoneypotFields()


@pytest.fixture
def browser_factory():
    """Build a clean fingerprint with selected fields overridden."""
    return make_browser

"""Request metadata scoring: User-Agent and header sanity.

The client IP is never scored here; it travels on the metadata for logs.
"""

from __future__ import annotations

import re

from trustgate.detection.models import RequestMetadata, SubScore

_MAX_SCORE = 100
_MIN_USER_AGENT_LENGTH = 20

# Crawlers, headless engines and HTTP client libraries
_BOT_USER_AGENT = re.compile(
    r"bot|crawl|spider|scrape|headless|phantom|selenium|puppeteer|playwright"
    r"|wget|curl|python-requests|axios|fetch|node-fetch",
    re.IGNORECASE,
)

# (header, points, reason) for negotiation headers every browser sends
_EXPECTED_HEADERS: list[tuple[str, int, str]] = [
    ("accept-language", 15, "Missing Accept-Language header"),
    ("accept-encoding", 10, "Missing Accept-Encoding header"),
    ("accept", 10, "Missing Accept header"),
]

AUTOMATION_HEADERS = ("x-requested-with-automation", "x-selenium", "x-puppeteer")
_AUTOMATION_HEADER_POINTS = 30


class RequestSignalScorer:
    """Score server-visible request metadata on a 0-100 scale."""

    def score(self, request: RequestMetadata) -> SubScore:
        points = 0
        reasons: list[str] = []

        user_agent = request.user_agent or request.header("user-agent")
        if not user_agent or len(user_agent) < _MIN_USER_AGENT_LENGTH:
            points += 25
            reasons.append("Invalid or missing User-Agent")
        elif _BOT_USER_AGENT.search(user_agent):
            points += 40
            reasons.append("Bot pattern in User-Agent")

        for header, header_points, reason in _EXPECTED_HEADERS:
            if request.header(header) is None:
                points += header_points
                reasons.append(reason)

        for header in AUTOMATION_HEADERS:
            if request.header(header) is not None:
                points += _AUTOMATION_HEADER_POINTS
                reasons.append(f"Automation header: {header}")

        return SubScore(score=min(_MAX_SCORE, points), reasons=reasons)

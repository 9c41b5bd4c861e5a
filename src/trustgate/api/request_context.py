"""Extract :class:`RequestMetadata` from an inbound aiohttp request."""

from __future__ import annotations

from collections.abc import Mapping

from aiohttp import web

from trustgate.detection.models import RequestMetadata


def client_ip(headers: Mapping[str, str], peername: str | None = None) -> str:
    """Resolve the client IP behind proxies.

    Order: first ``X-Forwarded-For`` hop, ``X-Real-IP``, the socket peer,
    then ``"unknown"``.
    """
    forwarded = headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop

    real_ip = headers.get("X-Real-IP", "").strip()
    if real_ip:
        return real_ip

    return peername or "unknown"


def request_metadata_from(request: web.Request) -> RequestMetadata:
    """Build the request signal record for the scorers."""
    return RequestMetadata(
        ip=client_ip(request.headers, request.remote),
        user_agent=request.headers.get("User-Agent"),
        headers=dict(request.headers),
    )

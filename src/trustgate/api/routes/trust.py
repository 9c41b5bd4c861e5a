"""Trust evaluation endpoints.

The handlers are the policy consumers of the engine: they turn a verdict
into an HTTP outcome. Suspicious traffic is allowed but logged; bots are
rejected with 403 when ``block_bots`` is set on the app.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any

from aiohttp import web

from trustgate.api.request_context import request_metadata_from
from trustgate.detection import (
    Category,
    TelemetryValidationError,
    TrustAggregator,
    TrustVerdict,
    generate_form_token,
    log_bot_detection,
    parse_evaluation_request,
)
from trustgate.detection.honeypot import HONEYPOT_FIELD_NAMES, honeypot_css
from trustgate.logging import get_logger

log = get_logger("trustgate.api.routes.trust")

HONEYPOT_SELECTOR = ".hp-field"


class TrustAction(StrEnum):
    """What the caller should do with the request that was evaluated."""

    ALLOW = "allow"
    FLAG = "flag"  # Allow but monitor / soft-throttle
    BLOCK = "block"


def action_for(verdict: TrustVerdict) -> TrustAction:
    if verdict.is_bot:
        return TrustAction.BLOCK
    if verdict.category == Category.SUSPICIOUS:
        return TrustAction.FLAG
    return TrustAction.ALLOW


async def _read_json(request: web.Request) -> Any:  # noqa: ANN401
    if not request.can_read_body:
        return {}
    try:
        return await request.json()
    except ValueError as e:  # JSONDecodeError, UnicodeDecodeError
        raise web.HTTPBadRequest(
            text=json.dumps({"error": "Invalid JSON body", "detail": str(e)}),
            content_type="application/json",
        ) from e


def _invalid_telemetry(e: TelemetryValidationError) -> web.Response:
    return web.json_response({"error": "Invalid telemetry", "details": e.errors}, status=400)


async def handle_form_token(request: web.Request) -> web.Response:
    """GET /api/v1/trust/form-token: issue a token for a freshly rendered form."""
    return web.json_response(
        {
            "token": generate_form_token(),
            "fields": list(HONEYPOT_FIELD_NAMES),
            "css": honeypot_css(HONEYPOT_SELECTOR),
        }
    )


async def handle_evaluate(request: web.Request) -> web.Response:
    """POST /api/v1/trust/evaluate: full evaluation of all signal sources."""
    aggregator: TrustAggregator = request.app["trust_aggregator"]
    block_bots: bool = request.app["block_bots"]

    data = await _read_json(request)
    try:
        inputs = parse_evaluation_request(data)
    except TelemetryValidationError as e:
        log.info("telemetry_rejected", path=request.path, error_count=len(e.errors))
        return _invalid_telemetry(e)

    metadata = request_metadata_from(request)
    verdict = aggregator.aggregate(
        behavioral=inputs.behavioral,
        browser=inputs.browser,
        honeypot=inputs.honeypot,
        request=metadata,
    )
    log_bot_detection(verdict, metadata.ip, request.path)

    action = action_for(verdict)
    body = {**verdict.to_dict(), "action": action.value}
    status = 403 if block_bots and action == TrustAction.BLOCK else 200
    return web.json_response(body, status=status)


async def handle_quick_check(request: web.Request) -> web.Response:
    """POST /api/v1/trust/quick-check: honeypot plus behavioral only."""
    aggregator: TrustAggregator = request.app["trust_aggregator"]

    data = await _read_json(request)
    try:
        inputs = parse_evaluation_request(data)
    except TelemetryValidationError as e:
        return _invalid_telemetry(e)

    result = aggregator.quick_check(behavioral=inputs.behavioral, honeypot=inputs.honeypot)
    if result.is_bot:
        log.warning(
            "quick_check_bot",
            ip=request_metadata_from(request).ip,
            endpoint=request.path,
            reason=result.reason,
        )
    return web.json_response({"isBot": result.is_bot, "reason": result.reason})


def register_trust_routes(app: web.Application) -> None:
    app.router.add_get("/api/v1/trust/form-token", handle_form_token)
    app.router.add_post("/api/v1/trust/evaluate", handle_evaluate)
    app.router.add_post("/api/v1/trust/quick-check", handle_quick_check)

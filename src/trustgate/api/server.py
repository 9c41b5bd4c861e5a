"""Trust API server.

Runs the detection engine behind a small aiohttp app so form pages and
backend services can request form tokens and verdicts over HTTP.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any

from aiohttp import web

from trustgate.api.middleware import (
    create_cors_middleware,
    create_error_middleware,
    create_rate_limit_middleware,
)
from trustgate.api.routes.health import handle_health
from trustgate.api.routes.trust import register_trust_routes
from trustgate.detection import ScoringPolicy, TrustAggregator
from trustgate.logging import get_logger
from trustgate.ratelimit import CounterStore, InMemoryCounterStore, RateLimiter

log = get_logger("trustgate.api.server")


class TrustAPIServer:
    """REST API exposing trust evaluation."""

    def __init__(
        self,
        aggregator: TrustAggregator,
        *,
        host: str = "0.0.0.0",  # nosec B104 - Intentional for Docker container
        port: int = 8080,
        allowed_origins: list[str] | None = None,
        block_bots: bool = True,
        rate_limit_store: CounterStore | None = None,
        rate_limit_max_requests: int = 30,
        rate_limit_window_seconds: float = 60.0,
    ) -> None:
        self._aggregator = aggregator
        self._host = host
        self._port = port
        self._allowed_origins = allowed_origins
        self._block_bots = block_bots
        self._rate_limiter = RateLimiter(
            rate_limit_store if rate_limit_store is not None else InMemoryCounterStore(),
            max_requests=rate_limit_max_requests,
            window_seconds=rate_limit_window_seconds,
        )
        self._app: web.Application | None = None
        self._runner: web.AppRunner | None = None

        log.info("trust_api_initialized", host=host, port=port)

    def create_app(self) -> web.Application:
        """Create and configure the aiohttp application."""
        middlewares: list[Any] = []

        # CORS (outermost)
        if self._allowed_origins:
            middlewares.append(create_cors_middleware(self._allowed_origins))

        middlewares.append(create_error_middleware())
        middlewares.append(create_rate_limit_middleware(self._rate_limiter))

        app = web.Application(middlewares=middlewares)
        app["trust_aggregator"] = self._aggregator
        app["block_bots"] = self._block_bots

        app.router.add_get("/api/v1/health", handle_health)
        register_trust_routes(app)

        self._app = app
        return app

    async def start(self) -> None:
        """Start the server."""
        if self._app is None:
            self.create_app()

        if self._app is None:  # pragma: no cover
            raise RuntimeError("create_app() must be called first")

        self._runner = web.AppRunner(self._app)
        await self._runner.setup()

        site = web.TCPSite(self._runner, self._host, self._port)
        await site.start()

        log.info("trust_api_started", host=self._host, port=self._port)

    async def stop(self) -> None:
        """Stop the server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            log.info("trust_api_stopped")

    async def purge_rate_limits(self, interval_seconds: float = 300.0) -> None:
        """Periodically drop expired rate-limit windows until cancelled."""
        while True:
            await asyncio.sleep(interval_seconds)
            removed = self._rate_limiter.purge_expired()
            if removed:
                log.debug("rate_limit_windows_purged", removed=removed)


async def run_server(server: TrustAPIServer) -> None:
    """Run ``server`` until cancelled (main entry point for the container)."""
    await server.start()
    purger = asyncio.create_task(server.purge_rate_limits())

    try:
        while True:
            await asyncio.sleep(3600)
    except asyncio.CancelledError:
        pass
    finally:
        purger.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purger
        await server.stop()


def main() -> None:
    """Main entry point for the trust API service."""
    from trustgate.config import get_settings
    from trustgate.logging import setup_logging

    settings = get_settings()
    setup_logging()

    aggregator = TrustAggregator(policy=ScoringPolicy.from_settings(settings))
    server = TrustAPIServer(
        aggregator,
        host=settings.api_host,
        port=settings.api_port,
        allowed_origins=settings.allowed_origins,
        block_bots=settings.block_bots,
        rate_limit_max_requests=settings.rate_limit_max_requests,
        rate_limit_window_seconds=settings.rate_limit_window_seconds,
    )

    try:
        asyncio.run(run_server(server))
    except KeyboardInterrupt:
        log.info("trust_api_interrupted")


if __name__ == "__main__":
    main()

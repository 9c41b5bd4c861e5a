"""Unit tests for trust API server wiring and lifecycle."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from trustgate.api.server import TrustAPIServer, main, run_server
from trustgate.config import Settings
from trustgate.detection import TrustAggregator
from trustgate.ratelimit import CounterEntry, InMemoryCounterStore


class TestTrustAPIServerCreateApp:
    """Tests for TrustAPIServer.create_app wiring."""

    def test_create_app_sets_app_keys(self) -> None:
        aggregator = TrustAggregator()
        server = TrustAPIServer(aggregator, block_bots=False)
        app = server.create_app()

        assert app["trust_aggregator"] is aggregator
        assert app["block_bots"] is False

    def test_create_app_without_cors(self) -> None:
        app = TrustAPIServer(TrustAggregator()).create_app()
        # error + rate-limit
        assert len(app.middlewares) == 2

    def test_create_app_adds_cors_when_allowed_origins_set(self) -> None:
        server = TrustAPIServer(TrustAggregator(), allowed_origins=["https://example.com"])
        app = server.create_app()
        # CORS + error + rate-limit
        assert len(app.middlewares) == 3

    def test_routes_registered(self) -> None:
        app = TrustAPIServer(TrustAggregator()).create_app()
        routes = {
            (route.method, route.resource.canonical)
            for route in app.router.routes()
            if route.method != "HEAD"
        }
        assert routes == {
            ("GET", "/api/v1/health"),
            ("GET", "/api/v1/trust/form-token"),
            ("POST", "/api/v1/trust/evaluate"),
            ("POST", "/api/v1/trust/quick-check"),
        }


class TestTrustAPIServerLifecycle:
    """Tests for start/stop lifecycle methods."""

    @pytest.mark.asyncio
    async def test_start_creates_runner_and_site(self) -> None:
        runner = AsyncMock()
        site = AsyncMock()

        with (
            patch("trustgate.api.server.web.AppRunner", return_value=runner) as mock_runner_cls,
            patch("trustgate.api.server.web.TCPSite", return_value=site) as mock_site_cls,
        ):
            server = TrustAPIServer(TrustAggregator())
            await server.start()

        mock_runner_cls.assert_called_once()
        runner.setup.assert_awaited_once()
        mock_site_cls.assert_called_once_with(runner, "0.0.0.0", 8080)
        site.start.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stop_cleans_runner_and_resets_state(self) -> None:
        runner = AsyncMock()
        server = TrustAPIServer(TrustAggregator())
        server._runner = runner

        await server.stop()

        runner.cleanup.assert_awaited_once()
        assert server._runner is None

    @pytest.mark.asyncio
    async def test_stop_is_noop_when_not_started(self) -> None:
        server = TrustAPIServer(TrustAggregator())
        await server.stop()
        assert server._runner is None

    @pytest.mark.asyncio
    async def test_purge_rate_limits(self) -> None:
        store = InMemoryCounterStore()
        store.set("stale", CounterEntry(count=3, window_start=0.0))
        server = TrustAPIServer(TrustAggregator(), rate_limit_store=store)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(server.purge_rate_limits(interval_seconds=0.01), timeout=0.2)

        assert store.get("stale") is None


class TestRunServer:
    """Tests for run_server() lifecycle."""

    @pytest.mark.asyncio
    async def test_run_server_starts_and_stops(self) -> None:
        server = AsyncMock()
        server.purge_rate_limits = MagicMock(return_value=asyncio.sleep(0))

        with patch(
            "trustgate.api.server.asyncio.sleep",
            side_effect=asyncio.CancelledError,
        ):
            await run_server(server)

        server.start.assert_awaited_once()
        server.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_purger_finishes_before_stop(self) -> None:
        events: list[str] = []
        started = asyncio.Event()

        async def purge() -> None:
            started.set()
            try:
                await asyncio.Event().wait()
            finally:
                events.append("purger_done")

        async def stop() -> None:
            events.append("stopped")

        server = AsyncMock()
        server.purge_rate_limits = MagicMock(return_value=purge())
        server.stop = AsyncMock(side_effect=stop)

        task = asyncio.create_task(run_server(server))
        await asyncio.wait_for(started.wait(), timeout=1)
        task.cancel()
        await task

        assert events == ["purger_done", "stopped"]


class TestMain:
    """Tests for main() bootstrap behavior."""

    def test_main_runs_server_from_settings(self) -> None:
        settings = Settings(
            _env_file=None,
            api_host="127.0.0.1",
            api_port=9090,
            ALLOWED_ORIGINS="https://forms.example",
            block_bots=False,
            trust_threshold_definite=85,
        )

        with (
            patch("trustgate.config.get_settings", return_value=settings),
            patch("trustgate.logging.setup_logging") as mock_setup_logging,
            patch("trustgate.api.server.run_server", new_callable=AsyncMock) as mock_run_server,
        ):
            main()

        mock_setup_logging.assert_called_once()
        mock_run_server.assert_awaited_once()
        server = mock_run_server.await_args.args[0]
        assert isinstance(server, TrustAPIServer)
        assert server._host == "127.0.0.1"
        assert server._port == 9090
        assert server._allowed_origins == ["https://forms.example"]
        assert server._block_bots is False
        assert server._aggregator.policy.threshold_definite == 85

    def test_main_handles_keyboard_interrupt(self) -> None:
        def _raise_keyboard_interrupt(coro):
            coro.close()
            raise KeyboardInterrupt

        with (
            patch("trustgate.config.get_settings", return_value=Settings(_env_file=None)),
            patch("trustgate.logging.setup_logging"),
            patch(
                "trustgate.api.server.asyncio.run",
                side_effect=_raise_keyboard_interrupt,
            ) as mock_run,
        ):
            main()
        mock_run.assert_called_once()

"""Health check endpoint for the trust API."""

from aiohttp import web

from trustgate import __version__


async def handle_health(request: web.Request) -> web.Response:
    """GET /api/v1/health: no rate limit."""
    return web.json_response({"status": "healthy", "version": __version__})

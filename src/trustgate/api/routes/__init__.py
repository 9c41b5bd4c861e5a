"""Route handlers for the trust API."""

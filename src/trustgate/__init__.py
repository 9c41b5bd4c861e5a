"""trustgate: multi-signal bot and trust detection."""

__version__ = "0.1.0"

"""Event-driven networking core: framing, resource ids, polling and adapter drivers."""

__version__ = "0.1.0"
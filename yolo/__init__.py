"""In-memory limit order book with a JSON HTTP API."""

__version__ = "0.1.0"

__all__ = [
    "order",
    "limit",
    "order_book",
    "server_env",
    "server_config",
    "server_state",
    "models",
    "api",
    "server",
]
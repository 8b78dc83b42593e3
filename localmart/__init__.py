"""LocalMart chat backend and polling client."""

__version__ = "0.1.0"

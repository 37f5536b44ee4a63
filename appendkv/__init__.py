"""In-memory append-only key-value store with a hash-chained log, named collections and a request/response layer."""

__version__ = "0.1.0"
__all__ = ["api", "collections", "demo", "store"]
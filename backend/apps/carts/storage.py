"""Cart persistence backends."""
from __future__ import annotations

from typing import Any, Dict, Optional

from django.core.cache import cache as default_cache


class CacheCartStorage:
    """Cart entries in the Django cache, expiring after ``ttl`` seconds."""

    def __init__(self, cache_backend=None, ttl: Optional[int] = None):
        self.cache = cache_backend if cache_backend is not None else default_cache
        self.ttl = ttl

    def get(self, key: str) -> Any:
        return self.cache.get(key)

    def set(self, key: str, value: Any) -> None:
        self.cache.set(key, value, timeout=self.ttl)

    def delete(self, key: str) -> None:
        self.cache.delete(key)


class InMemoryCartStorage:
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

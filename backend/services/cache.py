"""
Simple in-memory cache for vocabulary lists
"""

import time
from typing import Dict, Any, Optional, Callable, Awaitable
from threading import Lock


class SimpleCache:
    """Thread-safe in-memory cache with TTL. A TTL of 0 disables storing."""

    def __init__(self, default_ttl: int = 300):  # 5 minutes default
        self.cache: Dict[str, tuple[Any, float]] = {}
        self.lock = Lock()
        self.default_ttl = default_ttl

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache if not expired"""
        with self.lock:
            if key in self.cache:
                value, expiry = self.cache[key]
                if time.time() < expiry:
                    return value
                else:
                    del self.cache[key]
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None):
        """Set value in cache with TTL (seconds)"""
        ttl = self.default_ttl if ttl is None else ttl
        if ttl <= 0:
            return
        expiry = time.time() + ttl
        with self.lock:
            self.cache[key] = (value, expiry)

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return cached value, or await loader() and cache its result"""
        value = self.get(key)
        if value is None:
            value = await loader()
            self.set(key, value)
        return value

    def delete(self, key: str):
        """Delete entry from cache"""
        with self.lock:
            self.cache.pop(key, None)

    def clear(self):
        """Clear all cache entries"""
        with self.lock:
            self.cache.clear()

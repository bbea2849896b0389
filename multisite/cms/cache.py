"""
Response Cache for the CMS

Keeps rendered public pages in memory for a while, keyed per request.
"""
from __future__ import annotations
import time
from typing import Optional, Dict
from dataclasses import dataclass
from threading import Lock

from starlette.requests import Request


@dataclass
class CachedResponse:
    """A rendered page kept in the cache."""
    body: str
    media_type: str
    created_at: float

    def expired(self, ttl_seconds: int, now: Optional[float] = None) -> bool:
        return (now or time.time()) - self.created_at > ttl_seconds


class ResponseCache:
    """
    In-memory response cache.
    For production, this should be replaced with Redis or similar.
    """

    def __init__(self, ttl_seconds: int = 300):
        self._entries: Dict[str, CachedResponse] = {}
        self._lock = Lock()
        self._ttl_seconds = ttl_seconds

    def cache_key(self, request: Request) -> str:
        """Key a request is cached under."""
        return request.url.path

    def get(self, request: Request) -> Optional[CachedResponse]:
        """Get the cached response for a request, None if missing or expired."""
        key = self.cache_key(request)
        with self._lock:
            entry = self._entries.get(key)

            if entry is None:
                return None

            if entry.expired(self._ttl_seconds):
                del self._entries[key]
                return None

            return entry

    def store(self, request: Request, body: str, media_type: str = "text/html") -> CachedResponse:
        """Cache a rendered response for a request."""
        entry = CachedResponse(body=body, media_type=media_type, created_at=time.time())

        with self._lock:
            self._entries[self.cache_key(request)] = entry
            self._cleanup_expired()

        return entry

    def clear(self) -> None:
        """Drop every cached response."""
        with self._lock:
            self._entries.clear()

    def keys(self) -> list:
        with self._lock:
            return list(self._entries)

    def _cleanup_expired(self):
        """Remove expired entries. Called within lock."""
        now = time.time()
        expired = [
            key for key, entry in self._entries.items()
            if entry.expired(self._ttl_seconds, now)
        ]
        for key in expired:
            del self._entries[key]

    def get_entry_count(self) -> int:
        """Get the number of live cache entries."""
        with self._lock:
            self._cleanup_expired()
            return len(self._entries)

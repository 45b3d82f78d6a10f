"""
Lookup cache for healtara

Directory lookups can be cached for a short TTL. The cache is an explicit
component handed to the resolver; nothing is cached implicitly.
"""
from __future__ import annotations
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple
from threading import Lock

from healtara.models.tenant import Hospital, Doctor
from healtara.services.directory import Directory

_MISSING = object()


class TTLCache:
    """
    In-memory key/value cache with per-entry expiry.
    Misses (None results) are cached too, so an unknown label is not looked
    up again on every request.
    """

    def __init__(self, ttl_seconds: float = 30, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}
        self._lock = Lock()
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Get a cached value, returning default if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default

            stored_at, value = entry
            if self._clock() - stored_at > self._ttl_seconds:
                del self._entries[key]
                return default

            return value

    def set(self, key: Hashable, value: Any):
        with self._lock:
            self._entries[key] = (self._clock(), value)
            self._cleanup_expired()

    def clear(self):
        with self._lock:
            self._entries.clear()

    def _cleanup_expired(self):
        """Remove expired entries. Called within lock."""
        now = self._clock()
        expired = [
            key for key, (stored_at, _) in self._entries.items()
            if now - stored_at > self._ttl_seconds
        ]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            self._cleanup_expired()
            return len(self._entries)


class CachedDirectory(Directory):
    """Wraps another Directory and caches its answers. Failures are not cached."""

    def __init__(self, directory: Directory, cache: TTLCache):
        self.directory = directory
        self.cache = cache

    async def _cached(self, key: Tuple[str, str], lookup) -> Optional[Any]:
        value = self.cache.get(key, _MISSING)
        if value is not _MISSING:
            return value
        value = await lookup()
        self.cache.set(key, value)
        return value

    async def find_hospital_by_name(self, normalized_name: str) -> Optional[Hospital]:
        return await self._cached(
            ("name", normalized_name),
            lambda: self.directory.find_hospital_by_name(normalized_name),
        )

    async def find_hospital_by_custom_domain(self, host: str) -> Optional[Hospital]:
        return await self._cached(
            ("custom_domain", host.lower()),
            lambda: self.directory.find_hospital_by_custom_domain(host),
        )

    async def find_hospital_by_subdomain(self, label: str) -> Optional[Hospital]:
        return await self._cached(
            ("subdomain", label.lower()),
            lambda: self.directory.find_hospital_by_subdomain(label),
        )

    async def get_hospital(self, id_or_slug: str) -> Optional[Hospital]:
        return await self._cached(
            ("hospital", str(id_or_slug).lower()),
            lambda: self.directory.get_hospital(id_or_slug),
        )

    async def get_doctor(self, slug: str) -> Optional[Doctor]:
        return await self._cached(
            ("doctor", slug.lower()),
            lambda: self.directory.get_doctor(slug),
        )

    async def aclose(self):
        await self.directory.aclose()

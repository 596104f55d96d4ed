"""Lightweight in-memory cache used by the font registry for glyph shapes."""

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Hashable, Optional

_MISSING = object()


@dataclass
class _CacheEntry:
    value: Any
    expires_at: Optional[float]

    def is_expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() >= self.expires_at


class Cache:
    """Concurrent-safe cache with optional TTL and size control.

    ``None`` is a legitimate cached value (a glyph lookup that found nothing),
    so lookups report misses through :meth:`has` / :meth:`get_or_set` rather
    than through the returned value.
    """

    def __init__(self, max_size: int = 4096, ttl: int = 0) -> None:
        self.max_size = max(1, int(max_size))
        self.default_ttl = max(0, int(ttl))
        self._entries: "OrderedDict[Hashable, _CacheEntry]" = OrderedDict()
        self._lock = RLock()
        self.hits = 0
        self.misses = 0

    def _ensure_capacity(self) -> None:
        # Oldest insertions go first
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def _lookup(self, key: Hashable) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return _MISSING
        if entry.is_expired():
            self._entries.pop(key, None)
            return _MISSING
        self._entries.move_to_end(key)
        return entry.value

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            value = self._lookup(key)
            return default if value is _MISSING else value

    def set(self, key: Hashable, value: Any, ttl: Optional[int] = None) -> None:
        ttl_to_use = self.default_ttl if ttl is None else max(0, int(ttl))
        expires_at = time.monotonic() + ttl_to_use if ttl_to_use else None
        with self._lock:
            self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)
            self._entries.move_to_end(key)
            self._ensure_capacity()

    def delete(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def has(self, key: Hashable) -> bool:
        with self._lock:
            return self._lookup(key) is not _MISSING

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_or_set(self, key: Hashable, factory: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        with self._lock:
            cached = self._lookup(key)
            if cached is not _MISSING:
                self.hits += 1
                return cached
            self.misses += 1
            value = factory()
            self.set(key, value, ttl=ttl)
            return value

"""A bounded in-memory cache of file properties with per-entry expiry."""

from __future__ import annotations

import logging
import pickle
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

from .types import File

log = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10 * 1024 * 1024


@dataclass
class _Entry:
    data: bytes
    cost: int
    expires_at: float | None


class FileCache:
    """Stores serialized File values, evicting the least recently used when full."""

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._clock = clock
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._size = 0
        self._lock = threading.RLock()
        log.info("Initialized")

    def _drop(self, key: str) -> None:
        entry = self._entries.pop(key, None)
        if entry is not None:
            self._size -= entry.cost

    def get(self, key: str) -> File:
        """Return a copy of the cached value; raise KeyError when absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                raise KeyError(key)
            if entry.expires_at is not None and entry.expires_at <= self._clock():
                self._drop(key)
                raise KeyError(key)
            self._entries.move_to_end(key)
            data = entry.data
        return pickle.loads(data)

    def set(self, key: str, value: File, expire_seconds: int = 0) -> None:
        """Store a value; a non-positive ``expire_seconds`` never expires."""
        data = pickle.dumps(value)
        cost = len(key.encode()) + len(data)
        if cost > self._capacity:
            raise ValueError("entry too large for the cache")
        with self._lock:
            self._drop(key)
            while self._entries and self._size + cost > self._capacity:
                _, evicted = self._entries.popitem(last=False)
                self._size -= evicted.cost
            expires_at = self._clock() + expire_seconds if expire_seconds > 0 else None
            self._entries[key] = _Entry(data, cost, expires_at)
            self._size += cost

    def delete(self, key: str) -> None:
        """Remove a key if it is present."""
        with self._lock:
            self._drop(key)
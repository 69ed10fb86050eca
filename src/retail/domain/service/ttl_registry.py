"""In-process map whose entries expire a fixed time after being set.

Used to remember idempotency keys and completed requests for a retry
window without keeping every key for the life of the process.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Hashable
from typing import Any


class TTLRegistry:

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._ttl = ttl_seconds
        self._clock = clock
        self._store: dict[Hashable, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Any | None:
        now = self._clock()
        with self._lock:
            item = self._store.get(key)
            if item is None:
                return None
            value, expires_at = item
            if expires_at <= now:
                del self._store[key]
                return None
            return value

    def set(self, key: Hashable, value: Any = True) -> None:
        now = self._clock()
        with self._lock:
            self._purge(now)
            self._store[key] = (value, now + self._ttl)

    def delete(self, key: Hashable) -> None:
        with self._lock:
            self._store.pop(key, None)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            self._purge(now)
            return len(self._store)

    def _purge(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self._store.items() if expires_at <= now]
        for key in expired:
            del self._store[key]

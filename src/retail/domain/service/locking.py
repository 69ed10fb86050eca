"""Per-key critical sections.

Every mutation of a campaign, a sale or a product's inventory counter runs
while holding the lock for that aggregate's key. Locks are re-entrant so a
service can call another service that locks the same key.

A key's lock lives only while some thread holds it or waits for it; the
registry therefore never grows past the number of keys in use.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager


class KeyedLocks:

    def __init__(self, namespace: str) -> None:
        self._namespace = namespace
        self._locks: dict[Hashable, threading.RLock] = {}
        self._users: dict[Hashable, int] = {}  # holders + waiters per key
        self._registry_lock = threading.Lock()

    def _acquire_ref(self, key: Hashable) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            self._users[key] = self._users.get(key, 0) + 1
            return lock

    def _release_ref(self, key: Hashable) -> None:
        with self._registry_lock:
            remaining = self._users[key] - 1
            if remaining:
                self._users[key] = remaining
            else:
                del self._users[key]
                del self._locks[key]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._acquire_ref(key)
        try:
            with lock:
                yield
        finally:
            self._release_ref(key)

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)

    def __repr__(self) -> str:
        return f"KeyedLocks({self._namespace!r}, keys={len(self)})"

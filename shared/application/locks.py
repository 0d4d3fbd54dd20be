"""
Keyed Locks

Mutual exclusion scoped to a key, so that writers on one key serialize
while writers on other keys proceed in parallel.
"""

from collections.abc import Hashable, Iterator
from contextlib import contextmanager
import threading


class KeyedLock:
    """
    Registry of per-key locks

    Locks are created on first use and dropped once nobody holds or waits
    for them, so the registry only grows with the number of keys in
    flight.

    Usage:
        locks = KeyedLock()

        with locks.hold(("Vereinsheim", date(2024, 5, 10))):
            # check + write for this key only
            ...
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}
        self._waiters: dict[Hashable, int] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._waiters[key] = self._waiters.get(key, 0) + 1

        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._waiters[key] -= 1
                if not self._waiters[key]:
                    del self._waiters[key]
                    del self._locks[key]

    def __len__(self) -> int:
        """Number of keys currently held or awaited"""
        with self._guard:
            return len(self._locks)

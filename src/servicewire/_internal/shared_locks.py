from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any


class SharedBuildLocks:
    """Per-identifier locks guarding first-time construction of shared identifiers.

    Each identifier gets its own re-entrant lock, created lazily. The table also
    records which thread owns each lock and which identifier each thread is
    waiting for. A thread that would wait on a lock whose owner is (directly or
    through other waiting threads) waiting on this thread gets an error instead
    of a deadlock.
    """

    __slots__ = ("_guard", "_locks", "_owners", "_waiting")

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Any, threading.RLock] = {}
        self._owners: dict[Any, int] = {}
        self._waiting: dict[int, Any] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @contextmanager
    def hold(self, key: Any, deadlock_error: Callable[[], Exception]) -> Iterator[None]:
        """Hold the lock for ``key``; raise ``deadlock_error()`` if waiting would deadlock."""
        me = threading.get_ident()
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            outermost = self._owners.get(key) != me
            if outermost and self._would_deadlock(key, me):
                raise deadlock_error()
            self._waiting[me] = key

        try:
            lock.acquire()
        finally:
            with self._guard:
                del self._waiting[me]

        if outermost:
            with self._guard:
                self._owners[key] = me
        try:
            yield
        finally:
            if outermost:
                with self._guard:
                    del self._owners[key]
            lock.release()

    def _would_deadlock(self, key: Any, me: int) -> bool:
        owner = self._owners.get(key)
        visited: set[int] = set()
        while owner is not None and owner not in visited:
            if owner == me:
                return True
            visited.add(owner)
            waited_key = self._waiting.get(owner)
            if waited_key is None:
                return False
            owner = self._owners.get(waited_key)
        return False


__all__ = ["SharedBuildLocks"]

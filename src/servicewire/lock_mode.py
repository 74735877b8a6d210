from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior for shared-instance construction.

    Pass one of these values as ``Container(lock_mode=...)``. The default,
    ``THREAD``, guarantees at most one construction per shared identifier even
    when several threads resolve it for the first time concurrently.
    """

    THREAD = "thread"
    """Guard the shared-instance cache-miss path with ``threading.RLock``."""

    NONE = "none"
    """Disable locking around cache reads/writes for single-threaded use."""

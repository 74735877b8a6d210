from servicewire.lock_mode import LockMode

DEFAULT_LOCK_MODE = LockMode.THREAD

DEFAULT_MAX_BUILD_DEPTH = 64
"""Deepest chain of nested resolutions allowed before giving up."""

PRIMITIVE_TYPES: frozenset[type] = frozenset(
    {
        int,
        str,
        float,
        bool,
        bytes,
        complex,
        list,
        dict,
        set,
        frozenset,
        tuple,
        object,
    },
)

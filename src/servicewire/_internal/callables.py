from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def positional_capacity(func: Callable[..., Any]) -> int | None:
    """Return how many positional arguments ``func`` accepts, ``None`` for unlimited."""
    try:
        signature = inspect.signature(func)
    except (ValueError, TypeError):
        return 0
    capacity = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if parameter.kind in _POSITIONAL_KINDS:
            capacity += 1
    return capacity


def call_with_container(func: Callable[..., Any], container: Any, *args: Any) -> Any:
    """Call ``func(*args, container)`` when it has room for the container, else ``func(*args)``.

    Lets factories and hooks be written as ``lambda: ...`` or ``lambda container: ...``
    (``lambda value: ...`` or ``lambda value, container: ...`` for hooks).
    """
    capacity = positional_capacity(func)
    if capacity is None or capacity > len(args):
        return func(*args, container)
    return func(*args)


__all__ = ["call_with_container", "positional_capacity"]

from __future__ import annotations

import inspect
import types
from typing import Any, TypeGuard


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_protocol_class(candidate: type[Any]) -> bool:
    return bool(getattr(candidate, "_is_protocol", False))


def is_instantiable(candidate: type[Any]) -> bool:
    """Return true when calling the class can produce an instance."""
    return not inspect.isabstract(candidate) and not is_protocol_class(candidate)


def describe_identifier(identifier: object) -> str:
    if is_runtime_class(identifier):
        return identifier.__qualname__
    return repr(identifier)


__all__ = ["describe_identifier", "is_instantiable", "is_protocol_class", "is_runtime_class"]

from __future__ import annotations

import importlib
import warnings
from typing import Any

from servicewire._internal.type_checks import is_runtime_class

_SETTINGS_MODULES = ("pydantic_settings", "pydantic.v1")
_PYDANTIC_V1_WARNING_PATTERN = (
    r"Core Pydantic V1 functionality isn't compatible with Python 3\.14 or greater\."
)


def _import_base_settings(module_name: str) -> type[Any] | None:
    """Return ``module_name.BaseSettings`` when the module is installed and defines it."""
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=_PYDANTIC_V1_WARNING_PATTERN, category=UserWarning)
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            return None
    base_settings = getattr(module, "BaseSettings", None)
    return base_settings if isinstance(base_settings, type) else None


def _collect_settings_bases() -> tuple[type[Any], ...]:
    bases: list[type[Any]] = []
    for module_name in _SETTINGS_MODULES:
        base = _import_base_settings(module_name)
        if base is not None and base not in bases:
            bases.append(base)
    return tuple(bases)


SETTINGS_BASES: tuple[type[Any], ...] = _collect_settings_bases()


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether a class is a supported Pydantic settings model.

    Both ``pydantic_settings.BaseSettings`` and the legacy
    ``pydantic.v1.BaseSettings`` are recognised when installed. Without
    Pydantic every candidate yields ``False``.

    The container builds unbound settings subclasses with a zero-argument
    call, so values come from the environment and ``.env`` files rather than
    from constructor injection, and caches the result as a shared instance.

    Args:
        candidate: Object to test.

    """
    if not is_runtime_class(candidate):
        return False
    try:
        return any(issubclass(candidate, base) for base in SETTINGS_BASES)
    except TypeError:
        return False


__all__ = [
    "SETTINGS_BASES",
    "is_pydantic_settings_subclass",
]

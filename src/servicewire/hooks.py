from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from servicewire._internal.type_checks import describe_identifier
from servicewire.exceptions import ServiceWireInvalidRegistrationError

logger = logging.getLogger(__name__)

Decorator = Callable[..., Any]
"""``fn(value)`` or ``fn(value, container)`` returning the replacement value."""

AfterResolvingCallback = Callable[..., Any]
"""``fn(value)`` or ``fn(value, container)``; the return value is ignored."""


@dataclass(frozen=True, slots=True)
class MethodInjection:
    """A post-construction call made on a built value."""

    method_name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)


class LifecycleHooks:
    """Ordered decorators, method-injection directives and after-resolving callbacks."""

    def __init__(self) -> None:
        self._decorators: dict[Any, list[Decorator]] = {}
        self._method_injections: dict[Any, dict[str, MethodInjection]] = {}
        self._after_resolving: dict[Any, list[AfterResolvingCallback]] = {}

    def add_decorator(self, identifier: Any, decorator: Decorator) -> None:
        if not callable(decorator):
            msg = "decorate() parameter 'decorator' must be callable."
            raise ServiceWireInvalidRegistrationError(msg)
        self._decorators.setdefault(identifier, []).append(decorator)
        logger.debug("Registered decorator %r for %s", decorator, describe_identifier(identifier))

    def add_method_injection(
        self,
        identifier: Any,
        method_name: str,
        arguments: Mapping[str, Any] | None = None,
    ) -> None:
        directives = self._method_injections.setdefault(identifier, {})
        if method_name in directives:
            msg = (
                f"Method injection for {describe_identifier(identifier)}.{method_name}() "
                "is already registered."
            )
            raise ServiceWireInvalidRegistrationError(msg)
        directives[method_name] = MethodInjection(
            method_name=method_name,
            arguments=MappingProxyType(dict(arguments or {})),
        )
        logger.debug(
            "Registered method injection %s.%s()",
            describe_identifier(identifier),
            method_name,
        )

    def add_after_resolving(self, identifier: Any, callback: AfterResolvingCallback) -> None:
        if not callable(callback):
            msg = "after_resolving() parameter 'callback' must be callable."
            raise ServiceWireInvalidRegistrationError(msg)
        self._after_resolving.setdefault(identifier, []).append(callback)

    def decorators_for(self, identifier: Any) -> tuple[Decorator, ...]:
        return tuple(self._decorators.get(identifier, ()))

    def method_injections_for(self, identifier: Any) -> tuple[MethodInjection, ...]:
        return tuple(self._method_injections.get(identifier, {}).values())

    def after_resolving_for(self, identifier: Any) -> tuple[AfterResolvingCallback, ...]:
        return tuple(self._after_resolving.get(identifier, ()))

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from typing_extensions import Self

from servicewire._internal.type_checks import describe_identifier, is_runtime_class
from servicewire.bindings import Concrete, classify_concrete
from servicewire.exceptions import ServiceWireInvalidRegistrationError

logger = logging.getLogger(__name__)


class ContextualOverrideTable:
    """Overrides that apply only while a specific consumer class is being built."""

    def __init__(self) -> None:
        self._overrides: dict[tuple[type[Any], Any], Concrete] = {}

    def add(self, consumer: type[Any], dependency: Any, implementation: Any) -> None:
        self._overrides[(consumer, dependency)] = classify_concrete(implementation)
        logger.debug(
            "When building %s, %s is given %r",
            describe_identifier(consumer),
            describe_identifier(dependency),
            implementation,
        )

    def lookup(self, consumer: type[Any] | None, dependency: Any) -> Concrete | None:
        if consumer is None:
            return None
        return self._overrides.get((consumer, dependency))

    def __len__(self) -> int:
        return len(self._overrides)


class ContextualBindingBuilder:
    """Fluent helper behind ``container.when(Consumer).needs(Dependency).give(Impl)``.

    Only writes into the override table; nothing is resolved here.
    """

    def __init__(self, table: ContextualOverrideTable, consumers: type[Any] | Iterable[type[Any]]) -> None:
        if is_runtime_class(consumers):
            consumers = (consumers,)
        self._table = table
        self._consumers: tuple[type[Any], ...] = tuple(consumers)
        if not self._consumers:
            msg = "when() requires at least one consumer class."
            raise ServiceWireInvalidRegistrationError(msg)
        for consumer in self._consumers:
            if not is_runtime_class(consumer):
                msg = f"when() consumers must be classes, got {consumer!r}."
                raise ServiceWireInvalidRegistrationError(msg)
        self._dependency: Any = None
        self._has_dependency = False

    def needs(self, dependency: Any) -> Self:
        """Name the dependency identifier the override replaces."""
        self._dependency = dependency
        self._has_dependency = True
        return self

    def give(self, implementation: Any) -> None:
        """Register the class, factory or value the consumers receive instead."""
        if not self._has_dependency:
            msg = "needs() must be called before give()."
            raise ServiceWireInvalidRegistrationError(msg)
        for consumer in self._consumers:
            self._table.add(consumer, self._dependency, implementation)

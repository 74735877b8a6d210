from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from servicewire._internal.type_checks import describe_identifier, is_runtime_class
from servicewire.exceptions import ServiceWireInvalidRegistrationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FactoryConcrete:
    """A callable invoked with the container to produce the value."""

    factory: Callable[..., Any]


@dataclass(frozen=True, slots=True)
class TypeConcrete:
    """A class built by introspecting and resolving its constructor parameters."""

    cls: type[Any]


@dataclass(frozen=True, slots=True)
class ValueConcrete:
    """A pre-built value returned unchanged."""

    value: Any


Concrete: TypeAlias = FactoryConcrete | TypeConcrete | ValueConcrete


def classify_concrete(concrete: Any) -> Concrete:
    """Wrap a user supplied concrete into its tagged variant.

    Classes become ``TypeConcrete``, other callables ``FactoryConcrete`` and
    everything else ``ValueConcrete``. Already classified values pass through.
    """
    if isinstance(concrete, FactoryConcrete | TypeConcrete | ValueConcrete):
        return concrete
    if is_runtime_class(concrete):
        return TypeConcrete(concrete)
    if callable(concrete):
        return FactoryConcrete(concrete)
    return ValueConcrete(concrete)


@dataclass(frozen=True, slots=True)
class Binding:
    """Registered mapping from an identifier to its concrete."""

    identifier: Any
    concrete: Concrete
    shared: bool = False
    # Registered through instance(): the value is re-cached as-is, never passed to hooks.
    prebuilt: bool = False


@dataclass(slots=True)
class BindingRegistry:
    """Hold bindings, cached instances, aliases, tags and global parameters.

    Writes other than the instance cache and resolved markers are expected to
    happen during single-threaded bootstrap.
    """

    bindings: dict[Any, Binding] = field(default_factory=dict)
    instances: dict[Any, Any] = field(default_factory=dict)
    aliases: dict[Any, Any] = field(default_factory=dict)
    tags: dict[str, list[Any]] = field(default_factory=dict)
    global_parameters: dict[str, Any] = field(default_factory=dict)
    resolved: set[Any] = field(default_factory=set)

    def add_binding(self, binding: Binding) -> None:
        identifier = binding.identifier
        # The identifier becomes a real binding, so stale state for it goes away.
        self.aliases.pop(identifier, None)
        self.instances.pop(identifier, None)
        self.resolved.discard(identifier)
        self.bindings[identifier] = binding
        logger.debug(
            "Bound %s to %r (shared=%s)",
            describe_identifier(identifier),
            binding.concrete,
            binding.shared,
        )

    def add_instance(self, identifier: Any, value: Any) -> None:
        self.add_binding(
            Binding(identifier=identifier, concrete=ValueConcrete(value), shared=True, prebuilt=True),
        )
        self.instances[identifier] = value

    def add_alias(self, alias: Any, target: Any) -> None:
        if alias == target:
            msg = f"Identifier {describe_identifier(alias)} cannot be aliased to itself."
            raise ServiceWireInvalidRegistrationError(msg)

        hop = target
        seen = {hop}
        while hop in self.aliases:
            hop = self.aliases[hop]
            if hop == alias or hop in seen:
                msg = (
                    f"Aliasing {describe_identifier(alias)} to {describe_identifier(target)} "
                    "would create an alias cycle."
                )
                raise ServiceWireInvalidRegistrationError(msg)
            seen.add(hop)

        self.aliases[alias] = target
        logger.debug("Aliased %s to %s", describe_identifier(alias), describe_identifier(target))

    def canonical(self, identifier: Any) -> Any:
        """Follow aliases until an identifier that is not an alias is reached."""
        seen = {identifier}
        while identifier in self.aliases:
            identifier = self.aliases[identifier]
            if identifier in seen:
                msg = f"Alias cycle detected at {describe_identifier(identifier)}."
                raise ServiceWireInvalidRegistrationError(msg)
            seen.add(identifier)
        return identifier

    def add_tags(self, identifiers: Iterable[Any], tag_name: str) -> None:
        members = self.tags.setdefault(tag_name, [])
        for identifier in identifiers:
            if identifier not in members:
                members.append(identifier)

    def tagged(self, tag_name: str) -> list[Any]:
        return list(self.tags.get(tag_name, ()))

    def flush(self) -> None:
        self.instances.clear()
        self.resolved.clear()

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from servicewire.exceptions import ServiceWireCircularDependencyError, ServiceWireMaxBuildDepthError


class BuildStack:
    """Ordered stack of classes under construction within one resolution.

    The top of the stack is the consumer whose constructor parameters are being
    resolved, which is what contextual overrides are keyed on.
    """

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[type[Any]] = []

    def __contains__(self, cls: object) -> bool:
        return cls in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[type[Any]]:
        return iter(self._items)

    @property
    def top(self) -> type[Any] | None:
        return self._items[-1] if self._items else None

    def snapshot(self) -> list[type[Any]]:
        return list(self._items)

    @contextmanager
    def building(self, cls: type[Any]) -> Iterator[None]:
        """Push ``cls`` for the duration of the block, popping it on every exit path."""
        if cls in self._items:
            raise ServiceWireCircularDependencyError(cls, self.snapshot())
        self._items.append(cls)
        try:
            yield
        finally:
            self._items.pop()


@dataclass(slots=True)
class ResolutionContext:
    """State carried through one top-level ``resolve()`` call tree."""

    owner: Any
    max_depth: int
    stack: BuildStack = field(default_factory=BuildStack)
    depth: int = 0

    @contextmanager
    def nested(self, identifier: Any) -> Iterator[None]:
        if self.depth >= self.max_depth:
            raise ServiceWireMaxBuildDepthError(identifier, self.max_depth)
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1


# Lets resolve() calls made from inside factories join the enclosing resolution.
# Each thread starts with an empty context, so stacks are never shared between threads.
_active_context: ContextVar[ResolutionContext | None] = ContextVar(
    "servicewire_active_resolution",
    default=None,
)


@contextmanager
def enter_resolution(owner: Any, max_depth: int) -> Iterator[ResolutionContext]:
    """Yield the resolution context for ``owner``, creating one for top-level calls."""
    current = _active_context.get()
    if current is not None and current.owner is owner:
        yield current
        return

    context = ResolutionContext(owner=owner, max_depth=max_depth)
    token = _active_context.set(context)
    try:
        yield context
    finally:
        _active_context.reset(token)

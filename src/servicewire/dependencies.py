from __future__ import annotations

import inspect
import threading
import types
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from servicewire._internal.type_checks import describe_identifier, is_runtime_class
from servicewire.defaults import PRIMITIVE_TYPES
from servicewire.exceptions import ServiceWireContainerError
from servicewire.markers import Named

MIN_ANNOTATED_ARGS = 2
_NONE_TYPE = type(None)
_NON_SERVICE_GENERIC_MODULES = frozenset({"builtins", "typing", "types", "collections.abc"})


@dataclass(frozen=True, slots=True)
class ParameterInfo:
    """Everything the builder needs to know about one constructor/method parameter."""

    name: str
    kind: inspect._ParameterKind
    annotated: bool
    identifier: Any = None
    is_object: bool = False
    nullable: bool = False
    default: Any = inspect.Parameter.empty

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty

    @property
    def is_variadic(self) -> bool:
        return self.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


class DependenciesExtractor:
    """Extract parameter descriptors from class constructors and methods."""

    def __init__(self) -> None:
        self._cache: dict[Any, tuple[ParameterInfo, ...]] = {}
        self._lock = threading.Lock()

    def get_constructor_parameters(self, cls: type[Any]) -> tuple[ParameterInfo, ...]:
        """Return the parameters of ``cls.__init__`` (without ``self``).

        Falls back to ``cls.__new__`` when only that is overridden
        (``NamedTuple`` classes). Classes without their own constructor yield
        an empty tuple.
        """
        cached = self._cache.get(cls)
        if cached is not None:
            return cached

        result: tuple[ParameterInfo, ...] = ()
        if cls.__init__ is not object.__init__:
            result = self._extract(cls.__init__, owner=cls, skip_first=True)
        elif cls.__new__ is not object.__new__:
            result = self._extract(cls.__new__, owner=cls, skip_first=True)
        with self._lock:
            self._cache[cls] = result
        return result

    def get_method_parameters(self, method: Callable[..., Any]) -> tuple[ParameterInfo, ...]:
        """Return the parameters of an already-bound method."""
        key = getattr(method, "__func__", method)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        result = self._extract(method, owner=method, skip_first=False)
        with self._lock:
            self._cache[key] = result
        return result

    def _extract(
        self,
        func: Callable[..., Any],
        *,
        owner: Any,
        skip_first: bool,
    ) -> tuple[ParameterInfo, ...]:
        try:
            signature = inspect.signature(func)
        except (ValueError, TypeError) as e:
            msg = f"Cannot inspect the signature of {describe_identifier(owner)}: {e}"
            raise ServiceWireContainerError(msg) from e
        try:
            type_hints = get_type_hints(func, include_extras=True)
        except (TypeError, NameError) as e:
            msg = f"Cannot evaluate type hints of {describe_identifier(owner)}: {e}"
            raise ServiceWireContainerError(msg) from e

        parameters = list(signature.parameters.values())
        if skip_first:
            parameters = parameters[1:]

        return tuple(
            self._describe(parameter, type_hints.get(parameter.name, inspect.Parameter.empty))
            for parameter in parameters
        )

    def _describe(self, parameter: inspect.Parameter, hint: Any) -> ParameterInfo:
        if hint is inspect.Parameter.empty:
            return ParameterInfo(
                name=parameter.name,
                kind=parameter.kind,
                annotated=False,
                default=parameter.default,
            )

        identifier, nullable = self._unwrap_optional(hint)
        identifier, named, inner_nullable = self._unwrap_named(identifier)
        return ParameterInfo(
            name=parameter.name,
            kind=parameter.kind,
            annotated=True,
            identifier=identifier,
            is_object=named or self._is_object_type(identifier),
            nullable=nullable or inner_nullable,
            default=parameter.default,
        )

    def _unwrap_optional(self, hint: Any) -> tuple[Any, bool]:
        """Split ``T | None`` into ``(T, True)``; other hints pass through."""
        origin = get_origin(hint)
        if origin is not Union and origin is not types.UnionType:
            return hint, False

        args = get_args(hint)
        members = [arg for arg in args if arg is not _NONE_TYPE]
        nullable = len(members) != len(args)
        if len(members) == 1:
            return members[0], nullable
        # A union of several types has no single identifier to resolve.
        return hint, nullable

    def _unwrap_named(self, hint: Any) -> tuple[Any, bool, bool]:
        """Swap ``Annotated[T, Named(id)]`` for ``id``; strip other ``Annotated`` metadata.

        Returns the identifier, whether a ``Named`` marker was found and
        whether the inner type was optional.
        """
        if get_origin(hint) is not Annotated:
            return hint, False, False

        args = get_args(hint)
        if len(args) < MIN_ANNOTATED_ARGS:
            return hint, False, False  # pragma: no cover - Annotated requires at least 2 args

        inner, nullable = self._unwrap_optional(args[0])
        for metadata in args[1:]:
            if isinstance(metadata, Named):
                return metadata.identifier, True, nullable
        return inner, False, nullable

    def _is_object_type(self, hint: Any) -> bool:
        if is_runtime_class(hint):
            return hint not in PRIMITIVE_TYPES and hint.__module__ != "builtins"
        origin = get_origin(hint)
        if is_runtime_class(origin):
            # Parametrised user generics such as Repository[User] are identifiers too.
            return origin not in PRIMITIVE_TYPES and origin.__module__ not in _NON_SERVICE_GENERIC_MODULES
        return False

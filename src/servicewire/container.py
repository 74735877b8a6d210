from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable, Mapping
from contextlib import AbstractContextManager, nullcontext
from typing import Any, Literal, TypeVar, get_origin, overload

from servicewire._internal.autoregistration import ConcreteTypeAutoregistrationPolicy
from servicewire._internal.callables import call_with_container
from servicewire._internal.integrations.pydantic_settings import is_pydantic_settings_subclass
from servicewire._internal.shared_locks import SharedBuildLocks
from servicewire._internal.type_checks import describe_identifier, is_instantiable, is_runtime_class
from servicewire.bindings import (
    Binding,
    BindingRegistry,
    Concrete,
    FactoryConcrete,
    TypeConcrete,
    ValueConcrete,
    classify_concrete,
)
from servicewire.build_stack import ResolutionContext, enter_resolution
from servicewire.contextual import ContextualBindingBuilder, ContextualOverrideTable
from servicewire.defaults import DEFAULT_LOCK_MODE, DEFAULT_MAX_BUILD_DEPTH
from servicewire.dependencies import DependenciesExtractor, ParameterInfo
from servicewire.exceptions import (
    ServiceWireCircularDependencyError,
    ServiceWireContainerError,
    ServiceWireInvalidRegistrationError,
    ServiceWireNotFoundError,
)
from servicewire.hooks import AfterResolvingCallback, Decorator, LifecycleHooks, MethodInjection
from servicewire.lock_mode import LockMode
from servicewire.providers import ServiceProvider

T = TypeVar("T")
P = TypeVar("P", bound=ServiceProvider)

logger = logging.getLogger(__name__)
_MISSING = object()


def _return_container(container: Container) -> Container:
    return container


def _settings_factory(cls: type[T]) -> Callable[[], T]:
    def factory() -> T:
        return cls()

    return factory


class Container:
    """Register service identifiers and build fully wired object graphs on demand.

    Identifiers are usually classes, protocols or string names. Bind them to a
    class, a factory (``lambda container: ...``) or a pre-built value during
    bootstrap, then ``resolve`` them. Unbound concrete classes are built
    directly by resolving their constructor parameters from type annotations,
    unless ``autoregister_concrete_types`` is disabled (strict mode).

    Shared bindings (``singleton``/``instance``) are built at most once even
    when several threads resolve them for the first time concurrently. The
    build stack used for cycle detection and contextual overrides belongs to a
    single top-level ``resolve()`` call and is never shared between threads.

    Examples:
        .. code-block:: python

            container = Container()
            container.singleton(LoggerInterface, FileLogger)
            container.alias("logger", LoggerInterface)
            container.when(ReportJob).needs(LoggerInterface).give(NullLogger)

            job = container.resolve(ReportJob)

    """

    def __init__(
        self,
        *,
        lock_mode: LockMode | Literal["thread", "none"] = DEFAULT_LOCK_MODE,
        autoregister_concrete_types: bool = True,
        max_build_depth: int = DEFAULT_MAX_BUILD_DEPTH,
    ) -> None:
        """Initialize an empty container.

        Args:
            lock_mode: Locking strategy for first-time construction of shared
                identifiers. Accepts ``LockMode`` or its string value.
            autoregister_concrete_types: Build unbound concrete classes on
                demand. Disable for strict mode where every identifier must be
                bound explicitly.
            max_build_depth: Deepest chain of nested resolutions allowed
                before ``ServiceWireMaxBuildDepthError`` is raised.

        """
        if max_build_depth < 1:
            msg = f"max_build_depth must be a positive integer, got {max_build_depth!r}."
            raise ServiceWireInvalidRegistrationError(msg)

        self._lock_mode = LockMode(lock_mode)
        self._autoregister_concrete_types = autoregister_concrete_types
        self._max_build_depth = max_build_depth

        self._registry = BindingRegistry()
        self._contextual_overrides = ContextualOverrideTable()
        self._hooks = LifecycleHooks()
        self._dependencies_extractor = DependenciesExtractor()
        self._autoregistration_policy = ConcreteTypeAutoregistrationPolicy()
        self._shared_locks = SharedBuildLocks() if self._lock_mode is LockMode.THREAD else None

        self._providers: list[ServiceProvider] = []
        self._booted_provider_ids: set[int] = set()
        self._booted = False

        self.singleton(Container, _return_container)
        if type(self) is not Container:
            self.singleton(type(self), _return_container)

    # region Registration Methods
    def bind(self, identifier: Any, concrete: Any = None, *, shared: bool = False) -> None:
        """Bind an identifier to a concrete.

        The concrete is resolved lazily; nothing is invoked at registration time.

        Args:
            identifier: Key used to request the service.
            concrete: A class to build, a factory called with the container, or
                a plain value. Omit it to bind a class to itself.
            shared: Cache the first resolved value and return it afterwards.

        Raises:
            ServiceWireInvalidRegistrationError: If ``concrete`` is omitted and
                ``identifier`` is not a class.

        """
        if concrete is None:
            if not is_runtime_class(identifier):
                msg = (
                    f"bind() requires a concrete for identifier {describe_identifier(identifier)} "
                    "because it is not a class."
                )
                raise ServiceWireInvalidRegistrationError(msg)
            concrete = identifier

        self._registry.add_binding(
            Binding(identifier=identifier, concrete=classify_concrete(concrete), shared=shared),
        )

    def singleton(self, identifier: Any, concrete: Any = None) -> None:
        """Bind an identifier as shared; see ``bind``."""
        self.bind(identifier, concrete, shared=True)

    def instance(self, identifier: Any, value: Any) -> None:
        """Register a pre-built value as a shared instance."""
        self._registry.add_instance(identifier, value)

    def alias(self, alias: Any, target: Any) -> None:
        """Make ``alias`` resolve exactly like ``target``.

        Raises:
            ServiceWireInvalidRegistrationError: If the alias would point to
                itself directly or through other aliases.

        """
        self._registry.add_alias(alias, target)

    def tag(self, identifiers: Iterable[Any] | Any, tag_name: str) -> None:
        """Add identifiers to a named group, keeping registration order.

        ``identifiers`` is either one identifier or any iterable of them.
        Strings, classes and parametrised generics always count as a single
        identifier.
        """
        if (
            isinstance(identifiers, str | bytes)
            or is_runtime_class(identifiers)
            or get_origin(identifiers) is not None
            or not isinstance(identifiers, Iterable)
        ):
            identifiers = (identifiers,)
        self._registry.add_tags(list(identifiers), tag_name)

    def add_global_parameter(self, name: str, value: Any) -> None:
        """Provide ``value`` for every constructor parameter called ``name``."""
        self._registry.global_parameters[name] = value

    def when(self, consumer: type[Any] | Iterable[type[Any]]) -> ContextualBindingBuilder:
        """Start a contextual override that applies while ``consumer`` is being built."""
        return ContextualBindingBuilder(self._contextual_overrides, consumer)

    def decorate(self, identifier: Any, decorator: Decorator) -> None:
        """Wrap or replace values built for ``identifier``, in registration order."""
        self._hooks.add_decorator(self._registry.canonical(identifier), decorator)

    def method_injection(
        self,
        identifier: Any,
        method_name: str,
        arguments: Mapping[str, Any] | None = None,
    ) -> None:
        """Call ``method_name`` on every value built for ``identifier``.

        Arguments missing from ``arguments`` are resolved like constructor
        parameters.

        Raises:
            ServiceWireInvalidRegistrationError: If a directive for the same
                identifier and method already exists.

        """
        self._hooks.add_method_injection(
            self._registry.canonical(identifier),
            method_name,
            arguments,
        )

    def after_resolving(self, identifier: Any, callback: AfterResolvingCallback) -> None:
        """Call ``callback`` with every value built for ``identifier``."""
        self._hooks.add_after_resolving(self._registry.canonical(identifier), callback)

    # endregion Registration Methods

    # region Service Providers
    def register_provider(self, provider: ServiceProvider | type[P]) -> ServiceProvider:
        """Add a service provider and run its ``register()`` phase.

        Registering the same provider class twice returns the first instance.
        Providers added after ``boot()`` are booted immediately.
        """
        provider_cls = provider if is_runtime_class(provider) else type(provider)
        for existing in self._providers:
            if type(existing) is provider_cls:
                return existing

        instance = provider(self) if is_runtime_class(provider) else provider
        instance.register()
        self._providers.append(instance)
        logger.debug("Registered service provider %s", describe_identifier(provider_cls))

        if self._booted:
            self._boot_provider(instance)
        return instance

    def boot(self) -> None:
        """Run ``boot()`` on every registered provider exactly once."""
        if self._booted:
            return
        # Providers may register further providers while booting.
        index = 0
        while index < len(self._providers):
            self._boot_provider(self._providers[index])
            index += 1
        self._booted = True

    @property
    def is_booted(self) -> bool:
        """Return whether ``boot()`` has run."""
        return self._booted

    def _boot_provider(self, provider: ServiceProvider) -> None:
        if id(provider) in self._booted_provider_ids:
            return
        provider.boot()
        self._booted_provider_ids.add(id(provider))
        logger.info("Booted service provider %s", describe_identifier(type(provider)))

    # endregion Service Providers

    # region Resolution
    @overload
    def resolve(self, identifier: type[T]) -> T: ...

    @overload
    def resolve(self, identifier: Any) -> Any: ...

    def resolve(self, identifier: Any) -> Any:
        """Resolve an identifier to a value.

        Raises:
            ServiceWireNotFoundError: If the identifier is unbound and not a
                constructible class.
            ServiceWireCircularDependencyError: If building the graph requires
                a class that is already being built.
            ServiceWireContainerError: If a class cannot be built or a
                dependency cannot be satisfied.

        """
        with enter_resolution(self, self._max_build_depth) as context:
            return self._resolve(identifier, context)

    @overload
    def get(self, identifier: type[T]) -> T: ...

    @overload
    def get(self, identifier: Any) -> Any: ...

    def get(self, identifier: Any) -> Any:
        """Alias of ``resolve``."""
        return self.resolve(identifier)

    def tagged(self, tag_name: str) -> list[Any]:
        """Resolve every identifier in a tag group, in tagging order."""
        return [self.resolve(identifier) for identifier in self._registry.tagged(tag_name)]

    def build(self, concrete: Any) -> Any:
        """Build a concrete without consulting bindings, caches or hooks for it."""
        with enter_resolution(self, self._max_build_depth) as context:
            return self._build(classify_concrete(concrete), context)

    def has(self, identifier: Any) -> bool:
        """Return whether ``identifier`` is bound, cached or a constructible class."""
        canonical = self._registry.canonical(identifier)
        if canonical in self._registry.bindings or canonical in self._registry.instances:
            return True
        return self._autoregister_concrete_types and self._autoregistration_policy.is_eligible_concrete(
            canonical,
        )

    def is_resolved(self, identifier: Any) -> bool:
        """Return whether ``identifier`` has been produced at least once since the last flush."""
        canonical = self._registry.canonical(identifier)
        return canonical in self._registry.resolved or canonical in self._registry.instances

    def flush(self) -> None:
        """Drop cached instances and resolved markers; registrations are kept."""
        self._registry.flush()
        logger.info("Flushed container instance cache")

    def _resolve(self, identifier: Any, context: ResolutionContext) -> Any:
        canonical = self._registry.canonical(identifier)

        cached = self._registry.instances.get(canonical, _MISSING)
        if cached is not _MISSING:
            return cached

        with context.nested(canonical):
            binding = self._get_binding(canonical)
            if binding.shared:
                value = self._resolve_shared(canonical, binding, context)
            else:
                value = self._produce(canonical, binding, context)

        self._registry.resolved.add(canonical)
        return value

    def _resolve_shared(self, canonical: Any, binding: Binding, context: ResolutionContext) -> Any:
        with self._shared_lock_context(canonical, context):
            # Another thread may have finished building while we waited.
            cached = self._registry.instances.get(canonical, _MISSING)
            if cached is not _MISSING:
                return cached

            if binding.prebuilt:
                # Values registered with instance() are served as-is, without hooks.
                value = self._build(binding.concrete, context)
            else:
                value = self._produce(canonical, binding, context)
            self._registry.instances[canonical] = value
            logger.debug("Cached shared instance for %s", describe_identifier(canonical))
            return value

    def _shared_lock_context(self, canonical: Any, context: ResolutionContext) -> AbstractContextManager[Any]:
        if self._shared_locks is None:
            return nullcontext()
        return self._shared_locks.hold(
            canonical,
            lambda: ServiceWireCircularDependencyError(canonical, context.stack.snapshot()),
        )

    def _get_binding(self, canonical: Any) -> Binding:
        binding = self._registry.bindings.get(canonical)
        if binding is not None:
            return binding

        if self._autoregister_concrete_types:
            if is_pydantic_settings_subclass(canonical):
                return Binding(
                    identifier=canonical,
                    concrete=FactoryConcrete(_settings_factory(canonical)),
                    shared=True,
                )
            if self._autoregistration_policy.is_eligible_concrete(canonical):
                return Binding(identifier=canonical, concrete=TypeConcrete(canonical))

        raise ServiceWireNotFoundError(canonical)

    def _produce(self, canonical: Any, binding: Binding, context: ResolutionContext) -> Any:
        value = self._build(binding.concrete, context)

        for decorator in self._hooks.decorators_for(canonical):
            value = call_with_container(decorator, self, value)

        for directive in self._hooks.method_injections_for(canonical):
            self._inject_method(value, directive, context)

        for callback in self._hooks.after_resolving_for(canonical):
            call_with_container(callback, self, value)

        return value

    # endregion Resolution

    # region Builder
    def _build(self, concrete: Concrete, context: ResolutionContext) -> Any:
        if isinstance(concrete, FactoryConcrete):
            return call_with_container(concrete.factory, self)
        if isinstance(concrete, TypeConcrete):
            return self._build_type(concrete.cls, context)
        if isinstance(concrete, ValueConcrete):
            return concrete.value
        msg = f"Unsupported concrete {concrete!r}."  # pragma: no cover - exhaustive variant
        raise ServiceWireContainerError(msg)  # pragma: no cover

    def _build_type(self, cls: type[Any], context: ResolutionContext) -> Any:
        if not is_instantiable(cls):
            msg = f"Target {describe_identifier(cls)} is not instantiable (abstract class or protocol)."
            raise ServiceWireContainerError(msg)

        with context.stack.building(cls):
            parameters = self._dependencies_extractor.get_constructor_parameters(cls)
            args, kwargs = self._resolve_arguments(
                parameters,
                consumer=cls,
                context=context,
                explicit={},
            )
            logger.debug("Building %s", describe_identifier(cls))
            return cls(*args, **kwargs)

    def _inject_method(self, value: Any, directive: MethodInjection, context: ResolutionContext) -> None:
        method = getattr(value, directive.method_name, None)
        if method is None or not callable(method):
            msg = (
                f"Method injection failed: {describe_identifier(type(value))} has no callable "
                f"method '{directive.method_name}'."
            )
            raise ServiceWireContainerError(msg)

        parameters = self._dependencies_extractor.get_method_parameters(method)
        args, kwargs = self._resolve_arguments(
            parameters,
            consumer=type(value),
            context=context,
            explicit=directive.arguments,
        )
        method(*args, **kwargs)

    def _resolve_arguments(
        self,
        parameters: tuple[ParameterInfo, ...],
        *,
        consumer: type[Any],
        context: ResolutionContext,
        explicit: Mapping[str, Any],
    ) -> tuple[list[Any], dict[str, Any]]:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        accepts_extra_keywords = False

        for parameter in parameters:
            if parameter.is_variadic:
                accepts_extra_keywords |= parameter.kind is inspect.Parameter.VAR_KEYWORD
                continue
            if parameter.name in explicit:
                value = explicit[parameter.name]
            else:
                value = self._resolve_dependency(parameter, consumer, context)
            if parameter.kind is inspect.Parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[parameter.name] = value

        known_names = {parameter.name for parameter in parameters}
        unknown = [name for name in explicit if name not in known_names]
        if unknown:
            if not accepts_extra_keywords:
                msg = (
                    f"Arguments {', '.join(sorted(unknown))} do not match any parameter "
                    f"of {describe_identifier(consumer)}."
                )
                raise ServiceWireContainerError(msg)
            kwargs.update({name: explicit[name] for name in unknown})

        return args, kwargs

    def _resolve_dependency(
        self,
        parameter: ParameterInfo,
        consumer: type[Any],
        context: ResolutionContext,
    ) -> Any:
        """Resolve one parameter; first matching rule wins.

        1. global parameter with the same name
        2. unannotated: default value
        3. object type: contextual override, then resolution, then default / ``None``
        4. primitive type: default value
        """
        global_parameters = self._registry.global_parameters
        if parameter.name in global_parameters:
            return global_parameters[parameter.name]

        if not parameter.annotated:
            if parameter.has_default:
                return parameter.default
            msg = (
                f"Unresolvable dependency: parameter '{parameter.name}' of "
                f"{describe_identifier(consumer)} has no type annotation and no default."
            )
            raise ServiceWireContainerError(msg)

        if parameter.is_object:
            override = self._find_contextual_override(consumer, parameter.identifier)
            if override is not None:
                return self._build(override, context)

            try:
                return self._resolve(parameter.identifier, context)
            except ServiceWireNotFoundError as e:
                # Only a missing direct dependency may fall back; deeper misses propagate.
                if e.identifier != self._registry.canonical(parameter.identifier):
                    raise
                if parameter.has_default:
                    return parameter.default
                if parameter.nullable:
                    return None
                raise

        if parameter.has_default:
            return parameter.default
        msg = (
            f"Unresolvable dependency: parameter '{parameter.name}' of "
            f"{describe_identifier(consumer)} is annotated with "
            f"{describe_identifier(parameter.identifier)} and has no default."
        )
        raise ServiceWireContainerError(msg)

    def _find_contextual_override(self, consumer: type[Any], identifier: Any) -> Concrete | None:
        override = self._contextual_overrides.lookup(consumer, identifier)
        if override is not None:
            return override
        canonical = self._registry.canonical(identifier)
        if canonical != identifier:
            return self._contextual_overrides.lookup(consumer, canonical)
        return None

    # endregion Builder

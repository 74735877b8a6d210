from __future__ import annotations

from typing import Any

from servicewire._internal.type_checks import describe_identifier


class ServiceWireError(Exception):
    """Represent a base class for all servicewire failures.

    Catch this type when you want to handle any container error path without
    matching each concrete exception class individually.
    """


class ServiceWireInvalidRegistrationError(ServiceWireError):
    """Signal an invalid registration made during bootstrap.

    Raised by registration APIs such as ``Container.bind``,
    ``Container.alias`` and ``Container.method_injection``, for example when
    an alias would point back to itself or when a method-injection directive
    is registered twice for the same identifier and method.

    Typical fix is removing the duplicate or conflicting registration from
    the service provider that performs it.
    """


class ServiceWireNotFoundError(ServiceWireError):
    """Signal that an identifier cannot be mapped to anything constructible.

    Raised by ``resolve``/``get`` when the identifier has no binding, no
    cached instance and is not itself a concrete class. Constructor
    parameters annotated as optional (``T | None``) or carrying a default
    value swallow this error and fall back to ``None`` or the default.

    Typical fixes include binding the identifier explicitly or registering a
    contextual override for the consumer that needs it.
    """

    def __init__(self, identifier: Any) -> None:
        self.identifier = identifier
        super().__init__(
            f"Identifier {describe_identifier(identifier)} is not bound "
            "and is not a constructible class",
        )


class ServiceWireCircularDependencyError(ServiceWireError):
    """Signal a dependency cycle detected while building a class.

    ``build_stack`` holds the classes under construction, outermost first,
    at the moment ``concrete`` was requested again.
    """

    def __init__(self, concrete: type[Any], build_stack: list[type[Any]]) -> None:
        self.concrete = concrete
        self.build_stack = build_stack
        cycle = " -> ".join(describe_identifier(cls) for cls in [*build_stack, concrete])
        super().__init__(f"Circular dependency detected: {cycle}")


class ServiceWireContainerError(ServiceWireError):
    """Signal a generic construction failure.

    Raised when the target class is not instantiable (abstract classes and
    protocols), when a constructor parameter cannot be satisfied by any
    resolution rule, or when a method-injection directive names a method the
    built value does not have.
    """


class ServiceWireMaxBuildDepthError(ServiceWireContainerError):
    """Signal that nested resolution exceeded the configured depth limit.

    Usually points to a factory that resolves its own identifier, or to a
    pathologically deep graph. Raise ``max_build_depth`` on the container when
    the graph is legitimately deep.
    """

    def __init__(self, identifier: Any, limit: int) -> None:
        self.identifier = identifier
        self.limit = limit
        super().__init__(
            f"Maximum build depth of {limit} exceeded while resolving "
            f"{describe_identifier(identifier)}",
        )

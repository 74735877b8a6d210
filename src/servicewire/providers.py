from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from servicewire.container import Container


class ServiceProvider:
    """Bootstrap unit that groups related registrations.

    ``register()`` runs as soon as the provider is added to a container and
    should only bind things. ``boot()`` runs once every provider has
    registered (``Container.boot()``), so it may resolve services bound by
    other providers.

    Examples:
        .. code-block:: python

            class RouterServiceProvider(ServiceProvider):
                def register(self) -> None:
                    self.singleton(RouteCompiler)
                    self.singleton(RouterInterface, Router)

                def boot(self) -> None:
                    self.container.resolve(RouterInterface).load_routes()

    """

    def __init__(self, container: Container) -> None:
        self.container = container

    def register(self) -> None:
        """Bind services into the container."""

    def boot(self) -> None:
        """Use services after every provider has registered."""

    def bind(self, identifier: Any, concrete: Any = None, *, shared: bool = False) -> None:
        """Shortcut for ``self.container.bind``."""
        self.container.bind(identifier, concrete, shared=shared)

    def singleton(self, identifier: Any, concrete: Any = None) -> None:
        """Shortcut for ``self.container.singleton``."""
        self.container.singleton(identifier, concrete)

    def instance(self, identifier: Any, value: Any) -> None:
        """Shortcut for ``self.container.instance``."""
        self.container.instance(identifier, value)

    def alias(self, alias: Any, target: Any) -> None:
        """Shortcut for ``self.container.alias``."""
        self.container.alias(alias, target)

"""Service providers: group registrations into register() and boot() phases.

``register()`` runs as soon as a provider is added and should only bind.
``boot()`` runs once all providers are registered, so it can resolve services
that other providers bound.
"""

from __future__ import annotations

from servicewire import Container, ServiceProvider


class RouteCompiler:
    def compile(self, path: str) -> str:
        return f"^{path}$"


class Router:
    def __init__(self, compiler: RouteCompiler) -> None:
        self.compiler = compiler
        self.routes: list[str] = []

    def get(self, path: str) -> None:
        self.routes.append(self.compiler.compile(path))


class RouterServiceProvider(ServiceProvider):
    def register(self) -> None:
        self.singleton(RouteCompiler)
        self.singleton(Router)
        self.alias("router", Router)


class StorefrontServiceProvider(ServiceProvider):
    def boot(self) -> None:
        router = self.container.resolve("router")
        router.get("/products")
        router.get("/cart")


def main() -> None:
    container = Container()
    container.register_provider(StorefrontServiceProvider)
    container.register_provider(RouterServiceProvider)
    container.boot()

    print(f"routes={container.resolve(Router).routes}")  # => routes=['^/products$', '^/cart$']
    print(f"booted={container.is_booted}")  # => booted=True


if __name__ == "__main__":
    main()

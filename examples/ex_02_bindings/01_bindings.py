"""Bindings: interfaces, singletons, instances, aliases, tags and global parameters."""

from __future__ import annotations

from typing import Protocol

from servicewire import Container


class Cache(Protocol):
    def get(self, key: str) -> str | None: ...


class MemoryCache:
    def __init__(self, namespace: str = "default") -> None:
        self.namespace = namespace
        self.items: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.items.get(key)


class CsvExporter:
    name = "csv"


class JsonExporter:
    name = "json"


def main() -> None:
    container = Container()

    container.singleton(Cache, MemoryCache)
    container.alias("cache", Cache)
    print(f"same={container.resolve('cache') is container.resolve(Cache)}")  # => same=True

    container.instance("app.name", "shop")
    print(f"name={container.resolve('app.name')}")  # => name=shop

    container.bind("clock", lambda: "12:00")
    print(f"clock={container.resolve('clock')}")  # => clock=12:00

    container.tag([CsvExporter, JsonExporter], "exporters")
    names = ",".join(exporter.name for exporter in container.tagged("exporters"))
    print(f"exporters={names}")  # => exporters=csv,json

    container.add_global_parameter("namespace", "orders")
    container.flush()
    print(f"namespace={container.resolve(Cache).namespace}")  # => namespace=orders


if __name__ == "__main__":
    main()

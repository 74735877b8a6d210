"""Errors: what the container reports and when optional dependencies fall back."""

from __future__ import annotations

from typing import Protocol

from servicewire import (
    Container,
    ServiceWireCircularDependencyError,
    ServiceWireContainerError,
    ServiceWireNotFoundError,
)


class Metrics(Protocol):
    def increment(self, name: str) -> None: ...


class Checkout:
    def __init__(self, metrics: Metrics | None) -> None:
        self.metrics = metrics


class Inventory:
    def __init__(self, orders: Orders) -> None:
        self.orders = orders


class Orders:
    def __init__(self, inventory: Inventory) -> None:
        self.inventory = inventory


class Mailer:
    def __init__(self, sender: str) -> None:
        self.sender = sender


def main() -> None:
    container = Container()

    try:
        container.resolve("payment.gateway")
    except ServiceWireNotFoundError as error:
        print(f"not_found={error.identifier}")  # => not_found=payment.gateway

    print(f"optional={container.resolve(Checkout).metrics}")  # => optional=None

    try:
        container.resolve(Inventory)
    except ServiceWireCircularDependencyError as error:
        print(error)  # => Circular dependency detected: Inventory -> Orders -> Inventory

    try:
        container.resolve(Mailer)
    except ServiceWireContainerError:
        print("mailer=unresolvable")  # => mailer=unresolvable

    container.add_global_parameter("sender", "shop@example.com")
    print(f"sender={container.resolve(Mailer).sender}")  # => sender=shop@example.com


if __name__ == "__main__":
    main()

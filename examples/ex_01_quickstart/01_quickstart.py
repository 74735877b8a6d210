"""Quickstart: automatic constructor wiring from type hints.

Plain classes need no registration. Resolve the top-level service and the
container builds the whole dependency chain.
"""

from __future__ import annotations

from servicewire import Container


class Database:
    def __init__(self) -> None:
        self.host = "localhost"


class UserRepository:
    def __init__(self, database: Database) -> None:
        self.database = database


class UserService:
    def __init__(self, repository: UserRepository) -> None:
        self.repository = repository


def main() -> None:
    container = Container()
    service = container.resolve(UserService)

    print(f"db_host={service.repository.database.host}")  # => db_host=localhost

    chain = (
        f"{type(service).__name__}"
        f">{type(service.repository).__name__}"
        f">{type(service.repository.database).__name__}"
    )
    print(f"chain={chain}")  # => chain=UserService>UserRepository>Database

    print(f"fresh={container.resolve(UserService) is not service}")  # => fresh=True


if __name__ == "__main__":
    main()

"""pytest helpers for code that resolves services from a ``Container``.

Load the plugin with ``pytest_plugins = ["servicewire.integrations.pytest_plugin"]``
in a test module or the root ``conftest.py``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from servicewire.container import Container

_INSTANCE_MARKER = "servicewire_instance"


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        f"{_INSTANCE_MARKER}(identifier, value): register a pre-built instance in "
        "the servicewire_container fixture before the test runs.",
    )


@pytest.fixture()
def servicewire_container() -> Container:
    """Create a per-test container.

    Override this fixture in your test suite to return a container with your
    application's registrations. It is function-scoped, so registrations are
    isolated between tests unless the override changes the scope.

    Returns:
        A new ``Container`` instance.

    """
    return Container()


@pytest.fixture(autouse=True)
def _servicewire_instances(
    request: pytest.FixtureRequest,
    servicewire_container: Container,
) -> None:
    """Apply ``servicewire_instance`` markers to the test container.

    Markers closest to the test function win over class or module markers.
    """
    for marker in reversed(list(request.node.iter_markers(_INSTANCE_MARKER))):
        identifier, value = marker.args
        servicewire_container.instance(identifier, value)


@pytest.fixture()
def servicewire_resolve(servicewire_container: Container) -> Iterator[Callable[[Any], Any]]:
    """Yield ``servicewire_container.resolve`` and flush the container on teardown.

    Shared instances built during the test are dropped afterwards, so a
    container with a wider fixture scope starts every test with an empty cache.
    """
    yield servicewire_container.resolve
    servicewire_container.flush()

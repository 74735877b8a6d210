"""Shared pytest fixtures for servicewire tests."""

import pytest

from servicewire.container import Container
from servicewire.dependencies import DependenciesExtractor


@pytest.fixture()
def container() -> Container:
    """Default container with concrete autoregistration enabled."""
    return Container()


@pytest.fixture()
def strict_container() -> Container:
    """Container that only resolves explicitly bound identifiers."""
    return Container(autoregister_concrete_types=False)


@pytest.fixture()
def dependencies_extractor() -> DependenciesExtractor:
    """DependenciesExtractor instance."""
    return DependenciesExtractor()

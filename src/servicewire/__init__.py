from servicewire.bindings import Binding, FactoryConcrete, TypeConcrete, ValueConcrete
from servicewire.container import Container
from servicewire.contextual import ContextualBindingBuilder
from servicewire.exceptions import (
    ServiceWireCircularDependencyError,
    ServiceWireContainerError,
    ServiceWireError,
    ServiceWireInvalidRegistrationError,
    ServiceWireMaxBuildDepthError,
    ServiceWireNotFoundError,
)
from servicewire.lock_mode import LockMode
from servicewire.markers import Named
from servicewire.providers import ServiceProvider

__all__ = [
    "Binding",
    "Container",
    "ContextualBindingBuilder",
    "FactoryConcrete",
    "LockMode",
    "Named",
    "ServiceProvider",
    "ServiceWireCircularDependencyError",
    "ServiceWireContainerError",
    "ServiceWireError",
    "ServiceWireInvalidRegistrationError",
    "ServiceWireMaxBuildDepthError",
    "ServiceWireNotFoundError",
    "TypeConcrete",
    "ValueConcrete",
]

"""Tests for constructor introspection and the parameter resolution rules."""

from abc import ABC, abstractmethod
from typing import Annotated, Protocol

import pytest

from servicewire import Container, Named
from servicewire.exceptions import (
    ServiceWireCircularDependencyError,
    ServiceWireContainerError,
    ServiceWireMaxBuildDepthError,
    ServiceWireNotFoundError,
)


class Metrics(Protocol):
    def increment(self, name: str) -> None: ...


class StatsdMetrics:
    def increment(self, name: str) -> None:
        pass


class NullMetrics:
    def increment(self, name: str) -> None:
        pass


NULL_METRICS = NullMetrics()


class Database:
    pass


class Repository(ABC):
    @abstractmethod
    def find(self, key: str) -> object: ...


class CircularA:
    def __init__(self, b: "CircularB") -> None:
        self.b = b


class CircularB:
    def __init__(self, a: CircularA) -> None:
        self.a = a


class SelfReferencing:
    def __init__(self, other: "SelfReferencing") -> None:
        self.other = other


class BrokenHints:
    def __init__(self, missing: "UndefinedService") -> None:  # type: ignore[name-defined]  # noqa: F821
        self.missing = missing


class TestGlobalParameters:
    def test_global_parameter_fills_primitive(self, container: Container) -> None:
        class Mailer:
            def __init__(self, sender: str) -> None:
                self.sender = sender

        container.add_global_parameter("sender", "shop@example.com")

        assert container.resolve(Mailer).sender == "shop@example.com"

    def test_global_parameter_wins_over_default(self, container: Container) -> None:
        class Pager:
            def __init__(self, per_page: int = 10) -> None:
                self.per_page = per_page

        container.add_global_parameter("per_page", 50)

        assert container.resolve(Pager).per_page == 50

    def test_global_parameter_wins_over_object_resolution(self, container: Container) -> None:
        class Consumer:
            def __init__(self, database: Database) -> None:
                self.database = database

        database = Database()
        container.add_global_parameter("database", database)

        assert container.resolve(Consumer).database is database

    def test_global_parameter_fills_unannotated(self, container: Container) -> None:
        class Legacy:
            def __init__(self, timeout) -> None:  # type: ignore[no-untyped-def]  # noqa: ANN001
                self.timeout = timeout

        container.add_global_parameter("timeout", 30)

        assert container.resolve(Legacy).timeout == 30


class TestUnannotatedParameters:
    def test_default_used(self, container: Container) -> None:
        class Legacy:
            def __init__(self, retries=3) -> None:  # type: ignore[no-untyped-def]  # noqa: ANN001
                self.retries = retries

        assert container.resolve(Legacy).retries == 3

    def test_without_default_fails(self, container: Container) -> None:
        class Legacy:
            def __init__(self, handler) -> None:  # type: ignore[no-untyped-def]  # noqa: ANN001
                self.handler = handler

        with pytest.raises(ServiceWireContainerError, match="'handler'.*no type annotation"):
            container.resolve(Legacy)


class TestObjectParameters:
    def test_bound_dependency_resolved(self, container: Container) -> None:
        class Consumer:
            def __init__(self, metrics: Metrics) -> None:
                self.metrics = metrics

        container.bind(Metrics, StatsdMetrics)

        assert isinstance(container.resolve(Consumer).metrics, StatsdMetrics)

    def test_bound_dependency_wins_over_default(self, container: Container) -> None:
        class Consumer:
            def __init__(self, metrics: Metrics = NULL_METRICS) -> None:
                self.metrics = metrics

        container.bind(Metrics, StatsdMetrics)

        assert isinstance(container.resolve(Consumer).metrics, StatsdMetrics)

    def test_missing_dependency_falls_back_to_default(self, container: Container) -> None:
        class Consumer:
            def __init__(self, metrics: Metrics = NULL_METRICS) -> None:
                self.metrics = metrics

        assert container.resolve(Consumer).metrics is NULL_METRICS

    def test_missing_optional_dependency_is_none(self, container: Container) -> None:
        class Consumer:
            def __init__(self, metrics: Metrics | None) -> None:
                self.metrics = metrics

        assert container.resolve(Consumer).metrics is None

    def test_missing_required_dependency_raises_not_found(self, container: Container) -> None:
        class Consumer:
            def __init__(self, metrics: Metrics) -> None:
                self.metrics = metrics

        with pytest.raises(ServiceWireNotFoundError) as exc_info:
            container.resolve(Consumer)

        assert exc_info.value.identifier is Metrics

    def test_deeper_missing_dependency_is_not_swallowed(self, container: Container) -> None:
        class Reporter:
            def __init__(self, metrics: Metrics) -> None:
                self.metrics = metrics

        class Consumer:
            def __init__(self, reporter: Reporter | None = None) -> None:
                self.reporter = reporter

        with pytest.raises(ServiceWireNotFoundError) as exc_info:
            container.resolve(Consumer)

        assert exc_info.value.identifier is Metrics

    def test_unbound_abstract_dependency_is_not_found(self, container: Container) -> None:
        with pytest.raises(ServiceWireNotFoundError):
            container.resolve(Repository)

    def test_explicitly_bound_abstract_class_is_not_instantiable(self, container: Container) -> None:
        container.bind(Repository)

        with pytest.raises(ServiceWireContainerError, match="not instantiable"):
            container.resolve(Repository)

    def test_bound_string_identifier_via_alias_resolves_dependency(self, container: Container) -> None:
        class Consumer:
            def __init__(self, metrics: Metrics) -> None:
                self.metrics = metrics

        container.bind("metrics", StatsdMetrics)
        container.alias(Metrics, "metrics")

        assert isinstance(container.resolve(Consumer).metrics, StatsdMetrics)


class TestPrimitiveParameters:
    def test_default_used(self, container: Container) -> None:
        class Pager:
            def __init__(self, per_page: int = 10, labels: list[str] | None = None) -> None:
                self.per_page = per_page
                self.labels = labels

        pager = container.resolve(Pager)

        assert pager.per_page == 10
        assert pager.labels is None

    def test_without_default_fails(self, container: Container) -> None:
        class Pager:
            def __init__(self, per_page: int) -> None:
                self.per_page = per_page

        with pytest.raises(ServiceWireContainerError, match="'per_page'.*int.*no default"):
            container.resolve(Pager)

    def test_bound_primitive_type_is_not_used(self, container: Container) -> None:
        class Greeter:
            def __init__(self, name: str = "guest") -> None:
                self.name = name

        container.instance(str, "admin")

        assert container.resolve(Greeter).name == "guest"


class TestNamedParameters:
    def test_named_identifier_resolved(self, container: Container) -> None:
        class Connection:
            def __init__(self, dsn: Annotated[str, Named("database.dsn")]) -> None:
                self.dsn = dsn

        container.instance("database.dsn", "postgresql://localhost/shop")

        assert container.resolve(Connection).dsn == "postgresql://localhost/shop"

    def test_named_factory_resolved(self, container: Container) -> None:
        class Connection:
            def __init__(self, dsn: Annotated[str, Named("database.dsn")]) -> None:
                self.dsn = dsn

        container.bind("database.dsn", lambda: "sqlite://")

        assert container.resolve(Connection).dsn == "sqlite://"

    def test_missing_optional_named_identifier_is_none(self, container: Container) -> None:
        class Connection:
            def __init__(self, dsn: Annotated[str | None, Named("database.dsn")]) -> None:
                self.dsn = dsn

        assert container.resolve(Connection).dsn is None

    def test_missing_named_identifier_uses_default(self, container: Container) -> None:
        class Connection:
            def __init__(self, dsn: Annotated[str, Named("database.dsn")] = "sqlite://") -> None:
                self.dsn = dsn

        assert container.resolve(Connection).dsn == "sqlite://"

    def test_missing_required_named_identifier_raises(self, container: Container) -> None:
        class Connection:
            def __init__(self, dsn: Annotated[str, Named("database.dsn")]) -> None:
                self.dsn = dsn

        with pytest.raises(ServiceWireNotFoundError) as exc_info:
            container.resolve(Connection)

        assert exc_info.value.identifier == "database.dsn"


class TestSignatureShapes:
    def test_class_without_constructor(self, container: Container) -> None:
        class Plain:
            pass

        assert isinstance(container.resolve(Plain), Plain)

    def test_positional_only_parameters(self, container: Container) -> None:
        class Consumer:
            def __init__(self, database: Database, /, retries: int = 1) -> None:
                self.database = database
                self.retries = retries

        consumer = container.resolve(Consumer)

        assert isinstance(consumer.database, Database)
        assert consumer.retries == 1

    def test_variadic_parameters_are_skipped(self, container: Container) -> None:
        class Consumer:
            def __init__(self, database: Database, *args: object, **kwargs: object) -> None:
                self.database = database
                self.args = args
                self.kwargs = kwargs

        consumer = container.resolve(Consumer)

        assert isinstance(consumer.database, Database)
        assert consumer.args == ()
        assert consumer.kwargs == {}

    def test_keyword_only_parameters(self, container: Container) -> None:
        class Consumer:
            def __init__(self, *, database: Database, label: str = "main") -> None:
                self.database = database
                self.label = label

        consumer = container.resolve(Consumer)

        assert isinstance(consumer.database, Database)
        assert consumer.label == "main"

    def test_unevaluable_type_hints_fail(self, container: Container) -> None:
        with pytest.raises(ServiceWireContainerError, match="Cannot evaluate type hints"):
            container.resolve(BrokenHints)


class TestCircularDependencies:
    def test_cycle_reported_with_path(self, container: Container) -> None:
        with pytest.raises(ServiceWireCircularDependencyError) as exc_info:
            container.resolve(CircularA)

        assert exc_info.value.concrete is CircularA
        assert exc_info.value.build_stack == [CircularA, CircularB]
        assert str(exc_info.value) == "Circular dependency detected: CircularA -> CircularB -> CircularA"

    def test_self_reference_reported(self, container: Container) -> None:
        with pytest.raises(ServiceWireCircularDependencyError) as exc_info:
            container.resolve(SelfReferencing)

        assert exc_info.value.build_stack == [SelfReferencing]

    def test_shared_cycle_reported_not_deadlocked(self, container: Container) -> None:
        container.singleton(CircularA)
        container.singleton(CircularB)

        with pytest.raises(ServiceWireCircularDependencyError):
            container.resolve(CircularB)

    def test_optional_parameter_does_not_swallow_cycle(self, container: Container) -> None:
        class Consumer:
            def __init__(self, a: CircularA | None = None) -> None:
                self.a = a

        with pytest.raises(ServiceWireCircularDependencyError):
            container.resolve(Consumer)

    def test_container_usable_after_cycle(self, container: Container) -> None:
        with pytest.raises(ServiceWireCircularDependencyError):
            container.resolve(CircularA)

        assert isinstance(container.resolve(Database), Database)
        assert not container.is_resolved(CircularA)


class TestMaxBuildDepth:
    def test_self_resolving_factory_is_stopped(self) -> None:
        container = Container(max_build_depth=5)
        container.bind("loop", lambda c: c.resolve("loop"))

        with pytest.raises(ServiceWireMaxBuildDepthError) as exc_info:
            container.resolve("loop")

        assert exc_info.value.limit == 5
        assert exc_info.value.identifier == "loop"

    def test_depth_error_is_a_container_error(self) -> None:
        container = Container(max_build_depth=3)
        container.bind("loop", lambda c: c.resolve("loop"))

        with pytest.raises(ServiceWireContainerError):
            container.resolve("loop")

    def test_graph_within_limit_resolves(self) -> None:
        class Leaf:
            pass

        class Middle:
            def __init__(self, leaf: Leaf) -> None:
                self.leaf = leaf

        class Root:
            def __init__(self, middle: Middle) -> None:
                self.middle = middle

        container = Container(max_build_depth=3)

        assert isinstance(container.resolve(Root).middle.leaf, Leaf)

    def test_graph_beyond_limit_fails(self) -> None:
        class Leaf:
            pass

        class Middle:
            def __init__(self, leaf: Leaf) -> None:
                self.leaf = leaf

        class Root:
            def __init__(self, middle: Middle) -> None:
                self.middle = middle

        container = Container(max_build_depth=2)

        with pytest.raises(ServiceWireMaxBuildDepthError):
            container.resolve(Root)

    def test_container_usable_after_depth_error(self) -> None:
        container = Container(max_build_depth=4)
        container.bind("loop", lambda c: c.resolve("loop"))

        with pytest.raises(ServiceWireMaxBuildDepthError):
            container.resolve("loop")

        assert isinstance(container.resolve(Database), Database)

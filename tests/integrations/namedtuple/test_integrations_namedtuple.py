"""Tests for building NamedTuple classes through their generated ``__new__``."""

from typing import NamedTuple

from servicewire.container import Container


class TaxTable:
    pass


class Money(NamedTuple):
    amount: int = 0
    currency: str = "EUR"


class TaxContext(NamedTuple):
    table: TaxTable
    region: str = "EU"


class OrderContext(NamedTuple):
    tax: TaxContext


class EmptyContext(NamedTuple):
    pass


class TestNamedTupleResolution:
    def test_resolve_namedtuple_with_dependency(self, container: Container) -> None:
        result = container.resolve(TaxContext)

        assert isinstance(result.table, TaxTable)
        assert result.region == "EU"

    def test_resolve_empty_namedtuple(self, container: Container) -> None:
        assert container.resolve(EmptyContext) == EmptyContext()

    def test_resolve_namedtuple_with_only_defaults(self, container: Container) -> None:
        assert container.resolve(Money) == Money(0, "EUR")

    def test_resolve_nested_namedtuples(self, container: Container) -> None:
        result = container.resolve(OrderContext)

        assert isinstance(result.tax, TaxContext)
        assert isinstance(result.tax.table, TaxTable)

    def test_regular_class_depending_on_namedtuple(self, container: Container) -> None:
        class Invoice:
            def __init__(self, tax: TaxContext) -> None:
                self.tax = tax

        result = container.resolve(Invoice)

        assert isinstance(result.tax.table, TaxTable)

    def test_contextual_override_for_namedtuple_field(self, container: Container) -> None:
        table = TaxTable()
        container.when(TaxContext).needs(TaxTable).give(table)

        assert container.resolve(TaxContext).table is table

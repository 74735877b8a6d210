from typing import Any

import pytest
from pydantic_settings import BaseSettings, SettingsConfigDict

from servicewire.container import Container
from servicewire.exceptions import ServiceWireNotFoundError


class ShopSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SHOP_")

    currency: str = "EUR"
    debug: bool = False


class CheckoutService:
    def __init__(self, settings: ShopSettings) -> None:
        self.settings = settings


class TestBaseSettingsAutoRegistration:
    def test_settings_subclass_is_resolved(self, container: Container) -> None:
        settings = container.resolve(ShopSettings)

        assert isinstance(settings, ShopSettings)
        assert settings.currency == "EUR"

    def test_settings_are_shared(self, container: Container) -> None:
        assert container.resolve(ShopSettings) is container.resolve(ShopSettings)

    def test_settings_read_from_environment(self, container: Container, monkeypatch: Any) -> None:
        monkeypatch.setenv("SHOP_CURRENCY", "USD")
        monkeypatch.setenv("SHOP_DEBUG", "true")

        settings = container.resolve(ShopSettings)

        assert settings.currency == "USD"
        assert settings.debug is True

    def test_settings_injected_into_consumers(self, container: Container) -> None:
        first = container.resolve(CheckoutService)
        second = container.resolve(CheckoutService)

        assert first is not second
        assert first.settings is second.settings

    def test_settings_rebuilt_after_flush(self, container: Container, monkeypatch: Any) -> None:
        before = container.resolve(ShopSettings)
        monkeypatch.setenv("SHOP_CURRENCY", "GBP")

        container.flush()

        after = container.resolve(ShopSettings)
        assert after is not before
        assert after.currency == "GBP"

    def test_explicit_binding_wins(self, container: Container) -> None:
        settings = ShopSettings(currency="JPY")
        container.instance(ShopSettings, settings)

        assert container.resolve(CheckoutService).settings is settings

    def test_strict_mode_requires_binding(self, strict_container: Container) -> None:
        with pytest.raises(ServiceWireNotFoundError):
            strict_container.resolve(ShopSettings)

    def test_has_reports_settings(self, container: Container) -> None:
        assert container.has(ShopSettings)

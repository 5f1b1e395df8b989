import pytest

from checkout_pricing.config import settings as settings_module
from checkout_pricing.config.settings import Settings, get_package_root
from checkout_pricing.engine import PricingEngine, PricingStrategy


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DEFAULT_COVER_FEE", "DEFAULT_FORMATTING_FEE", "METADATA_LIMIT",
                 "STRATEGY", "CURRENCY", "CATALOG_DIR"):
        monkeypatch.delenv(f"CHECKOUT_PRICING_{name}", raising=False)
    settings_module.reset_settings()
    yield
    settings_module.reset_settings()


def test_defaults():
    settings = Settings.load()

    assert settings.default_cover_fee == 45_000
    assert settings.default_formatting_fee == 35_000
    assert settings.metadata_byte_limit == 500
    assert settings.strategy == "selected"
    assert settings.currency == "NGN"
    assert settings.catalog_dir == get_package_root() / 'data'
    assert settings.packages_csv.name == 'packages.csv'


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CHECKOUT_PRICING_DEFAULT_COVER_FEE", "50000")
    monkeypatch.setenv("CHECKOUT_PRICING_METADATA_LIMIT", "1024")
    monkeypatch.setenv("CHECKOUT_PRICING_STRATEGY", "Scenario")
    monkeypatch.setenv("CHECKOUT_PRICING_CURRENCY", "usd")
    monkeypatch.setenv("CHECKOUT_PRICING_CATALOG_DIR", str(tmp_path))

    settings = Settings.load()

    assert settings.default_cover_fee == 50_000
    assert settings.metadata_byte_limit == 1024
    assert settings.strategy == "scenario"
    assert settings.currency == "USD"
    assert settings.addons_csv == tmp_path / 'addons.csv'


@pytest.mark.parametrize("raw", ["abc", "-5", "nan", "inf"])
def test_invalid_amounts_fall_back(monkeypatch, raw):
    monkeypatch.setenv("CHECKOUT_PRICING_DEFAULT_FORMATTING_FEE", raw)

    assert Settings.load().default_formatting_fee == 35_000


def test_unknown_strategy_falls_back(monkeypatch):
    monkeypatch.setenv("CHECKOUT_PRICING_STRATEGY", "cheapest")

    assert Settings.load().strategy == "selected"


def test_engine_takes_strategy_from_settings(monkeypatch):
    monkeypatch.setenv("CHECKOUT_PRICING_STRATEGY", "scenario")

    assert PricingEngine().strategy == PricingStrategy.SCENARIO
    assert PricingEngine(strategy="selected").strategy == PricingStrategy.SELECTED

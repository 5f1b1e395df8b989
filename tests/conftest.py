"""Pytest fixtures for checkout_pricing tests."""
import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from checkout_pricing.config.settings import Settings
from checkout_pricing.engine import PricingEngine, PricingStrategy
from checkout_pricing.engine.models import Addon, Package


PACKAGE_WITHOUT_ISBN = Package(
    id="pkg_1",
    name="First Draft",
    slug="first-draft",
    base_price=100_000,
    includes_isbn=False,
)

PACKAGE_WITH_ISBN = Package(
    id="pkg_2",
    name="Legacy",
    slug="legacy",
    base_price=100_000,
    includes_isbn=True,
)

COVER_ADDON = Addon(
    id="addon_cover",
    slug="cover-design",
    name="Cover Design",
    type="cover",
    price=45_000,
    pricing_type="fixed",
)

FORMATTING_ADDON_PER_WORD = Addon(
    id="addon_formatting",
    slug="content-formatting",
    name="Formatting",
    type="formatting",
    price=0,
    pricing_type="per_word",
    price_per_word=0.5,
)

ISBN_ADDON = Addon(
    id="addon_isbn",
    slug="isbn-barcode",
    name="ISBN + Barcode",
    type="isbn",
    price=15_000,
    pricing_type="fixed",
)

EXPRESS_ADDON = Addon(
    id="addon_express",
    slug="express-delivery",
    name="Express Delivery",
    type="other",
    price=5_000,
    pricing_type="fixed",
)


@pytest.fixture
def settings():
    """Default settings, independent of the environment."""
    return Settings()


@pytest.fixture
def engine(settings):
    return PricingEngine(strategy=PricingStrategy.SELECTED, settings=settings)


@pytest.fixture
def scenario_engine(settings):
    return PricingEngine(strategy=PricingStrategy.SCENARIO, settings=settings)

import json

import pytest

from checkout_pricing.engine import PricingEngine
from checkout_pricing.errors import MetadataTooLargeError
from checkout_pricing.payments.metadata import encode, encoded_size, fit_metadata, minimize

from conftest import COVER_ADDON, EXPRESS_ADDON, PACKAGE_WITHOUT_ISBN


@pytest.fixture
def metadata(engine):
    engine.set_selected_package(PACKAGE_WITHOUT_ISBN)
    engine.set_has_cover_design(True)
    engine.set_has_formatting(True)
    engine.set_selected_addons([COVER_ADDON, EXPRESS_ADDON])
    return engine.to_payment_metadata()


def test_full_payload_when_it_fits(metadata):
    payload = fit_metadata(metadata, limit=10_000)

    assert payload == metadata.to_dict()
    assert "addonBreakdown" in payload


def test_minimized_projection(metadata):
    compact = minimize(metadata)

    assert "addonBreakdown" not in compact
    assert compact["addons"] == [
        {"id": "addon_cover", "slug": "cover-design", "price": 45_000},
        {"id": "addon_express", "slug": "express-delivery", "price": 5_000},
    ]
    # Every scalar survives
    for key, value in metadata.scalar_fields().items():
        assert compact[key] == value


def test_falls_back_to_minimized(metadata):
    compact_size = encoded_size(minimize(metadata))
    full_size = encoded_size(metadata.to_dict())
    assert compact_size < full_size

    payload = fit_metadata(metadata, limit=compact_size)

    assert payload == minimize(metadata)


def test_raises_when_minimized_still_too_large(metadata):
    compact_size = encoded_size(minimize(metadata))

    with pytest.raises(MetadataTooLargeError) as exc_info:
        fit_metadata(metadata, limit=compact_size - 1)

    assert exc_info.value.limit == compact_size - 1
    assert exc_info.value.size == compact_size
    assert "metadata too large for provider limits" in str(exc_info.value)


def test_default_limit_from_settings(monkeypatch, metadata):
    from checkout_pricing.config import settings as settings_module

    monkeypatch.setattr(settings_module, "_settings", settings_module.Settings(metadata_byte_limit=10))

    with pytest.raises(MetadataTooLargeError):
        fit_metadata(metadata)


def test_many_addons_overflow_default_limit(settings):
    engine = PricingEngine(settings=settings)
    engine.set_selected_package(PACKAGE_WITHOUT_ISBN)
    engine.set_selected_addons([
        {"id": f"addon_extra_{i:02d}", "slug": f"marketing-extra-{i:02d}", "name": f"Marketing Extra {i}", "price": 1_000}
        for i in range(20)
    ])

    with pytest.raises(MetadataTooLargeError):
        fit_metadata(engine.to_payment_metadata(), limit=500)


def test_encoded_size_counts_utf8_bytes():
    assert encode({"name": "é"}) == '{"name":"é"}'
    assert encoded_size({"name": "é"}) == 13


def test_encode_is_valid_json(metadata):
    assert json.loads(encode(metadata.to_dict())) == metadata.to_dict()

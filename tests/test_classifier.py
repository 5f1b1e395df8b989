import pytest

from checkout_pricing.engine.classifier import (
    classify,
    find_addon,
    is_cover_addon,
    is_formatting_addon,
    is_isbn_addon,
)
from checkout_pricing.engine.models import Addon


def make(slug, name, addon_type=None):
    return Addon(id=slug, slug=slug, name=name, type=addon_type, price=1_000)


@pytest.mark.parametrize("addon, expected", [
    (make("cover-design", "Cover Design", "cover"), "cover"),
    (make("content-formatting", "Formatting", "formatting"), "formatting"),
    (make("isbn-barcode", "ISBN + Barcode", "isbn"), "isbn"),
    (make("express-delivery", "Express Delivery", "other"), "other"),
    # Untagged records fall back to the slug/name heuristic
    (make("premium-cover", "Premium Artwork"), "cover"),
    (make("typeset", "Manuscript Formatting"), "formatting"),
    (make("registration", "ISBN Registration"), "isbn"),
    (make("bookmarks", "Promo Bookmarks"), "other"),
])
def test_classify(addon, expected):
    assert classify(addon) == expected


def test_explicit_type_beats_text_match():
    # "Hardcover Upgrade" mentions cover but is tagged as a plain extra
    addon = make("hardcover-upgrade", "Hardcover Upgrade", "other")

    assert classify(addon) == "other"
    assert not is_cover_addon(addon)


def test_predicates():
    cover = make("cover-design", "Cover Design", "cover")
    assert is_cover_addon(cover)
    assert not is_formatting_addon(cover)
    assert not is_isbn_addon(cover)


def test_find_addon_returns_first_in_selection_order():
    first = make("cover-a", "Cover A", "cover")
    second = make("cover-b", "Cover B", "cover")
    other = make("express", "Express", "other")

    assert find_addon([other, first, second], "cover") is first
    assert find_addon([other], "formatting") is None
    assert find_addon([], "isbn") is None

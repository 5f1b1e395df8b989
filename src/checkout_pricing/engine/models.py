"""
Data models for the checkout pricing engine.

Uses dataclasses for structured, type-safe data representation.
Catalog records arrive as camelCase JSON (the catalog API's shape) and
payment metadata leaves as camelCase JSON, so both ends convert here.
"""
import math
from dataclasses import dataclass, field
from typing import Optional


# Book configuration choices
BOOK_SIZES = ('A4', 'A5', 'A6')
PAPER_COLORS = ('white', 'cream')
LAMINATIONS = ('matt', 'gloss')

# Addon classification and pricing
ADDON_TYPES = ('cover', 'formatting', 'isbn', 'other')
PRICING_FIXED = 'fixed'
PRICING_PER_WORD = 'per_word'

# Provenance of a charge line
SOURCE_SELECTED = 'selected'
SOURCE_SCENARIO = 'scenario'


def _number(value, default: float = 0.0) -> float:
    """Coerce catalog numbers (which may arrive as strings or None) to float."""
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(result):
        return default
    return result


def _pick(data: dict, *keys, default=None):
    """Return the first present key, so camelCase and snake_case both load."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes')
    return bool(value)


@dataclass(frozen=True)
class Package:
    """A purchasable publishing bundle (read-only catalog reference)."""
    id: str
    name: str
    slug: str
    base_price: float
    includes_isbn: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> 'Package':
        """Create a Package from a catalog API record."""
        return cls(
            id=str(_pick(data, 'id', default='')),
            name=str(_pick(data, 'name', default='')),
            slug=str(_pick(data, 'slug', default='')),
            base_price=_number(_pick(data, 'basePrice', 'base_price')),
            includes_isbn=_flag(_pick(data, 'includesISBN', 'includes_isbn', default=False)),
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'basePrice': self.base_price,
            'includesISBN': self.includes_isbn,
        }


@dataclass(frozen=True)
class Addon:
    """An optional purchasable extra (read-only catalog reference)."""
    id: str
    slug: str
    name: str
    price: float = 0.0
    type: Optional[str] = None  # cover / formatting / isbn / other
    pricing_type: str = PRICING_FIXED
    price_per_word: Optional[float] = None
    is_auto_included: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> 'Addon':
        """Create an Addon from a catalog API record."""
        addon_type = _pick(data, 'type')
        if addon_type is not None:
            addon_type = str(addon_type).strip().lower()
            if addon_type not in ADDON_TYPES:
                addon_type = None

        pricing_type = str(_pick(data, 'pricingType', 'pricing_type', default=PRICING_FIXED)).strip().lower()
        if pricing_type not in (PRICING_FIXED, PRICING_PER_WORD):
            pricing_type = PRICING_FIXED

        per_word = _pick(data, 'pricePerWord', 'price_per_word')

        return cls(
            id=str(_pick(data, 'id', default='')),
            slug=str(_pick(data, 'slug', default='')),
            name=str(_pick(data, 'name', default='')),
            price=_number(_pick(data, 'price')),
            type=addon_type,
            pricing_type=pricing_type,
            price_per_word=_number(per_word) if per_word is not None else None,
            is_auto_included=_flag(_pick(data, 'isAutoIncluded', 'is_auto_included', default=False)),
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'slug': self.slug,
            'name': self.name,
            'type': self.type,
            'price': self.price,
            'pricingType': self.pricing_type,
            'pricePerWord': self.price_per_word,
            'isAutoIncluded': self.is_auto_included,
        }


@dataclass(frozen=True)
class ChargeLine:
    """An addon contribution that survived every suppression rule."""
    id: Optional[str]
    slug: str
    name: str
    price: float
    source: str  # "selected" or "scenario"


@dataclass(frozen=True)
class AddonBreakdownItem:
    """Display-oriented line for the checkout summary."""
    name: str
    price: float

    def to_dict(self) -> dict:
        return {'name': self.name, 'price': self.price}


@dataclass(frozen=True)
class SelectionSnapshot:
    """Immutable copy of the engine's selection state."""
    selected_package: Optional[Package]
    selected_addons: tuple
    has_cover_design: Optional[bool]
    has_formatting: Optional[bool]
    book_size: Optional[str]
    paper_color: Optional[str]
    lamination: Optional[str]
    formatting_word_count: int
    formatting_price_per_word: float
    coupon_code: Optional[str]
    discount_amount: float


@dataclass
class PaymentMetadata:
    """Snapshot of pricing state sent to the payment-initialization endpoint."""
    has_cover: bool
    has_formatting: bool
    tier: Optional[str]
    package_id: Optional[str]
    package_slug: Optional[str]
    package_name: Optional[str]
    includes_isbn: bool
    book_size: Optional[str]
    paper_color: Optional[str]
    lamination: Optional[str]
    formatting_word_count: int
    coupon_code: Optional[str]
    discount_amount: float
    base_price: float
    addon_total: float
    total_price: float
    addons: list[ChargeLine] = field(default_factory=list)
    addon_breakdown: list[AddonBreakdownItem] = field(default_factory=list)

    def scalar_fields(self) -> dict:
        """Every non-list field, keyed the way the payment endpoint expects."""
        return {
            'hasCover': self.has_cover,
            'hasFormatting': self.has_formatting,
            'tier': self.tier,
            'packageId': self.package_id,
            'packageSlug': self.package_slug,
            'packageName': self.package_name,
            'includesISBN': self.includes_isbn,
            'bookSize': self.book_size,
            'paperColor': self.paper_color,
            'lamination': self.lamination,
            'formattingWordCount': self.formatting_word_count,
            'couponCode': self.coupon_code,
            'discountAmount': self.discount_amount,
            'basePrice': self.base_price,
            'addonTotal': self.addon_total,
            'totalPrice': self.total_price,
        }

    def to_dict(self) -> dict:
        """Convert to the camelCase payload of the payment endpoint."""
        data = self.scalar_fields()
        data['addons'] = [
            {
                'id': line.id,
                'slug': line.slug,
                'name': line.name,
                'price': line.price,
                'source': line.source,
            }
            for line in self.addons
        ]
        data['addonBreakdown'] = [item.to_dict() for item in self.addon_breakdown]
        return data

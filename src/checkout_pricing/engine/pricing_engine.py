"""
Pricing Engine - derives an order's total from a checkout selection.

The engine owns one selection (package, addons, book configuration,
formatting word count, coupon) and exposes:
- Setters that normalize their input instead of rejecting it
- Pure derivations (base price, addon breakdown, totals) computed on demand
- Payment metadata serialization for the payment-initialization endpoint

Two charge strategies share the same interface:
- "selected": only explicitly selected addons are charged
- "scenario": cover/formatting charges are also inferred from the
  configuration flags, with default fees when no matching addon exists
"""
import logging
import math
from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from ..config.settings import get_settings, Settings
from .classifier import find_addon, is_cover_addon, is_formatting_addon, is_isbn_addon
from .models import (
    Addon,
    AddonBreakdownItem,
    BOOK_SIZES,
    ChargeLine,
    LAMINATIONS,
    PAPER_COLORS,
    PRICING_PER_WORD,
    Package,
    PaymentMetadata,
    SOURCE_SCENARIO,
    SOURCE_SELECTED,
    SelectionSnapshot,
)

logger = logging.getLogger(__name__)


class PricingStrategy:
    """Names of the two charge-line strategies."""
    SELECTED = 'selected'
    SCENARIO = 'scenario'

    ALL = (SELECTED, SCENARIO)


CENT = Decimal("0.01")

INITIAL_STATE = SelectionSnapshot(
    selected_package=None,
    selected_addons=(),
    has_cover_design=None,
    has_formatting=None,
    book_size=None,
    paper_color=None,
    lamination=None,
    formatting_word_count=0,
    formatting_price_per_word=0.0,
    coupon_code=None,
    discount_amount=0.0,
)


def _finite(value) -> float:
    """Coerce anything to a finite float, 0 when that is impossible."""
    if isinstance(value, bool):
        return float(value)
    try:
        result = float(value)
    except (TypeError, ValueError):
        if value is not None:
            logger.debug("Treating non-numeric amount %r as 0", value)
        return 0.0
    if not math.isfinite(result):
        logger.debug("Treating non-finite amount %r as 0", value)
        return 0.0
    return result


def to_currency(value) -> float:
    """Round half-up to 2 decimal places; non-finite and negative amounts become 0."""
    amount = _finite(value)
    if amount <= 0:
        return 0.0
    return float(Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Charge-line resolution (pure functions of a snapshot)
# ---------------------------------------------------------------------------

def resolve_addon_price(addon: Addon, word_count: int, price_per_word: float) -> float:
    """
    Resolve what a selected addon costs.

    Per-word addons use the word count with the manuscript's rate (as applied
    through apply_formatting_cost), then the addon's own rate. Anything else,
    or a per-word addon without a usable count/rate, costs its flat price.
    """
    if addon.pricing_type == PRICING_PER_WORD and word_count > 0:
        rate = price_per_word if price_per_word > 0 else _finite(addon.price_per_word)
        if rate > 0:
            return to_currency(word_count * rate)
    return to_currency(addon.price)


def selected_charge_lines(state: SelectionSnapshot, strategy: str = PricingStrategy.SELECTED) -> list[ChargeLine]:
    """Charge lines contributed by explicitly selected addons."""
    package = state.selected_package
    lines = []

    for addon in state.selected_addons:
        if addon.is_auto_included:
            logger.debug("Skipping auto-included addon %s", addon.slug)
            continue

        if package is not None and package.includes_isbn and is_isbn_addon(addon):
            logger.debug("Skipping ISBN addon %s: bundled with package %s", addon.slug, package.slug)
            continue

        if strategy == PricingStrategy.SCENARIO:
            # These are re-charged as scenario lines
            if ((state.has_cover_design is False and is_cover_addon(addon))
                    or (state.has_formatting is False and is_formatting_addon(addon))):
                logger.debug("Addon %s replaced by its scenario charge", addon.slug)
                continue

        price = resolve_addon_price(addon, state.formatting_word_count, state.formatting_price_per_word)
        if price <= 0:
            continue

        lines.append(ChargeLine(
            id=addon.id,
            slug=addon.slug,
            name=addon.name,
            price=price,
            source=SOURCE_SELECTED,
        ))

    return lines


def scenario_cover_price(state: SelectionSnapshot, settings: Settings) -> float:
    """Cover charge implied by "no cover design yet"."""
    if state.has_cover_design is not False:
        return 0.0
    cover = find_addon(state.selected_addons, 'cover')
    if cover is not None:
        return to_currency(cover.price)
    return to_currency(settings.default_cover_fee)


def scenario_formatting_price(state: SelectionSnapshot, settings: Settings) -> float:
    """Formatting charge implied by "manuscript not formatted yet"."""
    if state.has_formatting is not False:
        return 0.0

    word_count = state.formatting_word_count
    if word_count > 0 and state.formatting_price_per_word > 0:
        return to_currency(word_count * state.formatting_price_per_word)

    formatting = find_addon(state.selected_addons, 'formatting')
    if formatting is None:
        return to_currency(settings.default_formatting_fee)

    if (formatting.pricing_type == PRICING_PER_WORD
            and _finite(formatting.price_per_word) > 0
            and word_count > 0):
        return to_currency(word_count * formatting.price_per_word)

    if formatting.price > 0:
        return to_currency(formatting.price)

    return to_currency(settings.default_formatting_fee)


def scenario_charge_lines(state: SelectionSnapshot, settings: Settings) -> list[ChargeLine]:
    """Cover/formatting charge lines synthesized from the configuration flags."""
    lines = []

    cover_price = scenario_cover_price(state, settings)
    if cover_price > 0:
        cover = find_addon(state.selected_addons, 'cover')
        lines.append(ChargeLine(
            id=cover.id if cover else None,
            slug=cover.slug if cover else 'cover-design',
            name=cover.name if cover else 'Cover Design',
            price=cover_price,
            source=SOURCE_SCENARIO,
        ))

    formatting_price = scenario_formatting_price(state, settings)
    if formatting_price > 0:
        formatting = find_addon(state.selected_addons, 'formatting')
        lines.append(ChargeLine(
            id=formatting.id if formatting else None,
            slug=formatting.slug if formatting else 'formatting',
            name=formatting.name if formatting else 'Formatting',
            price=formatting_price,
            source=SOURCE_SCENARIO,
        ))

    return lines


def charge_lines(state: SelectionSnapshot, strategy: str, settings: Settings) -> list[ChargeLine]:
    """Selected lines followed by scenario lines (scenario strategy only)."""
    lines = selected_charge_lines(state, strategy)
    if strategy == PricingStrategy.SCENARIO:
        lines.extend(scenario_charge_lines(state, settings))
    return lines


def is_configuration_complete(state: SelectionSnapshot) -> bool:
    """True once every configuration wizard question has an answer."""
    return (
        state.has_cover_design is not None
        and state.has_formatting is not None
        and state.book_size is not None
        and state.paper_color is not None
        and state.lamination is not None
    )


def _choice(value, choices: tuple) -> Optional[str]:
    """Match a configuration value case-insensitively, None when unknown."""
    if value is None:
        return None
    text = str(value).strip()
    for choice in choices:
        if choice.lower() == text.lower():
            return choice
    logger.debug("Ignoring unknown configuration value %r (expected one of %s)", value, choices)
    return None


def _tri_state(value) -> Optional[bool]:
    if value is None:
        return None
    return bool(value)


def _as_package(package) -> Optional[Package]:
    if package is None or isinstance(package, Package):
        return package
    if isinstance(package, dict):
        return Package.from_dict(package)
    logger.debug("Ignoring package of unsupported type %s", type(package).__name__)
    return None


def _as_addon(addon) -> Optional[Addon]:
    if addon is None or isinstance(addon, Addon):
        return addon
    if isinstance(addon, dict):
        return Addon.from_dict(addon)
    logger.debug("Ignoring addon of unsupported type %s", type(addon).__name__)
    return None


class PricingEngine:
    """
    Checkout pricing state container.

    Each checkout session creates its own engine. The selection is held as an
    immutable SelectionSnapshot that every setter replaces; derivations read
    the current snapshot and never write. No operation raises: invalid input
    is normalized (clamped, truncated, or dropped to None).

    Charge-line order:
    1. Start from the selected addons
    2. Drop auto-included addons
    3. Drop ISBN addons when the package bundles ISBN
    4. (scenario) Drop cover/formatting addons that the flags re-charge
    5. Resolve each price (per-word or flat); drop zero-priced lines
    6. (scenario) Append cover/formatting lines inferred from the flags
    """

    def __init__(self, strategy: Optional[str] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.strategy = PricingStrategy.SELECTED
        self.set_strategy(strategy or self.settings.strategy)
        self._state = INITIAL_STATE

    @property
    def state(self) -> SelectionSnapshot:
        return self._state

    def snapshot(self) -> SelectionSnapshot:
        """Return the current selection (immutable, safe to keep)."""
        return self._state

    def set_strategy(self, strategy: str):
        """Switch between the "selected" and "scenario" charge strategies."""
        strategy = str(strategy).strip().lower()
        if strategy not in PricingStrategy.ALL:
            logger.warning("Unknown pricing strategy %r, keeping %r", strategy, self.strategy)
            return
        self.strategy = strategy

    # -- Mutators ---------------------------------------------------------

    def _update(self, **changes):
        self._state = replace(self._state, **changes)

    def set_selected_package(self, package):
        self._update(selected_package=_as_package(package))

    def set_has_cover_design(self, value):
        self._update(has_cover_design=_tri_state(value))

    def set_has_formatting(self, value):
        self._update(has_formatting=_tri_state(value))

    def set_book_size(self, value):
        self._update(book_size=_choice(value, BOOK_SIZES))

    def set_paper_color(self, value):
        self._update(paper_color=_choice(value, PAPER_COLORS))

    def set_lamination(self, value):
        self._update(lamination=_choice(value, LAMINATIONS))

    def set_selected_addons(self, addons):
        """Replace the selection; duplicates by id keep the first position and the last value."""
        by_id = {}
        for item in addons or ():
            addon = _as_addon(item)
            if addon is not None:
                by_id[addon.id] = addon
        self._update(selected_addons=tuple(by_id.values()))

    def toggle_selected_addon(self, addon):
        """Remove the addon if selected (by id), otherwise append it."""
        addon = _as_addon(addon)
        if addon is None:
            return
        current = self._state.selected_addons
        if any(item.id == addon.id for item in current):
            self._update(selected_addons=tuple(item for item in current if item.id != addon.id))
        else:
            self._update(selected_addons=current + (addon,))

    def remove_selected_addon(self, addon_id: str):
        current = self._state.selected_addons
        self._update(selected_addons=tuple(item for item in current if item.id != addon_id))

    def apply_formatting_cost(self, word_count, price_per_word):
        """Record the manuscript's word count and per-word formatting rate."""
        words = _finite(word_count)
        self._update(
            formatting_word_count=max(0, int(math.floor(words))),
            formatting_price_per_word=max(0.0, _finite(price_per_word)),
        )

    def apply_coupon(self, code, discount_amount):
        """Record a coupon; the code is not validated here."""
        code = str(code).strip() if code is not None else ''
        self._update(
            coupon_code=code or None,
            discount_amount=to_currency(discount_amount),
        )

    def clear_coupon(self):
        self._update(coupon_code=None, discount_amount=0.0)

    def reset(self):
        """Restore the initial empty selection."""
        self._state = INITIAL_STATE

    def reset_configuration(self):
        self.reset()

    # -- Derivations ------------------------------------------------------

    def charge_lines(self) -> list[ChargeLine]:
        return charge_lines(self._state, self.strategy, self.settings)

    def get_base_price(self) -> float:
        package = self._state.selected_package
        return to_currency(package.base_price if package else 0)

    def get_addon_breakdown(self) -> list[AddonBreakdownItem]:
        return [AddonBreakdownItem(name=line.name, price=line.price) for line in self.charge_lines()]

    def get_addon_total(self) -> float:
        return to_currency(sum(line.price for line in self.charge_lines()))

    def get_total_price(self) -> float:
        subtotal = self.get_base_price() + self.get_addon_total()
        discount = to_currency(min(subtotal, self._state.discount_amount))
        return to_currency(max(0.0, subtotal - discount))

    def is_configuration_complete(self) -> bool:
        return is_configuration_complete(self._state)

    def to_payment_metadata(self) -> PaymentMetadata:
        """Build the metadata record for the payment-initialization endpoint."""
        state = self._state
        package = state.selected_package
        lines = self.charge_lines()

        return PaymentMetadata(
            has_cover=bool(state.has_cover_design),
            has_formatting=bool(state.has_formatting),
            tier=package.slug if package else None,
            package_id=package.id if package else None,
            package_slug=package.slug if package else None,
            package_name=package.name if package else None,
            includes_isbn=package.includes_isbn if package else False,
            book_size=state.book_size,
            paper_color=state.paper_color,
            lamination=state.lamination,
            formatting_word_count=state.formatting_word_count,
            coupon_code=state.coupon_code,
            discount_amount=state.discount_amount,
            base_price=self.get_base_price(),
            addon_total=self.get_addon_total(),
            total_price=self.get_total_price(),
            addons=list(lines),
            addon_breakdown=[AddonBreakdownItem(name=line.name, price=line.price) for line in lines],
        )


# Selector-style accessors for UI code that renders from an engine
def select_base_price(engine: PricingEngine) -> float:
    return engine.get_base_price()


def select_addon_breakdown(engine: PricingEngine) -> list[AddonBreakdownItem]:
    return engine.get_addon_breakdown()


def select_addon_total(engine: PricingEngine) -> float:
    return engine.get_addon_total()


def select_total_price(engine: PricingEngine) -> float:
    return engine.get_total_price()

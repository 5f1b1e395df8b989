"""
Streamlit checkout configurator for the pricing engine.

Features:
- Package picker with bundled-ISBN awareness
- Configuration wizard (cover, formatting, book size, paper, lamination)
- Addon toggles and manuscript word count
- Coupon entry
- Live order summary and payment metadata preview
"""
import json
import streamlit as st
import pandas as pd
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from checkout_pricing.config.settings import get_settings
from checkout_pricing.data.catalog import Catalog
from checkout_pricing.engine import PricingEngine, PricingStrategy
from checkout_pricing.engine.models import BOOK_SIZES, LAMINATIONS, PAPER_COLORS
from checkout_pricing.engine.pricing_engine import (
    select_addon_breakdown,
    select_addon_total,
    select_base_price,
    select_total_price,
)
from checkout_pricing.errors import MetadataTooLargeError
from checkout_pricing.payments.metadata import fit_metadata


st.set_page_config(
    page_title="Checkout Pricing",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_catalog():
    """Get cached catalog instance."""
    return Catalog.load()


try:
    catalog = get_catalog()
    settings = get_settings()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()

# One engine per browser session
if 'engine' not in st.session_state:
    st.session_state.engine = PricingEngine()
engine: PricingEngine = st.session_state.engine


def money(amount: float) -> str:
    return f"{settings.currency} {amount:,.2f}"


def tri_state_radio(label: str, current, key: str):
    """Yes/No/Undecided radio mapped to True/False/None."""
    options = ["Undecided", "Yes", "No"]
    index = 0 if current is None else (1 if current else 2)
    choice = st.radio(label, options, index=index, key=key, horizontal=True)
    return None if choice == "Undecided" else choice == "Yes"


def optional_select(label: str, choices: tuple, current, key: str):
    options = ["-"] + list(choices)
    index = options.index(current) if current in options else 0
    choice = st.selectbox(label, options, index=index, key=key)
    return None if choice == "-" else choice


# ============================================================================
# SIDEBAR: Package & Strategy
# ============================================================================
with st.sidebar:
    st.header("📦 Package")

    labels = {package.slug: f"{package.name} | {money(package.base_price)}" for package in catalog.packages}
    current_slug = engine.state.selected_package.slug if engine.state.selected_package else None
    slugs = ["-"] + list(labels)
    picked = st.selectbox(
        "Package",
        slugs,
        index=slugs.index(current_slug) if current_slug in slugs else 0,
        format_func=lambda s: "Choose a package" if s == "-" else labels[s],
    )
    engine.set_selected_package(None if picked == "-" else catalog.get_package(picked))

    package = engine.state.selected_package
    if package and package.includes_isbn:
        st.success("ISBN + Barcode included")

    st.divider()

    strategy = st.radio(
        "Charge strategy",
        PricingStrategy.ALL,
        index=PricingStrategy.ALL.index(engine.strategy),
        help="'scenario' also charges cover/formatting when the author has none yet",
    )
    engine.set_strategy(strategy)

    if st.button("🗑️ Start Over"):
        engine.reset()
        st.rerun()


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("Checkout Pricing")

col1, col2 = st.columns([1.6, 1.4], gap="large")

with col1:
    with st.container(border=True):
        st.subheader("Book Configuration")
        state = engine.state
        engine.set_has_cover_design(tri_state_radio("Do you have a cover design?", state.has_cover_design, "cover"))
        engine.set_has_formatting(tri_state_radio("Is your manuscript formatted?", state.has_formatting, "formatting"))

        c1, c2, c3 = st.columns(3)
        with c1:
            engine.set_book_size(optional_select("Book size", BOOK_SIZES, state.book_size, "book_size"))
        with c2:
            engine.set_paper_color(optional_select("Paper", PAPER_COLORS, state.paper_color, "paper_color"))
        with c3:
            engine.set_lamination(optional_select("Lamination", LAMINATIONS, state.lamination, "lamination"))

        if not engine.is_configuration_complete():
            st.caption("Answer every question to continue to payment.")

    with st.container(border=True):
        st.subheader("Add-ons")
        selected_ids = {addon.id for addon in engine.state.selected_addons}
        for addon in catalog.addons_for(package):
            if addon.pricing_type == 'per_word':
                price_label = f"{money(addon.price_per_word or 0)} / word"
            else:
                price_label = money(addon.price)

            checked = st.checkbox(
                f"{addon.name} ({price_label})",
                value=addon.is_auto_included or addon.id in selected_ids,
                disabled=addon.is_auto_included,
                key=f"addon_{addon.id}",
            )
            if checked != (addon.id in selected_ids):
                engine.toggle_selected_addon(catalog.selection_record(addon))

        word_count = st.number_input("Manuscript word count", min_value=0, value=engine.state.formatting_word_count, step=500)
        rate = st.number_input(
            "Formatting price per word",
            min_value=0.0,
            value=float(engine.state.formatting_price_per_word),
            step=0.1,
        )
        engine.apply_formatting_cost(word_count, rate)

    with st.container(border=True):
        st.subheader("Coupon")
        c1, c2, c3 = st.columns([2, 2, 1])
        with c1:
            code = st.text_input("Code", value=engine.state.coupon_code or "")
        with c2:
            discount = st.number_input("Discount", min_value=0.0, value=float(engine.state.discount_amount), step=1000.0)
        with c3:
            st.write("")
            if st.button("Clear"):
                engine.clear_coupon()
                st.rerun()
        if code.strip() or discount:
            engine.apply_coupon(code, discount)

with col2:
    st.subheader("Order Summary")

    breakdown = select_addon_breakdown(engine)
    rows = [{"Item": package.name if package else "No package", "Price": select_base_price(engine)}]
    rows += [{"Item": item.name, "Price": item.price} for item in breakdown]
    st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)

    m1, m2 = st.columns(2)
    m1.metric("Add-ons", money(select_addon_total(engine)))
    m2.metric("Discount", money(engine.state.discount_amount))
    st.metric("Total", money(select_total_price(engine)))

    with st.expander("🔍 Payment Metadata"):
        try:
            payload = fit_metadata(engine.to_payment_metadata())
            st.code(json.dumps(payload, indent=2), language="json")
        except MetadataTooLargeError as e:
            st.error(str(e))

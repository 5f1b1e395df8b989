#!/usr/bin/env python
"""
Print a quote for a package + addons under both charge strategies.

Usage:
    python scripts/debug_quote.py author-launch-1 cover-design content-formatting --words 40000 --no-cover
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from checkout_pricing.data.catalog import Catalog
from checkout_pricing.engine import PricingEngine, PricingStrategy
from checkout_pricing.errors import CheckoutPricingError
from checkout_pricing.payments.metadata import fit_metadata


def debug(args):
    catalog = Catalog.load()
    package = catalog.get_package(args.package)
    offered = {addon.id: addon for addon in catalog.addons_for(package)}
    addons = [offered[catalog.get_addon(key).id] for key in args.addons]

    print(f"Package: {package.name} ({package.slug}) base={package.base_price:,.2f} includesISBN={package.includes_isbn}")
    print(f"Addons: {', '.join(a.slug for a in addons) or '-'}")

    for strategy in PricingStrategy.ALL:
        engine = PricingEngine(strategy=strategy)
        engine.set_selected_package(package)
        engine.set_selected_addons(addons)
        engine.set_has_cover_design(not args.no_cover)
        engine.set_has_formatting(not args.no_formatting)
        engine.apply_formatting_cost(args.words, args.rate)
        if args.coupon:
            engine.apply_coupon(args.coupon, args.discount)

        print(f"\n--- Strategy: {strategy} ---")
        for line in engine.charge_lines():
            print(f"  {line.name:<24} {line.price:>12,.2f}  [{line.source}]")
        print(f"  {'Add-ons':<24} {engine.get_addon_total():>12,.2f}")
        print(f"  {'Total':<24} {engine.get_total_price():>12,.2f}")

        try:
            payload = fit_metadata(engine.to_payment_metadata())
            print(f"  Metadata ({len(json.dumps(payload, separators=(',', ':')))} chars): {'full' if 'addonBreakdown' in payload else 'minimized'}")
        except CheckoutPricingError as e:
            print(f"  Metadata: {e}")


def main():
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument('package', help="package id or slug")
    parser.add_argument('addons', nargs='*', help="addon ids or slugs")
    parser.add_argument('--words', type=int, default=0)
    parser.add_argument('--rate', type=float, default=0.0)
    parser.add_argument('--no-cover', action='store_true')
    parser.add_argument('--no-formatting', action='store_true')
    parser.add_argument('--coupon')
    parser.add_argument('--discount', type=float, default=0.0)
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        debug(args)
    except CheckoutPricingError as e:
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

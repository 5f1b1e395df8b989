"""
Checkout Pricing Package

Order pricing for the book-printing checkout funnel.
Derives base price, addon charges, coupon discount and payment metadata
from a package + addon + book configuration selection.
"""

__version__ = "1.0.0"

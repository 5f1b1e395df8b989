"""Custom exceptions for checkout_pricing."""
from typing import Optional


class CheckoutPricingError(Exception):
    """Base exception for all checkout_pricing errors."""

    pass


class MetadataTooLargeError(CheckoutPricingError):
    """Raised when payment metadata cannot fit a provider's metadata field."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"metadata too large for provider limits ({size} bytes > {limit} bytes)"
        )


class CatalogError(CheckoutPricingError):
    """Raised when catalog reference data cannot be read."""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        msg = f"Catalog file unreadable: {path}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class UnknownCatalogItemError(CatalogError):
    """Raised when a package or addon id/slug is not in the catalog."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        CheckoutPricingError.__init__(self, f"Unknown {kind}: {key}")

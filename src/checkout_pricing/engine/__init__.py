"""Engine subpackage - checkout selection state and price derivation."""
from .pricing_engine import PricingEngine, PricingStrategy, is_configuration_complete, to_currency
from .models import Package, Addon, ChargeLine, AddonBreakdownItem, PaymentMetadata, SelectionSnapshot

__all__ = [
    'PricingEngine', 'PricingStrategy', 'is_configuration_complete', 'to_currency',
    'Package', 'Addon', 'ChargeLine', 'AddonBreakdownItem', 'PaymentMetadata', 'SelectionSnapshot',
]

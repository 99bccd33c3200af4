"""
Services package.

Re-exports the pricing service so imports stay short:
    from pricing.services import PricingService, calculate_price
"""

from .pricing_service import PricingService, calculate_price, hours_between

__all__ = [
    'PricingService',
    'calculate_price',
    'hours_between',
]

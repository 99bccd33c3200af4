"""
Views package.

Re-exports all views so URL imports stay short:
    from pricing.views import PriceCalculatorView, etc.
"""

# Mixins
from .mixins import PricingConfigMixin

# Pricing views
from .pricing import (
    PriceCalculatorView,
    price_quote_ajax,
)

__all__ = [
    'PricingConfigMixin',
    'PriceCalculatorView',
    'price_quote_ajax',
]

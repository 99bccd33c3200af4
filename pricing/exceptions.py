"""Exceptions for the pricing app."""

from django.core.exceptions import ImproperlyConfigured


class PricingConfigError(ImproperlyConfigured):
    """Raised when PRICING_BUSINESS or PRICING_SERVICE is malformed."""
    pass

"""
Configuration for the pricing app.

The business and service being quoted are read from Django settings:

    PRICING_BUSINESS = {
        'id': 'biz_123',
        'name': "Bella's Hair Studio",
        'timezone': 'America/New_York',
        'pricingRules': {...},
    }
    PRICING_SERVICE = {'id': 'svc_456', 'basePrice': 85, 'minPrice': 65, 'maxPrice': 110}

Both fall back to the sample salon configuration below when unset.
"""

from decimal import Decimal, InvalidOperation
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings

from pricing.exceptions import PricingConfigError
from pricing.rules import Business, Service


DEFAULT_BUSINESS = {
    'id': 'biz_123',
    'name': "Bella's Hair Studio",
    'industry': 'beauty',
    'timezone': 'America/New_York',
    'pricingRules': {
        'peakHours': {'start': 12, 'end': 15, 'multiplier': 1.15},
        'weekendDays': {'days': [5, 6, 0], 'multiplier': 1.5},
        'urgencyThreshold': {'hours': 5, 'multiplier': 1.1},
        'discounts': {
            'cancellation': {'thresholdHours': 36, 'discount': 0.1},
            'lastMinute': {'thresholdHours': 4, 'discount': 0.15},
        },
    },
}

DEFAULT_SERVICE = {
    'id': 'svc_456',
    'name': 'Haircut & Style',
    'duration': 60,
    'basePrice': 85,
    'minPrice': 65,
    'maxPrice': 110,
}


def get_business() -> Business:
    """
    Get the configured business.

    Raises:
        PricingConfigError: If PRICING_BUSINESS is malformed
    """
    data = getattr(settings, 'PRICING_BUSINESS', None) or DEFAULT_BUSINESS
    try:
        business = Business.from_dict(data)
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise PricingConfigError(f"PRICING_BUSINESS is malformed: {e!r}") from e
    validate_business(business)
    return business


def get_service() -> Service:
    """
    Get the configured service.

    Raises:
        PricingConfigError: If PRICING_SERVICE is malformed
    """
    data = getattr(settings, 'PRICING_SERVICE', None) or DEFAULT_SERVICE
    try:
        service = Service.from_dict(data)
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise PricingConfigError(f"PRICING_SERVICE is malformed: {e!r}") from e
    validate_service(service)
    return service


def validate_business(business: Business):
    rules = business.pricing_rules
    errors = []

    peak = rules.peak_hours
    if not (0 <= peak.start < 24 and 0 <= peak.end < 24):
        errors.append(f"peakHours must be hours in [0, 24), got {peak.start}-{peak.end}")
    if peak.start >= peak.end:
        errors.append(f"peakHours.start ({peak.start}) must be before end ({peak.end})")

    bad_days = sorted(d for d in rules.weekend_days.days if not 0 <= d <= 6)
    if bad_days:
        errors.append(f"weekendDays.days must be 0-6, got {bad_days}")

    for name, multiplier in (
        ('peakHours', peak.multiplier),
        ('weekendDays', rules.weekend_days.multiplier),
        ('urgencyThreshold', rules.urgency_threshold.multiplier),
    ):
        if multiplier <= 0:
            errors.append(f"{name}.multiplier must be positive, got {multiplier}")

    for name, rule in (
        ('lastMinute', rules.discounts.last_minute),
        ('cancellation', rules.discounts.cancellation),
    ):
        if not Decimal('0') <= rule.discount < Decimal('1'):
            errors.append(f"discounts.{name}.discount must be in [0, 1), got {rule.discount}")
        if rule.threshold_hours < 0:
            errors.append(f"discounts.{name}.thresholdHours must not be negative")

    try:
        ZoneInfo(business.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        errors.append(f"Unknown timezone: {business.timezone!r}")

    if errors:
        raise PricingConfigError("PRICING_BUSINESS is invalid: " + "; ".join(errors))


def validate_service(service: Service):
    for name in ('base_price', 'min_price', 'max_price'):
        value = getattr(service, name)
        if value <= 0:
            raise PricingConfigError(f"PRICING_SERVICE {name} must be positive, got {value}")

"""
Pricing rule and booking value types.

Business and service configuration is resolved once by the caller and
passed into every evaluation as immutable values. Numbers are normalised
to Decimal on construction so float configuration never leaks binary
rounding into a quoted price.

Usage:
    from pricing.rules import Business, Service, BookingContext

    business = Business.from_dict(settings.PRICING_BUSINESS)
    service = Service.from_dict(settings.PRICING_SERVICE)
    context = BookingContext(appointment_at=appt, booked_at=booked)
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from django.db import models


def to_decimal(value) -> Decimal:
    """Convert int/float/str to Decimal via str to avoid float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class PriceErrorCode(models.TextChoices):
    MISSING_DATES = 'missing_dates', 'Missing dates'
    INVALID_ORDER = 'invalid_order', 'Invalid order'


# =============================================================================
# PRICING RULES
# =============================================================================

@dataclass(frozen=True)
class PeakHours:
    """Hour-of-day window [start, end) that carries a surcharge."""
    start: int
    end: int
    multiplier: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'multiplier', to_decimal(self.multiplier))

    def contains(self, hour: int) -> bool:
        return self.start <= hour < self.end


@dataclass(frozen=True)
class WeekendDays:
    """
    Days of the week that carry a surcharge.

    Days are numbered 0 = Sunday through 6 = Saturday.
    """
    days: frozenset
    multiplier: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'days', frozenset(int(d) for d in self.days))
        object.__setattr__(self, 'multiplier', to_decimal(self.multiplier))

    def contains(self, day: int) -> bool:
        return day in self.days


@dataclass(frozen=True)
class UrgencyThreshold:
    # Carried for configuration compatibility; not consulted when pricing.
    hours: Decimal
    multiplier: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'hours', to_decimal(self.hours))
        object.__setattr__(self, 'multiplier', to_decimal(self.multiplier))


@dataclass(frozen=True)
class DiscountRule:
    """A fractional discount that applies within `threshold_hours`."""
    threshold_hours: Decimal
    discount: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'threshold_hours', to_decimal(self.threshold_hours))
        object.__setattr__(self, 'discount', to_decimal(self.discount))

    @property
    def factor(self) -> Decimal:
        return Decimal('1') - self.discount


@dataclass(frozen=True)
class Discounts:
    last_minute: DiscountRule
    cancellation: DiscountRule


@dataclass(frozen=True)
class PricingRules:
    peak_hours: PeakHours
    weekend_days: WeekendDays
    urgency_threshold: UrgencyThreshold
    discounts: Discounts

    @classmethod
    def from_dict(cls, data: dict) -> 'PricingRules':
        """
        Build rules from the camelCase mapping used in configuration.

        Example:
            {
                'peakHours': {'start': 12, 'end': 15, 'multiplier': 1.15},
                'weekendDays': {'days': [5, 6, 0], 'multiplier': 1.5},
                'urgencyThreshold': {'hours': 5, 'multiplier': 1.1},
                'discounts': {
                    'cancellation': {'thresholdHours': 36, 'discount': 0.1},
                    'lastMinute': {'thresholdHours': 4, 'discount': 0.15},
                },
            }
        """
        peak = data['peakHours']
        weekend = data['weekendDays']
        urgency = data['urgencyThreshold']
        discounts = data['discounts']
        return cls(
            peak_hours=PeakHours(
                start=int(peak['start']),
                end=int(peak['end']),
                multiplier=peak['multiplier'],
            ),
            weekend_days=WeekendDays(
                days=weekend['days'],
                multiplier=weekend['multiplier'],
            ),
            urgency_threshold=UrgencyThreshold(
                hours=urgency['hours'],
                multiplier=urgency['multiplier'],
            ),
            discounts=Discounts(
                last_minute=DiscountRule(
                    threshold_hours=discounts['lastMinute']['thresholdHours'],
                    discount=discounts['lastMinute']['discount'],
                ),
                cancellation=DiscountRule(
                    threshold_hours=discounts['cancellation']['thresholdHours'],
                    discount=discounts['cancellation']['discount'],
                ),
            ),
        )


# =============================================================================
# BUSINESS / SERVICE
# =============================================================================

@dataclass(frozen=True)
class Business:
    """The business whose pricing rules govern a quote."""
    pricing_rules: PricingRules
    id: str = ''
    name: str = ''
    industry: str = ''
    timezone: str = 'UTC'

    @classmethod
    def from_dict(cls, data: dict) -> 'Business':
        return cls(
            pricing_rules=PricingRules.from_dict(data['pricingRules']),
            id=data.get('id', ''),
            name=data.get('name', ''),
            industry=data.get('industry', ''),
            timezone=data.get('timezone') or 'UTC',
        )


@dataclass(frozen=True)
class Service:
    """
    A bookable service with its base price and allowed price range.

    `min_price <= base_price <= max_price` is expected but not enforced;
    clamping always has the last word.
    """
    base_price: Decimal
    min_price: Decimal
    max_price: Decimal
    id: str = ''
    name: str = ''
    duration: int = 0  # minutes

    def __post_init__(self):
        for name in ('base_price', 'min_price', 'max_price'):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))

    @classmethod
    def from_dict(cls, data: dict) -> 'Service':
        return cls(
            base_price=data['basePrice'],
            min_price=data['minPrice'],
            max_price=data['maxPrice'],
            id=data.get('id', ''),
            name=data.get('name', ''),
            duration=int(data.get('duration', 0)),
        )

    def clamp(self, price: Decimal) -> Decimal:
        return max(self.min_price, min(price, self.max_price))


# =============================================================================
# BOOKING CONTEXT / RESULT
# =============================================================================

@dataclass(frozen=True)
class BookingContext:
    """Per-booking facts supplied for a single evaluation."""
    appointment_at: Optional[datetime] = None
    booked_at: Optional[datetime] = None
    was_cancelled: bool = False
    cancelled_at: Optional[datetime] = None


@dataclass(frozen=True)
class Adjustment:
    """One pricing step that changed the running price."""
    code: str
    factor: Optional[Decimal]
    price_after: Decimal


@dataclass(frozen=True)
class PriceResult:
    """
    Outcome of a price evaluation.

    Exactly one of `price` / `error` is populated, depending on `success`.
    """
    success: bool
    price: Optional[Decimal] = None
    error: Optional[str] = None
    error_code: Optional[PriceErrorCode] = None
    adjustments: Tuple[Adjustment, ...] = field(default_factory=tuple)

    @classmethod
    def ok(cls, price: Decimal, adjustments=()) -> 'PriceResult':
        return cls(success=True, price=price, adjustments=tuple(adjustments))

    @classmethod
    def fail(cls, code: PriceErrorCode, message: str) -> 'PriceResult':
        return cls(success=False, error=message, error_code=code)

    def as_dict(self) -> dict:
        """JSON-friendly representation (prices as strings)."""
        if not self.success:
            return {
                'success': False,
                'error': self.error,
                'code': str(self.error_code) if self.error_code else None,
            }
        return {
            'success': True,
            'price': str(self.price),
            'adjustments': [
                {
                    'code': adj.code,
                    'factor': str(adj.factor) if adj.factor is not None else None,
                    'price_after': str(adj.price_after),
                }
                for adj in self.adjustments
            ],
        }

"""
Pricing Calculation Services
============================

Quotes a service price from the business's pricing rules and the
booking context.

Calculation Flow:
1. Validate dates (missing → MissingDates, out of order → InvalidOrder)
2. Base Price × Weekend Multiplier (if appointment day is a weekend day)
3. × Peak Hours Multiplier (if appointment hour is in the peak window)
4. × (1 - Last Minute Discount), or else × (1 - Cancellation Discount)
5. Clamp to [min price, max price]

Surcharges stack multiplicatively; at most one discount applies.
"""

import logging
from datetime import timedelta, timezone as dt_timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

from django.utils import timezone

from pricing.rules import (
    Adjustment,
    BookingContext,
    Business,
    PriceErrorCode,
    PriceResult,
    Service,
)

logger = logging.getLogger(__name__)

MS_PER_HOUR = Decimal(3_600_000)

MISSING_DATES_MESSAGE = "Missing required dates"
BOOKING_AFTER_APPOINTMENT_MESSAGE = "Booking date cannot be after appointment date"
CANCELLATION_AFTER_APPOINTMENT_MESSAGE = "Cancellation date cannot be after appointment date"


def _as_utc(value, tz):
    """Naive datetimes are business-local wall time."""
    if timezone.is_naive(value):
        value = value.replace(tzinfo=tz)
    return value.astimezone(dt_timezone.utc)


def _as_local(value, tz):
    if timezone.is_naive(value):
        return value
    return value.astimezone(tz)


def hours_between(later, earlier) -> Decimal:
    """Elapsed hours from `earlier` to `later`, at millisecond precision."""
    elapsed_ms = (later - earlier) // timedelta(milliseconds=1)
    return Decimal(elapsed_ms) / MS_PER_HOUR


def day_of_week(value) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return value.isoweekday() % 7


def validate_context(context: BookingContext, tz):
    """
    Check the booking dates before any pricing math.

    Returns:
        PriceResult describing the first failure, or None if valid
    """
    if context.appointment_at is None or context.booked_at is None:
        return PriceResult.fail(PriceErrorCode.MISSING_DATES, MISSING_DATES_MESSAGE)

    appointment_at = _as_utc(context.appointment_at, tz)

    if _as_utc(context.booked_at, tz) > appointment_at:
        return PriceResult.fail(
            PriceErrorCode.INVALID_ORDER, BOOKING_AFTER_APPOINTMENT_MESSAGE
        )

    if context.cancelled_at is not None and _as_utc(context.cancelled_at, tz) > appointment_at:
        return PriceResult.fail(
            PriceErrorCode.INVALID_ORDER, CANCELLATION_AFTER_APPOINTMENT_MESSAGE
        )

    return None


def calculate_price(business: Business, service: Service, context: BookingContext) -> PriceResult:
    """
    Evaluate the price of `service` for one booking.

    Pure function: reads its arguments and returns a PriceResult. It never
    raises for bad booking input; validation problems come back as a
    failed result.

    Args:
        business: Business with its pricing rules and timezone
        service: Service with base/min/max price
        context: BookingContext for this booking

    Returns:
        PriceResult with either `price` (Decimal, unrounded) or `error`
    """
    tz = ZoneInfo(business.timezone)

    failure = validate_context(context, tz)
    if failure is not None:
        return failure

    rules = business.pricing_rules
    appointment_local = _as_local(context.appointment_at, tz)
    appointment_utc = _as_utc(context.appointment_at, tz)

    price = service.base_price
    adjustments = []

    # =======================================================================
    # STEP 1: Weekend surcharge
    # =======================================================================
    if rules.weekend_days.contains(day_of_week(appointment_local)):
        price *= rules.weekend_days.multiplier
        adjustments.append(Adjustment('weekend', rules.weekend_days.multiplier, price))

    # =======================================================================
    # STEP 2: Peak hours surcharge (independent of the weekend check)
    # =======================================================================
    if rules.peak_hours.contains(appointment_local.hour):
        price *= rules.peak_hours.multiplier
        adjustments.append(Adjustment('peak_hours', rules.peak_hours.multiplier, price))

    # =======================================================================
    # STEP 3: One discount at most, last minute first
    # =======================================================================
    last_minute = rules.discounts.last_minute
    cancellation = rules.discounts.cancellation
    lead_hours = hours_between(appointment_utc, _as_utc(context.booked_at, tz))

    if lead_hours <= last_minute.threshold_hours:
        price *= last_minute.factor
        adjustments.append(Adjustment('last_minute', last_minute.factor, price))
    elif (
        context.was_cancelled
        and context.cancelled_at is not None
        and hours_between(appointment_utc, _as_utc(context.cancelled_at, tz))
        <= cancellation.threshold_hours
    ):
        price *= cancellation.factor
        adjustments.append(Adjustment('cancellation', cancellation.factor, price))

    # =======================================================================
    # STEP 4: Clamp to the service's price range
    # =======================================================================
    clamped = service.clamp(price)
    if clamped > price:
        adjustments.append(Adjustment('min_price', None, clamped))
    elif clamped < price:
        adjustments.append(Adjustment('max_price', None, clamped))

    return PriceResult.ok(clamped, adjustments)


class PricingService:
    """
    Price quotes for one business/service pair.

    Usage:
        from pricing.services import PricingService

        service = PricingService(business, haircut)
        result = service.quote_for(
            appointment_at=datetime(2026, 3, 14, 13, 0),
            booked_at=datetime(2026, 3, 12, 13, 0),
        )

        if result.success:
            print(f"Price: ${result.price:.2f}")
    """

    def __init__(self, business: Business, service: Service):
        self.business = business
        self.service = service

    def quote(self, context: BookingContext) -> PriceResult:
        result = calculate_price(self.business, self.service, context)
        if result.success:
            logger.debug(
                "Quoted %s for %s: %s (%s)",
                self.service.name or self.service.id,
                self.business.name or self.business.id,
                result.price,
                ', '.join(adj.code for adj in result.adjustments) or 'no adjustments',
            )
        else:
            logger.debug("Quote rejected: %s", result.error)
        return result

    def quote_for(self, appointment_at=None, booked_at=None,
                  was_cancelled=False, cancelled_at=None) -> PriceResult:
        return self.quote(BookingContext(
            appointment_at=appointment_at,
            booked_at=booked_at,
            was_cancelled=was_cancelled,
            cancelled_at=cancelled_at,
        ))

"""Tests for calculate_price and PricingService."""
import copy
import logging
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest

from pricing.rules import BookingContext, PriceErrorCode, Service
from pricing.services import PricingService, calculate_price, hours_between

# 2026-03-11 is a Wednesday, 2026-03-14 a Saturday.
WEDNESDAY_10AM = datetime(2026, 3, 11, 10, 0)
SATURDAY_1PM = datetime(2026, 3, 14, 13, 0)


def codes(result):
    return [adj.code for adj in result.adjustments]


class TestDateValidation:
    """Validation runs before any pricing math; first failure wins."""

    def test_missing_both_dates(self, business, service):
        result = calculate_price(business, service, BookingContext())
        assert result.success is False
        assert result.error_code == PriceErrorCode.MISSING_DATES
        assert result.error == "Missing required dates"
        assert result.price is None

    def test_missing_booking_date(self, business, service):
        context = BookingContext(appointment_at=WEDNESDAY_10AM)
        result = calculate_price(business, service, context)
        assert result.error_code == PriceErrorCode.MISSING_DATES

    def test_missing_appointment_date(self, business, service):
        context = BookingContext(booked_at=WEDNESDAY_10AM)
        result = calculate_price(business, service, context)
        assert result.error_code == PriceErrorCode.MISSING_DATES

    def test_missing_dates_reported_before_cancellation_order(self, business, service):
        context = BookingContext(
            booked_at=WEDNESDAY_10AM,
            was_cancelled=True,
            cancelled_at=WEDNESDAY_10AM + timedelta(days=30),
        )
        result = calculate_price(business, service, context)
        assert result.error_code == PriceErrorCode.MISSING_DATES

    def test_booking_after_appointment(self, business, service):
        context = BookingContext(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM + timedelta(hours=1),
        )
        result = calculate_price(business, service, context)
        assert result.success is False
        assert result.error_code == PriceErrorCode.INVALID_ORDER
        assert result.error == "Booking date cannot be after appointment date"
        assert result.price is None

    def test_cancellation_after_appointment(self, business, service):
        context = BookingContext(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM - timedelta(hours=48),
            was_cancelled=True,
            cancelled_at=WEDNESDAY_10AM + timedelta(minutes=1),
        )
        result = calculate_price(business, service, context)
        assert result.error_code == PriceErrorCode.INVALID_ORDER
        assert result.error == "Cancellation date cannot be after appointment date"

    def test_cancellation_date_checked_even_if_not_cancelled(self, business, service):
        context = BookingContext(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM - timedelta(hours=48),
            was_cancelled=False,
            cancelled_at=WEDNESDAY_10AM + timedelta(hours=2),
        )
        result = calculate_price(business, service, context)
        assert result.error_code == PriceErrorCode.INVALID_ORDER

    def test_booking_at_appointment_time_is_valid(self, business, service):
        context = BookingContext(appointment_at=WEDNESDAY_10AM, booked_at=WEDNESDAY_10AM)
        result = calculate_price(business, service, context)
        assert result.success is True
        assert codes(result) == ['last_minute']


class TestScenarios:
    """Worked examples for the sample salon configuration."""

    def test_weekend_peak_clamped_to_max(self, business, service):
        context = BookingContext(
            appointment_at=SATURDAY_1PM,
            booked_at=SATURDAY_1PM - timedelta(hours=48),
        )
        result = calculate_price(business, service, context)
        assert result.success is True
        assert result.price == Decimal('110')
        assert codes(result) == ['weekend', 'peak_hours', 'max_price']
        assert result.adjustments[1].price_after == Decimal('146.625')

    def test_last_minute_at_threshold(self, business, service):
        context = BookingContext(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM - timedelta(hours=4),
        )
        result = calculate_price(business, service, context)
        assert result.price == Decimal('72.25')
        assert codes(result) == ['last_minute']

    def test_last_minute_within_threshold(self, business, service):
        context = BookingContext(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM - timedelta(hours=3),
        )
        result = calculate_price(business, service, context)
        assert result.price == Decimal('72.25')

    def test_recent_cancellation_discount(self, business, service):
        context = BookingContext(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM - timedelta(hours=48),
            was_cancelled=True,
            cancelled_at=WEDNESDAY_10AM - timedelta(hours=20),
        )
        result = calculate_price(business, service, context)
        assert result.price == Decimal('76.50')
        assert codes(result) == ['cancellation']


class TestAdjustments:
    """Surcharge, discount and clamping rules."""

    def test_no_adjustments_returns_base_price(self, business, service):
        context = BookingContext(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM - timedelta(hours=48),
        )
        result = calculate_price(business, service, context)
        assert result.price == Decimal('85')
        assert result.adjustments == ()

    def test_weekend_only(self, business, service):
        saturday_10am = datetime(2026, 3, 14, 10, 0)
        context = BookingContext(
            appointment_at=saturday_10am,
            booked_at=saturday_10am - timedelta(days=3),
        )
        result = calculate_price(business, service, context)
        assert result.price == Decimal('110')
        assert codes(result) == ['weekend', 'max_price']

    def test_friday_and_sunday_are_weekend_days(self, business):
        cheap = Service(base_price=40, min_price=10, max_price=500)
        for day in (datetime(2026, 3, 13, 9, 0), datetime(2026, 3, 15, 9, 0)):
            context = BookingContext(appointment_at=day, booked_at=day - timedelta(days=2))
            result = calculate_price(business, cheap, context)
            assert result.price == Decimal('60'), day

    def test_peak_hours_only(self, business, service):
        wednesday_1pm = datetime(2026, 3, 11, 13, 0)
        context = BookingContext(
            appointment_at=wednesday_1pm,
            booked_at=wednesday_1pm - timedelta(hours=48),
        )
        result = calculate_price(business, service, context)
        assert result.price == Decimal('97.75')
        assert codes(result) == ['peak_hours']

    def test_peak_window_includes_start_excludes_end(self, business, service):
        def price_at(hour, minute=0):
            appt = datetime(2026, 3, 11, hour, minute)
            context = BookingContext(appointment_at=appt, booked_at=appt - timedelta(days=2))
            return calculate_price(business, service, context)

        assert codes(price_at(12)) == ['peak_hours']
        assert codes(price_at(14, 59)) == ['peak_hours']
        assert codes(price_at(15)) == []
        assert codes(price_at(11, 59)) == []

    def test_surcharges_stack_multiplicatively(self, business):
        wide = Service(base_price=80, min_price=1, max_price=1000)
        context = BookingContext(
            appointment_at=SATURDAY_1PM,
            booked_at=SATURDAY_1PM - timedelta(hours=48),
        )
        result = calculate_price(business, wide, context)
        assert result.price == Decimal('80') * Decimal('1.5') * Decimal('1.15')
        assert result.price == Decimal('138')

    def test_last_minute_beats_cancellation(self, business, service):
        context = BookingContext(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM - timedelta(hours=2),
            was_cancelled=True,
            cancelled_at=WEDNESDAY_10AM - timedelta(hours=1),
        )
        result = calculate_price(business, service, context)
        assert result.price == Decimal('72.25')
        assert codes(result) == ['last_minute']

    def test_cancellation_requires_was_cancelled(self, business, service):
        context = BookingContext(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM - timedelta(hours=48),
            was_cancelled=False,
            cancelled_at=WEDNESDAY_10AM - timedelta(hours=20),
        )
        result = calculate_price(business, service, context)
        assert result.price == Decimal('85')

    def test_cancellation_requires_cancellation_date(self, business, service):
        context = BookingContext(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM - timedelta(hours=48),
            was_cancelled=True,
        )
        result = calculate_price(business, service, context)
        assert result.price == Decimal('85')

    def test_cancellation_threshold_is_inclusive(self, business, service):
        def quote(hours_before):
            context = BookingContext(
                appointment_at=WEDNESDAY_10AM,
                booked_at=WEDNESDAY_10AM - timedelta(hours=48),
                was_cancelled=True,
                cancelled_at=WEDNESDAY_10AM - timedelta(hours=hours_before),
            )
            return calculate_price(business, service, context).price

        assert quote(36) == Decimal('76.5')
        assert quote(36.5) == Decimal('85')

    def test_clamps_up_to_min_price(self, business):
        budget = Service(base_price=70, min_price=65, max_price=110)
        context = BookingContext(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM - timedelta(hours=1),
        )
        result = calculate_price(business, budget, context)
        assert result.price == Decimal('65')
        assert codes(result) == ['last_minute', 'min_price']
        assert result.adjustments[0].price_after == Decimal('59.5')

    def test_base_price_outside_range_is_clamped(self, business):
        odd = Service(base_price=200, min_price=65, max_price=110)
        context = BookingContext(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM - timedelta(hours=48),
        )
        result = calculate_price(business, odd, context)
        assert result.price == Decimal('110')
        assert codes(result) == ['max_price']

    def test_price_always_within_range(self, business, service):
        start = datetime(2026, 3, 9, 0, 0)
        for offset in range(0, 7 * 24, 5):
            appt = start + timedelta(hours=offset)
            for lead in (0, 3, 5, 48):
                context = BookingContext(
                    appointment_at=appt,
                    booked_at=appt - timedelta(hours=lead),
                    was_cancelled=True,
                    cancelled_at=appt - timedelta(hours=lead / 2),
                )
                price = calculate_price(business, service, context).price
                assert service.min_price <= price <= service.max_price

    def test_urgency_threshold_is_not_applied(self, business, service):
        # Booked inside the urgency window but outside last-minute.
        context = BookingContext(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM - timedelta(hours=4, minutes=30),
        )
        result = calculate_price(business, service, context)
        assert result.price == Decimal('85')


class TestTimezones:
    """Day and hour are read in the business's local time."""

    def test_aware_datetimes_converted_to_business_time(self, business, service):
        # 17:00 UTC on 2026-03-11 is 13:00 EDT: peak hours, weekday.
        appt = datetime(2026, 3, 11, 17, 0, tzinfo=dt_timezone.utc)
        context = BookingContext(appointment_at=appt, booked_at=appt - timedelta(hours=48))
        result = calculate_price(business, service, context)
        assert result.price == Decimal('97.75')
        assert codes(result) == ['peak_hours']

    def test_aware_date_crossing_midnight_into_weekend(self, business, service):
        # 02:00 UTC Friday is 22:00 EDT Thursday: not a weekend day.
        appt = datetime(2026, 3, 13, 2, 0, tzinfo=dt_timezone.utc)
        context = BookingContext(appointment_at=appt, booked_at=appt - timedelta(hours=48))
        assert calculate_price(business, service, context).price == Decimal('85')

    def test_lead_time_uses_elapsed_time_across_dst(self, business, service):
        # Clocks spring forward at 02:00 on 2026-03-08 (a Sunday):
        # 01:30 → 06:00 is 4.5h on the wall clock but 3.5h elapsed.
        context = BookingContext(
            appointment_at=datetime(2026, 3, 8, 6, 0),
            booked_at=datetime(2026, 3, 8, 1, 30),
        )
        result = calculate_price(business, service, context)
        assert codes(result) == ['weekend', 'last_minute']
        assert result.price == Decimal('108.375')

    def test_mixed_naive_and_aware_datetimes(self, business, service):
        appt = datetime(2026, 3, 11, 14, 0, tzinfo=dt_timezone.utc)  # 10:00 EDT
        context = BookingContext(appointment_at=appt, booked_at=datetime(2026, 3, 11, 7, 0))
        result = calculate_price(business, service, context)
        assert result.price == Decimal('72.25')


class TestHoursBetween:
    """Elapsed hours at millisecond precision."""

    def test_fractional_hours(self):
        assert hours_between(datetime(2026, 1, 1, 1, 30), datetime(2026, 1, 1)) == Decimal('1.5')

    def test_sub_millisecond_is_dropped(self):
        later = datetime(2026, 1, 1, 4, 0, 0, 999)
        assert hours_between(later, datetime(2026, 1, 1)) == Decimal('4')

    def test_milliseconds_count(self):
        later = datetime(2026, 1, 1, 4, 0, 0, 1000)
        assert hours_between(later, datetime(2026, 1, 1)) > Decimal('4')


class TestPricingService:
    """PricingService wraps calculate_price for one business/service."""

    def test_quote_is_idempotent(self, business, service):
        pricing = PricingService(business, service)
        context = BookingContext(
            appointment_at=SATURDAY_1PM,
            booked_at=SATURDAY_1PM - timedelta(hours=48),
        )
        assert pricing.quote(context) == pricing.quote(context)

    def test_quote_for_keyword_arguments(self, business, service):
        pricing = PricingService(business, service)
        result = pricing.quote_for(
            appointment_at=WEDNESDAY_10AM,
            booked_at=WEDNESDAY_10AM - timedelta(hours=48),
            was_cancelled=True,
            cancelled_at=WEDNESDAY_10AM - timedelta(hours=20),
        )
        assert result.price == Decimal('76.5')

    def test_quote_logs_outcome(self, business, service, caplog):
        pricing = PricingService(business, service)
        with caplog.at_level(logging.DEBUG, logger='pricing.services.pricing_service'):
            pricing.quote_for(appointment_at=WEDNESDAY_10AM)
        assert "Quote rejected: Missing required dates" in caplog.text

    def test_inputs_are_not_mutated(self, business, service):
        context = BookingContext(
            appointment_at=SATURDAY_1PM,
            booked_at=SATURDAY_1PM - timedelta(hours=1),
        )
        before = copy.deepcopy((business, service, context))
        calculate_price(business, service, context)
        assert (business, service, context) == before
        assert before[0] is not business

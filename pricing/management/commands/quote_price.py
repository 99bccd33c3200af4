"""
Management command to quote a price for one booking.

Usage:
    python manage.py quote_price --appointment 2026-03-14T13:00 --booked 2026-03-12T13:00
    python manage.py quote_price --appointment 2026-03-11T10:00 --booked 2026-03-09T10:00 \
        --was-cancelled --cancelled-at 2026-03-10T14:00
    python manage.py quote_price --appointment ... --booked ... --json
"""

import json
import logging

from dateutil.parser import isoparse
from django.core.management.base import BaseCommand, CommandError

from pricing.conf import get_business, get_service
from pricing.rules import BookingContext
from pricing.services import PricingService
from pricing.templatetags.pricing_filters import currency

logger = logging.getLogger(__name__)


def _parse_timestamp(value, option):
    if not value:
        return None
    try:
        return isoparse(value)
    except ValueError as e:
        raise CommandError(f"Invalid timestamp for {option}: {value!r}") from e


class Command(BaseCommand):
    help = 'Quote the configured service price for a booking'

    def add_arguments(self, parser):
        parser.add_argument(
            '--appointment',
            type=str,
            help='Appointment date/time (ISO 8601)'
        )
        parser.add_argument(
            '--booked',
            type=str,
            help='Booking date/time (ISO 8601)'
        )
        parser.add_argument(
            '--was-cancelled',
            action='store_true',
            help='The appointment was previously cancelled'
        )
        parser.add_argument(
            '--cancelled-at',
            type=str,
            help='Cancellation date/time (ISO 8601)'
        )
        parser.add_argument(
            '--json',
            action='store_true',
            help='Print the full result as JSON'
        )

    def handle(self, *args, **options):
        context = BookingContext(
            appointment_at=_parse_timestamp(options['appointment'], '--appointment'),
            booked_at=_parse_timestamp(options['booked'], '--booked'),
            was_cancelled=options['was_cancelled'],
            cancelled_at=_parse_timestamp(options['cancelled_at'], '--cancelled-at'),
        )

        service = PricingService(get_business(), get_service())
        result = service.quote(context)

        if options['json']:
            self.stdout.write(json.dumps(result.as_dict(), indent=2))

        if not result.success:
            logger.info("quote_price rejected input: %s", result.error)
            raise CommandError(result.error)

        if options['json']:
            return

        self.stdout.write(f"{service.service.name}: {currency(result.price)}")
        if options['verbosity'] > 1:
            for adj in result.adjustments:
                factor = f" x{adj.factor}" if adj.factor is not None else ''
                self.stdout.write(f"  {adj.code}{factor} -> {adj.price_after}")

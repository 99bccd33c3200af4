"""Pricing forms."""

import datetime

from django import forms
from django.forms.fields import BaseTemporalField
from django.utils.translation import gettext_lazy as _

from pricing.rules import BookingContext

DATETIME_LOCAL_FORMATS = [
    '%Y-%m-%dT%H:%M',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%d %H:%M',
    '%Y-%m-%d %H:%M:%S',
]


class DateTimeLocalInput(forms.DateTimeInput):
    input_type = 'datetime-local'

    def __init__(self, attrs=None):
        super().__init__(attrs=attrs, format='%Y-%m-%dT%H:%M')


class WallClockDateTimeField(forms.DateTimeField):
    """
    DateTimeField that keeps the entered wall time naive.

    The pricing service reads naive times in the business timezone, so
    times skipped or repeated by a DST change still get a quote.
    """

    def to_python(self, value):
        if value in self.empty_values:
            return None
        if isinstance(value, datetime.datetime):
            return value
        if isinstance(value, datetime.date):
            return datetime.datetime(value.year, value.month, value.day)
        return BaseTemporalField.to_python(self, value)


class PriceQuoteForm(forms.Form):
    """
    Booking facts for a price quote.

    Dates are optional here: presence and ordering are checked by the
    pricing service so the quote reports them as pricing errors.
    """

    appointment_at = WallClockDateTimeField(
        label=_('Date/Time of Appointment'),
        required=False,
        input_formats=DATETIME_LOCAL_FORMATS,
        widget=DateTimeLocalInput(),
    )
    booked_at = WallClockDateTimeField(
        label=_('Date/Time of Booking'),
        required=False,
        input_formats=DATETIME_LOCAL_FORMATS,
        widget=DateTimeLocalInput(),
    )
    was_cancelled = forms.TypedChoiceField(
        label=_('Was Cancelled?'),
        choices=[('false', _('False')), ('true', _('True'))],
        coerce=lambda value: value == 'true',
        required=False,
        empty_value=False,
    )
    cancelled_at = WallClockDateTimeField(
        label=_('Cancellation Date/Time'),
        required=False,
        input_formats=DATETIME_LOCAL_FORMATS,
        widget=DateTimeLocalInput(),
    )

    def to_context(self) -> BookingContext:
        data = self.cleaned_data
        return BookingContext(
            appointment_at=data.get('appointment_at'),
            booked_at=data.get('booked_at'),
            was_cancelled=bool(data.get('was_cancelled')),
            cancelled_at=data.get('cancelled_at'),
        )

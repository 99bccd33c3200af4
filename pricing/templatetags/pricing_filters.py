"""
Custom template filters for pricing app.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django import template

register = template.Library()

CENTS = Decimal('0.01')


@register.filter
def currency(value):
    """
    Render a price with a dollar sign and two decimal places.

    Usage in template:
        {{ result.price|currency }}    → $72.25
    """
    if value is None or value == '':
        return ''
    try:
        amount = Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError):
        return ''
    return f"${amount}"


@register.filter
def price_error(result):
    """
    Render a failed PriceResult as an error line.

    Usage in template:
        {{ result|price_error }}    → Error: Missing required dates
    """
    if result is None or getattr(result, 'success', True):
        return ''
    return f"Error: {result.error}"

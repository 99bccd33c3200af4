"""Pricing URL patterns: Price calculator and quote AJAX."""

from django.urls import path
from pricing.views import (
    PriceCalculatorView,
    price_quote_ajax,
)

urlpatterns = [
    path('', PriceCalculatorView.as_view(), name='calculator'),

    # AJAX endpoints
    path('api/quote/', price_quote_ajax, name='price_quote_ajax'),
]

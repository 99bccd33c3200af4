"""Shared fixtures for pricing tests."""
import pytest

from pricing.conf import DEFAULT_BUSINESS, DEFAULT_SERVICE
from pricing.rules import Business, Service


@pytest.fixture
def business():
    """The sample salon: weekend Fri-Sun x1.5, peak 12-15 x1.15."""
    return Business.from_dict(DEFAULT_BUSINESS)


@pytest.fixture
def service():
    """Haircut & Style: base 85, range 65-110."""
    return Service.from_dict(DEFAULT_SERVICE)

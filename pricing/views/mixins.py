"""
View mixins: PricingConfigMixin.
"""

import logging

from pricing.conf import get_business, get_service
from pricing.services import PricingService

logger = logging.getLogger(__name__)


class PricingConfigMixin:
    """
    Mixin to resolve the configured business and service.

    Adds to context:
        - business: Business being quoted for
        - service: Service being quoted
    """

    def get_business(self):
        if not hasattr(self, '_business'):
            self._business = get_business()
        return self._business

    def get_service(self):
        if not hasattr(self, '_service'):
            self._service = get_service()
        return self._service

    def get_pricing_service(self):
        return PricingService(self.get_business(), self.get_service())

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['business'] = self.get_business()
        context['service'] = self.get_service()
        return context

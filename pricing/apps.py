from django.apps import AppConfig


class PricingConfig(AppConfig):
    name = 'pricing'
    verbose_name = 'Pricing Engine'

    def ready(self):
        """Fail fast on malformed pricing settings."""
        from pricing.conf import get_business, get_service
        get_business()
        get_service()

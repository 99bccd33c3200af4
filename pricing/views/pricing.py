"""
Pricing views: price calculator page and price quote AJAX endpoint.
"""

import logging

from django.http import JsonResponse
from django.views.decorators.http import require_GET
from django.views.generic import TemplateView

from pricing.conf import get_business, get_service
from pricing.forms import PriceQuoteForm
from pricing.services import PricingService
from pricing.templatetags.pricing_filters import currency

from .mixins import PricingConfigMixin

logger = logging.getLogger(__name__)


class PriceCalculatorView(PricingConfigMixin, TemplateView):
    """
    Dynamic price calculator.

    GET without parameters renders an empty form. Once any booking field
    is submitted the quote (or the reason it could not be priced) is
    rendered underneath.
    """
    template_name = 'pricing/calculator.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        result = None

        if self.request.GET:
            form = PriceQuoteForm(self.request.GET)
            if form.is_valid():
                result = self.get_pricing_service().quote(form.to_context())
                if not result.success:
                    logger.info("Price calculator rejected input: %s", result.error)
        else:
            form = PriceQuoteForm()

        context['form'] = form
        context['result'] = result
        return context


@require_GET
def price_quote_ajax(request):
    """
    AJAX endpoint returning a price quote as JSON.

    Query parameters mirror PriceQuoteForm:
        appointment_at, booked_at, was_cancelled, cancelled_at
    """
    try:
        business = get_business()
        service = get_service()

        form = PriceQuoteForm(request.GET)
        if not form.is_valid():
            return JsonResponse({
                'success': False,
                'error': 'Invalid input',
                'errors': form.errors.get_json_data(),
            }, status=400)

        result = PricingService(business, service).quote(form.to_context())
        data = result.as_dict()

        if not result.success:
            logger.info("Price quote rejected: %s", result.error)
            return JsonResponse(data, status=400)

        data['display'] = currency(result.price)
        return JsonResponse(data)

    except Exception as e:
        logger.exception("Price quote AJAX error")
        return JsonResponse({'success': False, 'error': str(e)}, status=500)

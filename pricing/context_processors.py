from .conf import get_business, get_service


def pricing_config(request):
    """
    Add the configured business and service to all templates.

    Available in templates:
        {{ pricing_business }} - Business whose rules are applied
        {{ pricing_service }} - Service being quoted
    """
    return {
        'pricing_business': get_business(),
        'pricing_service': get_service(),
    }

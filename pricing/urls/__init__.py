"""
URL configuration package.

The app_name stays 'pricing' for namespace.
"""

from .pricing import urlpatterns as pricing_urls

app_name = 'pricing'

urlpatterns = pricing_urls

"""
URL configuration for Pricing Engine project.
"""

from django.urls import path, include

urlpatterns = [
    path('', include('pricing.urls')),
]

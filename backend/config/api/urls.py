"""
API URL configuration.
"""
from django.urls import path

from .views import health_check
from .viewsets import LootViewSet

urlpatterns = [
    path('health/', health_check, name='health-check'),

    # Bot webhook (POST) and dashboard feed (GET)
    path('loot', LootViewSet.as_view({'get': 'list', 'post': 'create'}), name='loot'),
]

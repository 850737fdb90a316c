# ViewSets package
from .base import BaseViewSet
from .loot import LootViewSet

__all__ = [
    'BaseViewSet',
    'LootViewSet',
]

"""
Dashboard client: view state, background feeds and item metadata.
"""
from .state import DashboardState, CATEGORIES, QUALITY_LABELS, EXCLUDED_SUBSTRINGS
from .feed import LootFeedClient, LootPoller, LootSubscriber
from .item_metadata import ItemMetadataService, ItemDetails, item_image_slug
from .render import render_text

__all__ = [
    'DashboardState',
    'CATEGORIES',
    'QUALITY_LABELS',
    'EXCLUDED_SUBSTRINGS',
    'LootFeedClient',
    'LootPoller',
    'LootSubscriber',
    'ItemMetadataService',
    'ItemDetails',
    'item_image_slug',
    'render_text',
]

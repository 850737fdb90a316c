"""
Dashboard page.

Server-rendered feed grouped by character. The page reloads itself every
DASHBOARD_POLL_INTERVAL seconds; `category`, `page` and `item` live in
the query string so a reload keeps the current view.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from django.conf import settings
from django.shortcuts import render

from infrastructure.bootstrap import get_container
from services.dashboard import CATEGORIES, QUALITY_LABELS, DashboardState, ItemMetadataService
from services.queries import GetLootQuery
from utils.datetime import parse_timestamp

logger = logging.getLogger(__name__)

PREVIEW_STAT_LINES = 3


def _positive_int(raw, default: int = 1) -> int:
    try:
        return max(1, int(raw))
    except (TypeError, ValueError):
        return default


def _display_time(timestamp: str) -> Optional[datetime]:
    try:
        return parse_timestamp(timestamp)
    except (TypeError, ValueError):
        return None


def _card(entry: Dict[str, Any], query: Dict[str, Any]) -> Dict[str, Any]:
    stats = entry.get('stats') or []
    quality = entry.get('quality', 'normal')
    return {
        'entry': entry,
        'label': QUALITY_LABELS.get(quality, quality),
        'time': _display_time(entry.get('timestamp', '')),
        'preview_stats': stats[:PREVIEW_STAT_LINES],
        'more_stats': max(0, len(stats) - PREVIEW_STAT_LINES),
        'url': '?' + urlencode({**query, 'item': entry.get('id', '')}),
    }


def dashboard(request):
    container = get_container()
    state = DashboardState()

    category = request.GET.get('category', 'all')
    if category not in CATEGORIES:
        category = 'all'
    state.set_category(category)

    try:
        result = container.get(GetLootQuery).execute(
            limit=getattr(settings, 'LOOT_QUERY_MAX_LIMIT', 100),
            category=category,
        )
        state.replace(result.logs, totals=result.totals)
    except Exception:
        logger.exception("Dashboard could not load loot")
        state.mark_failed()

    page = _positive_int(request.GET.get('page'))
    while state.page < page and state.load_more():
        pass

    query = {'category': state.category, 'page': state.page}

    item_id = request.GET.get('item')
    if item_id:
        entry = state.find(item_id)
        if entry:
            metadata = container.get(ItemMetadataService)
            details = metadata.lookup(entry.get('itemId') or entry.get('itemName', ''))
            state.select(entry, details)

    selected = None
    if state.selected:
        metadata = container.get(ItemMetadataService)
        selected = {
            'entry': state.selected,
            'label': QUALITY_LABELS.get(state.selected.get('quality'), state.selected.get('quality')),
            'time': _display_time(state.selected.get('timestamp', '')),
            'details': state.item_details,
            'image_url': metadata.image_url(state.selected.get('itemName', ''), state.item_details)
            if state.item_details else None,
        }

    columns = [
        (character, [_card(entry, query) for entry in entries])
        for character, entries in state.grouped().items()
    ]

    context = {
        'stats': state.stats(),
        'categories': [
            {
                'value': value,
                'label': 'All Items' if value == 'all' else QUALITY_LABELS.get(value, value),
                'active': value == state.category,
                'url': '?' + urlencode({'category': value}),
            }
            for value in CATEGORIES
        ],
        'columns': columns,
        'loading': state.loading,
        'has_more': state.has_more,
        'more_url': '?' + urlencode({**query, 'page': state.page + 1}),
        'close_url': '?' + urlencode(query),
        'selected': selected,
        'last_update': state.last_update,
        'poll_interval': getattr(settings, 'DASHBOARD_POLL_INTERVAL', 5),
    }
    return render(request, 'dashboard.html', context)

"""
Get Loot Query - recent loot entries with dashboard totals.

GET /api/loot
"""
from typing import Optional, List, Dict, Any
from dataclasses import dataclass

from django.conf import settings

from .base import BaseQuery


@dataclass
class GetLootResult:
    """Result of getting loot entries."""
    logs: List[Dict[str, Any]]
    totals: Dict[str, int]


class GetLootQuery(BaseQuery[GetLootResult]):
    """
    Most recent entries, newest first.

    Filters only narrow `logs`; `totals` always cover every stored entry.
    """

    def execute(
        self,
        limit: Optional[int] = None,
        category: Optional[str] = None,
        character: Optional[str] = None,
    ) -> GetLootResult:
        max_limit = getattr(settings, 'LOOT_QUERY_MAX_LIMIT', 100)
        if limit is None:
            limit = getattr(settings, 'LOOT_QUERY_DEFAULT_LIMIT', 50)
        limit = max(1, min(limit, max_limit))

        # 'all' is what the dashboard sends for "no filter"
        quality = category if category and category != 'all' else None

        logs = self._loot_store.recent(limit, quality=quality, character=character or None)
        totals = self._loot_store.totals()

        return GetLootResult(logs=logs, totals=totals)

"""
Dashboard view state.

One DashboardState is owned by each dashboard (a page render or a
running watch_loot process). The poller replaces the list, the push
subscriber prepends single entries; both may run on their own thread.
"""
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from utils.loot import summarize

from .item_metadata import ItemDetails

CATEGORIES = ('all', 'unique', 'set', 'rare', 'magic', 'rune')

QUALITY_LABELS = {
    'unique': 'Unique',
    'set': 'Set',
    'rare': 'Rare',
    'magic': 'Magic',
    'rune': 'Rune',
    'normal': 'Normal',
}

# Junk drops hidden regardless of the selected category
EXCLUDED_SUBSTRINGS = ('potion', 'gold', 'key', 'scroll', 'arrows', 'bolts')

PAGE_SIZE = 24


def is_excluded(entry: Dict[str, Any]) -> bool:
    name = str(entry.get('itemName', '')).lower()
    return any(fragment in name for fragment in EXCLUDED_SUBSTRINGS)


@dataclass
class DashboardState:
    """
    Three independent axes: category filter, scroll position, modal.

    `page` counts how many pages are loaded (infinite scroll), so the
    visible slice always starts at the newest entry.
    """
    logs: List[Dict[str, Any]] = field(default_factory=list)
    category: str = 'all'
    page: int = 1
    page_size: int = PAGE_SIZE
    selected: Optional[Dict[str, Any]] = None
    item_details: Optional[ItemDetails] = None
    loading: bool = True
    last_update: Optional[datetime] = None
    totals: Optional[Dict[str, int]] = None
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def replace(
        self,
        logs: List[Dict[str, Any]],
        totals: Optional[Dict[str, int]] = None,
        now: Optional[datetime] = None
    ) -> None:
        """Poll result: the fetched list replaces everything loaded so far."""
        with self._lock:
            self.logs = list(logs)
            self.totals = dict(totals) if totals is not None else None
            self.loading = False
            self.last_update = now or datetime.now(tz=timezone.utc)

    def mark_failed(self) -> None:
        """A fetch failed: stop showing the loading state, keep the old list."""
        with self._lock:
            self.loading = False

    def append(self, entry: Dict[str, Any], now: Optional[datetime] = None) -> bool:
        """
        Push notification: prepend one entry.

        Returns:
            False if an entry with the same id is already loaded
        """
        with self._lock:
            if any(existing.get('id') == entry.get('id') for existing in self.logs):
                return False
            self.logs.insert(0, dict(entry))
            if self.totals is not None:
                for key, count in summarize([entry]).items():
                    self.totals[key] = self.totals.get(key, 0) + count
            self.last_update = now or datetime.now(tz=timezone.utc)
            return True

    def set_category(self, category: str) -> None:
        if category not in CATEGORIES:
            raise ValueError(f"Unknown category: {category}")
        with self._lock:
            if category != self.category:
                self.category = category
                self.page = 1

    def load_more(self) -> bool:
        """Advance the scroll position. Returns False when nothing is left."""
        with self._lock:
            if not self.has_more:
                return False
            self.page += 1
            return True

    def visible(self) -> List[Dict[str, Any]]:
        """Entries after the exclusion list and the category filter."""
        with self._lock:
            return [
                entry for entry in self.logs
                if not is_excluded(entry)
                and (self.category == 'all' or entry.get('quality') == self.category)
            ]

    def page_entries(self) -> List[Dict[str, Any]]:
        with self._lock:
            return self.visible()[:self.page * self.page_size]

    @property
    def has_more(self) -> bool:
        with self._lock:
            return len(self.visible()) > self.page * self.page_size

    def grouped(self) -> 'OrderedDict[str, List[Dict[str, Any]]]':
        """Loaded page bucketed by character, columns in first-seen order."""
        columns: 'OrderedDict[str, List[Dict[str, Any]]]' = OrderedDict()
        for entry in self.page_entries():
            columns.setdefault(entry.get('character') or 'Unknown', []).append(entry)
        return columns

    def stats(self) -> Dict[str, int]:
        """Server totals when known, otherwise counts over the loaded list."""
        with self._lock:
            if self.totals is not None:
                return dict(self.totals)
            return summarize(self.logs)

    def select(self, entry: Dict[str, Any], details: Optional[ItemDetails] = None) -> None:
        with self._lock:
            self.selected = entry
            self.item_details = details

    def close(self) -> None:
        with self._lock:
            self.selected = None
            self.item_details = None

    def find(self, entry_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            for entry in self.logs:
                if entry.get('id') == entry_id:
                    return entry
        return None

"""
Loot storage abstraction.

Two persistent layouts are supported:
- Redis: one key per entry with a TTL plus a sorted-set timeline
- Database: one row per entry (apps.loot.models.LootEntry)

Entries are append-only. Nothing here updates or deletes an entry;
Redis expiry is the only way an entry disappears.
"""
from abc import ABC, abstractmethod
from itertools import islice
from typing import Any, Dict, Iterator, List, Optional
import json
import logging
import threading

from utils.datetime import parse_timestamp, to_epoch_ms
from utils.loot import fingerprint, matches_filters, summarize

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_SECONDS = 60 * 60 * 24 * 7


class LootStore(ABC):
    """Abstract loot storage interface."""

    @abstractmethod
    def find_duplicate(self, timestamp: str, item_name: str, character: str) -> Optional[str]:
        """Return the id of an entry with the same timestamp, item and character."""
        pass

    @abstractmethod
    def save(self, entry: Dict[str, Any]) -> None:
        """Persist a new entry."""
        pass

    @abstractmethod
    def recent(
        self,
        limit: int,
        quality: Optional[str] = None,
        character: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Most recent matching entries, newest first."""
        pass

    @abstractmethod
    def totals(self) -> Dict[str, int]:
        """Counts over every stored entry (total, uniques, sets, runes)."""
        pass

    def ping(self) -> None:
        """Raise if the backing service is unreachable."""
        pass


class RedisLootStore(LootStore):
    """
    Redis implementation.

    Layout:
        loot:<id>                  JSON entry, expires after retention
        loot:fingerprint:<sha1>    id of the entry, same expiry
        loot:timeline              sorted set of entry keys scored by timestamp (ms)
        loot:live                  sorted set of entry keys scored by expiry (ms, Redis clock)
        loot:live:<quality>        same, for unique, set and rune entries only

    Timeline members whose entry already expired are dropped while reading.
    The live sets drop theirs by score before counting, so totals never
    read the entries themselves.
    """

    TIMELINE_KEY = 'loot:timeline'
    LIVE_KEY = 'loot:live'
    COUNTED_QUALITIES = {'unique': 'uniques', 'set': 'sets', 'rune': 'runes'}
    SCAN_BATCH = 200

    def __init__(self, redis_url: str, retention_seconds: int = DEFAULT_RETENTION_SECONDS, client=None):
        if client is None:
            import redis
            client = redis.from_url(redis_url, decode_responses=True)
        self._client = client
        self._retention = retention_seconds

    @staticmethod
    def _entry_key(entry_id: str) -> str:
        return f"loot:{entry_id}"

    @staticmethod
    def _fingerprint_key(timestamp: str, item_name: str, character: str) -> str:
        return f"loot:fingerprint:{fingerprint(timestamp, item_name, character)}"

    def _expiry(self) -> Optional[int]:
        return self._retention if self._retention > 0 else None

    def _now_ms(self) -> int:
        seconds, microseconds = self._client.time()
        return int(seconds) * 1000 + int(microseconds) // 1000

    def _expires_at_ms(self) -> float:
        if self._retention <= 0:
            return float('inf')
        return self._now_ms() + self._retention * 1000

    def _live_keys(self) -> Dict[str, str]:
        keys = {'total': self.LIVE_KEY}
        for quality, name in self.COUNTED_QUALITIES.items():
            keys[name] = f"{self.LIVE_KEY}:{quality}"
        return keys

    def find_duplicate(self, timestamp: str, item_name: str, character: str) -> Optional[str]:
        entry_id = self._client.get(self._fingerprint_key(timestamp, item_name, character))
        if entry_id and self._client.exists(self._entry_key(entry_id)):
            return entry_id
        return None

    def save(self, entry: Dict[str, Any]) -> None:
        key = self._entry_key(entry['id'])
        score = to_epoch_ms(parse_timestamp(entry['timestamp']))

        self._client.set(key, json.dumps(entry, ensure_ascii=False), ex=self._expiry())
        self._client.set(
            self._fingerprint_key(entry['timestamp'], entry['itemName'], entry['character']),
            entry['id'],
            ex=self._expiry()
        )
        self._client.zadd(self.TIMELINE_KEY, {key: score})

        expires_at = self._expires_at_ms()
        self._client.zadd(self.LIVE_KEY, {key: expires_at})
        if entry['quality'] in self.COUNTED_QUALITIES:
            self._client.zadd(f"{self.LIVE_KEY}:{entry['quality']}", {key: expires_at})

    def _iter_newest(self) -> Iterator[Dict[str, Any]]:
        """Walk the timeline newest first, pruning members that expired."""
        start = 0
        while True:
            keys = self._client.zrevrange(self.TIMELINE_KEY, start, start + self.SCAN_BATCH - 1)
            if not keys:
                return

            values = self._client.mget(keys)
            expired = [key for key, value in zip(keys, values) if value is None]
            if expired:
                self._client.zrem(self.TIMELINE_KEY, *expired)
                logger.debug(f"Pruned {len(expired)} expired loot keys from timeline")

            for value in values:
                if value is not None:
                    yield json.loads(value)

            if len(keys) < self.SCAN_BATCH:
                return
            start += len(keys) - len(expired)

    def recent(
        self,
        limit: int,
        quality: Optional[str] = None,
        character: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        matching = (e for e in self._iter_newest() if matches_filters(e, quality, character))
        return list(islice(matching, limit))

    def totals(self) -> Dict[str, int]:
        now = self._now_ms()
        counts = {}
        for name, key in self._live_keys().items():
            self._client.zremrangebyscore(key, '-inf', now)
            counts[name] = self._client.zcard(key)
        return counts

    def ping(self) -> None:
        self._client.ping()


class DatabaseLootStore(LootStore):
    """Relational implementation backed by the Django ORM."""

    def find_duplicate(self, timestamp: str, item_name: str, character: str) -> Optional[str]:
        from apps.loot.models import LootEntry

        return (
            LootEntry.objects
            .filter(timestamp=parse_timestamp(timestamp), item_name=item_name, character=character)
            .values_list('id', flat=True)
            .first()
        )

    def save(self, entry: Dict[str, Any]) -> None:
        from apps.loot.models import LootEntry

        LootEntry.from_entry(entry).save(force_insert=True)

    def recent(
        self,
        limit: int,
        quality: Optional[str] = None,
        character: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        from apps.loot.models import LootEntry

        queryset = LootEntry.objects.all()
        if quality:
            queryset = queryset.filter(quality=quality)
        if character:
            queryset = queryset.filter(character=character)

        return [row.to_entry() for row in queryset.order_by('-timestamp', '-created_at')[:limit]]

    def totals(self) -> Dict[str, int]:
        from apps.loot.models import LootEntry
        from django.db.models import Count, Q

        return LootEntry.objects.aggregate(
            total=Count('id'),
            uniques=Count('id', filter=Q(quality='unique')),
            sets=Count('id', filter=Q(quality='set')),
            runes=Count('id', filter=Q(quality='rune')),
        )

    def ping(self) -> None:
        from django.db import connection

        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')


class FakeLootStore(LootStore):
    """
    In-memory store for testing.
    Keeps insertion order; reads sort by timestamp like the real stores.
    """

    def __init__(self):
        self._entries: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def find_duplicate(self, timestamp: str, item_name: str, character: str) -> Optional[str]:
        with self._lock:
            for entry in self._entries:
                if (entry['timestamp'], entry['itemName'], entry['character']) == (timestamp, item_name, character):
                    return entry['id']
        return None

    def save(self, entry: Dict[str, Any]) -> None:
        with self._lock:
            self._entries.append(dict(entry))

    def _newest_first(self) -> List[Dict[str, Any]]:
        with self._lock:
            indexed = list(enumerate(self._entries))
        indexed.sort(key=lambda pair: (pair[1]['timestamp'], pair[0]), reverse=True)
        return [dict(entry) for _, entry in indexed]

    def recent(
        self,
        limit: int,
        quality: Optional[str] = None,
        character: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        matching = [e for e in self._newest_first() if matches_filters(e, quality, character)]
        return matching[:limit]

    def totals(self) -> Dict[str, int]:
        return summarize(self._newest_first())

    @property
    def entries(self) -> List[Dict[str, Any]]:
        """All stored entries in insertion order."""
        with self._lock:
            return [dict(e) for e in self._entries]

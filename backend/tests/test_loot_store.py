"""
Tests for the loot storage backends.
"""
import json

import pytest

from infrastructure.loot_store import DatabaseLootStore, FakeLootStore, RedisLootStore


class InMemoryRedis:
    """Just enough of the redis client API for RedisLootStore, with a manual clock."""

    def __init__(self):
        self.now = 1705320000.0
        self.values = {}
        self.expiries = {}
        self.deadlines = {}
        self.zsets = {}
        self.reads = 0

    def _alive(self, key):
        deadline = self.deadlines.get(key)
        if deadline is not None and self.now >= deadline:
            self.values.pop(key, None)
        return key in self.values

    def time(self):
        return int(self.now), int(round((self.now % 1) * 1_000_000))

    def advance(self, seconds):
        self.now += seconds

    def get(self, key):
        return self.values.get(key) if self._alive(key) else None

    def set(self, key, value, ex=None):
        self.values[key] = value
        self.expiries[key] = ex
        self.deadlines[key] = self.now + ex if ex else None

    def exists(self, key):
        return int(self._alive(key))

    def mget(self, keys):
        self.reads += 1
        return [self.get(key) for key in keys]

    def zadd(self, name, mapping):
        self.zsets.setdefault(name, {}).update(mapping)

    def zrevrange(self, name, start, end):
        members = sorted(self.zsets.get(name, {}).items(), key=lambda item: item[1], reverse=True)
        return [member for member, _ in members[start:end + 1]]

    def zrem(self, name, *members):
        for member in members:
            self.zsets.get(name, {}).pop(member, None)

    def zremrangebyscore(self, name, min, max):
        low = float(min)
        zset = self.zsets.get(name, {})
        for member, score in list(zset.items()):
            if low <= score <= float(max):
                del zset[member]

    def zcard(self, name):
        return len(self.zsets.get(name, {}))

    def ping(self):
        return True

    def expire_now(self, key):
        self.values.pop(key, None)


@pytest.fixture
def redis_client():
    return InMemoryRedis()


@pytest.fixture
def redis_store(redis_client):
    return RedisLootStore('redis://unused', retention_seconds=3600, client=redis_client)


@pytest.fixture(params=['fake', 'redis', 'database'])
def store(request, redis_client):
    if request.param == 'fake':
        return FakeLootStore()
    if request.param == 'redis':
        return RedisLootStore('redis://unused', client=redis_client)
    request.getfixturevalue('db')
    return DatabaseLootStore()


class TestLootStoreContract:
    """Behaviour shared by every backend."""

    def test_save_and_recent(self, store, entry_factory):
        entry = entry_factory('1-a', '2024-01-15T12:00:00.000Z', quality='unique', item_name='Shako',
                              stats=['+2 To All Skills'], level=85, characterClass='Sorceress')
        store.save(entry)

        assert store.recent(10) == [entry]

    def test_recent_is_newest_first_and_limited(self, store, entry_factory):
        store.save(entry_factory('1-a', '2024-01-15T10:00:00.000Z'))
        store.save(entry_factory('2-b', '2024-01-15T12:00:00.000Z'))
        store.save(entry_factory('3-c', '2024-01-15T11:00:00.000Z'))

        assert [e['id'] for e in store.recent(2)] == ['2-b', '3-c']

    def test_recent_filters(self, store, entry_factory):
        store.save(entry_factory('1-a', '2024-01-15T10:00:00.000Z', quality='rune', character='Bob'))
        store.save(entry_factory('2-b', '2024-01-15T11:00:00.000Z', quality='rune', character='Alice'))
        store.save(entry_factory('3-c', '2024-01-15T12:00:00.000Z', quality='magic', character='Alice'))

        assert [e['id'] for e in store.recent(10, quality='rune')] == ['2-b', '1-a']
        assert [e['id'] for e in store.recent(10, character='Alice')] == ['3-c', '2-b']
        assert [e['id'] for e in store.recent(10, quality='rune', character='Alice')] == ['2-b']
        assert store.recent(10, quality='set') == []

    def test_find_duplicate(self, store, entry_factory):
        store.save(entry_factory('1-a', '2024-01-15T10:00:00.000Z', item_name='Shako', character='Bob'))

        assert store.find_duplicate('2024-01-15T10:00:00.000Z', 'Shako', 'Bob') == '1-a'
        assert store.find_duplicate('2024-01-15T10:00:00.000Z', 'Shako', 'Alice') is None
        assert store.find_duplicate('2024-01-15T10:00:01.000Z', 'Shako', 'Bob') is None
        assert store.find_duplicate('2024-01-15T10:00:00.000Z', 'Arachnid Mesh', 'Bob') is None

    def test_totals(self, store, entry_factory):
        qualities = ['unique', 'unique', 'set', 'rune', 'rare', 'normal']
        for i, quality in enumerate(qualities):
            store.save(entry_factory(f'{i}-x', f'2024-01-15T10:00:0{i}.000Z', quality=quality))

        assert store.totals() == {'total': 6, 'uniques': 2, 'sets': 1, 'runes': 1}

    def test_ping(self, store):
        store.ping()


class TestRedisLootStore:

    def test_keys_expire_after_retention(self, redis_store, redis_client, entry_factory):
        redis_store.save(entry_factory('1-a', '2024-01-15T10:00:00.000Z'))

        assert json.loads(redis_client.values['loot:1-a'])['id'] == '1-a'
        assert redis_client.expiries['loot:1-a'] == 3600
        fingerprint_keys = [k for k in redis_client.values if k.startswith('loot:fingerprint:')]
        assert len(fingerprint_keys) == 1
        assert redis_client.expiries[fingerprint_keys[0]] == 3600
        assert redis_client.zsets['loot:timeline'] == {'loot:1-a': 1705312800000}

    def test_zero_retention_keeps_forever(self, redis_client, entry_factory):
        store = RedisLootStore('redis://unused', retention_seconds=0, client=redis_client)
        store.save(entry_factory('1-a', '2024-01-15T10:00:00.000Z'))
        assert redis_client.expiries['loot:1-a'] is None

    def test_expired_entries_are_pruned(self, redis_store, redis_client, entry_factory):
        redis_store.save(entry_factory('1-a', '2024-01-15T10:00:00.000Z', quality='unique'))
        redis_client.advance(1800)
        redis_store.save(entry_factory('2-b', '2024-01-15T11:00:00.000Z', quality='unique'))
        redis_client.advance(1800)

        assert [e['id'] for e in redis_store.recent(10)] == ['2-b']
        assert redis_store.totals() == {'total': 1, 'uniques': 1, 'sets': 0, 'runes': 0}
        assert 'loot:1-a' not in redis_client.zsets['loot:timeline']

    def test_duplicate_of_expired_entry_is_not_reported(self, redis_store, redis_client, entry_factory):
        redis_store.save(entry_factory('1-a', '2024-01-15T10:00:00.000Z', item_name='Shako'))
        redis_client.expire_now('loot:1-a')

        assert redis_store.find_duplicate('2024-01-15T10:00:00.000Z', 'Shako', 'Bob') is None

    def test_recent_reads_past_first_batch(self, redis_client, entry_factory):
        store = RedisLootStore('redis://unused', client=redis_client)
        store.SCAN_BATCH = 3
        for i in range(8):
            store.save(entry_factory(f'{i}-x', f'2024-01-15T10:00:0{i}.000Z', quality='rune' if i < 2 else 'normal'))
        redis_client.expire_now('loot:6-x')

        runes = store.recent(10, quality='rune')

        assert [e['id'] for e in runes] == ['1-x', '0-x']
        assert len(store.recent(10)) == 7
        assert 'loot:6-x' not in redis_client.zsets['loot:timeline']

    def test_totals_do_not_read_entries(self, redis_store, redis_client, entry_factory):
        for i, quality in enumerate(['unique', 'set', 'rune', 'rune', 'magic']):
            redis_store.save(entry_factory(f'{i}-x', f'2024-01-15T10:00:0{i}.000Z', quality=quality))

        assert redis_store.totals() == {'total': 5, 'uniques': 1, 'sets': 1, 'runes': 2}
        assert redis_client.reads == 0

    def test_totals_drop_expired_entries(self, redis_store, redis_client, entry_factory):
        redis_store.save(entry_factory('1-a', '2024-01-15T10:00:00.000Z', quality='rune'))
        redis_client.advance(600)
        redis_store.save(entry_factory('2-b', '2024-01-15T10:10:00.000Z', quality='set'))

        assert redis_client.zsets['loot:live:rune'] == {'loot:1-a': 1705323600000}
        redis_client.advance(3000)

        assert redis_store.totals() == {'total': 1, 'uniques': 0, 'sets': 1, 'runes': 0}
        assert redis_client.zsets['loot:live:rune'] == {}

    def test_zero_retention_totals_never_expire(self, redis_client, entry_factory):
        store = RedisLootStore('redis://unused', retention_seconds=0, client=redis_client)
        store.save(entry_factory('1-a', '2024-01-15T10:00:00.000Z', quality='unique'))
        redis_client.advance(60 * 60 * 24 * 365)

        assert store.totals() == {'total': 1, 'uniques': 1, 'sets': 0, 'runes': 0}


@pytest.mark.django_db
class TestDatabaseLootStore:

    def test_round_trips_wire_format(self, entry_factory):
        from apps.loot.models import LootEntry

        store = DatabaseLootStore()
        entry = entry_factory('1-a', '2024-01-15T10:00:00.123Z', quality='set', droppedBy='Mephisto',
                              stats=['+1 To All Skills', 'Socketed (2)'])
        store.save(entry)

        row = LootEntry.objects.get(pk='1-a')
        assert row.item_name == 'Item'
        assert row.dropped_by == 'Mephisto'
        assert row.to_entry() == entry

"""
Tests for the server-rendered dashboard page.
"""
import httpx
import pytest

from infrastructure.cache import FakeCache
from services.dashboard import ItemMetadataService

HARLEQUIN_CREST = {
    'id': 'harlequin-crest',
    'name': 'Harlequin Crest',
    'image': '/images/harlequin-crest.png',
    'properties': {'magical_properties': ['Damage Reduced By 10%']},
}


@pytest.fixture
def metadata_calls(container):
    """Serve item metadata from memory instead of the public API."""
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=[HARLEQUIN_CREST])

    container.register_factory(
        ItemMetadataService,
        lambda c: ItemMetadataService(
            api_url='http://items.test/api/items',
            image_base_url='http://items.test',
            transport=httpx.MockTransport(handler),
        )
    )
    return calls


@pytest.fixture
def seeded(loot_store, entry_factory):
    loot_store.save(entry_factory('1-a', '2024-01-15T10:00:00.000Z', quality='unique', character='Bob',
                                  item_name='Shako', itemId='harlequin-crest',
                                  stats=['+2 To All Skills', 'a', 'b', 'c', 'd']))
    loot_store.save(entry_factory('2-b', '2024-01-15T11:00:00.000Z', quality='set', character='Alice',
                                  item_name='Sigon\'s Visor'))
    loot_store.save(entry_factory('3-c', '2024-01-15T12:00:00.000Z', quality='normal', character='Bob',
                                  item_name='Super Healing Potion'))
    return loot_store


@pytest.mark.django_db
class TestDashboardPage:

    def test_empty(self, api_client):
        response = api_client.get('/')

        assert response.status_code == 200
        assert b'No loot yet!' in response.content

    def test_columns_by_character(self, api_client, seeded):
        response = api_client.get('/')

        columns = response.context['columns']
        assert [character for character, _ in columns] == ['Alice', 'Bob']
        bob_cards = dict(columns)['Bob']
        assert [card['entry']['id'] for card in bob_cards] == ['1-a']
        assert bob_cards[0]['preview_stats'] == ['+2 To All Skills', 'a', 'b']
        assert bob_cards[0]['more_stats'] == 2
        assert b'Super Healing Potion' not in response.content

    def test_stats_cover_everything(self, api_client, seeded):
        response = api_client.get('/', {'category': 'set'})

        assert response.context['stats'] == {'total': 3, 'uniques': 1, 'sets': 1, 'runes': 0}
        assert [character for character, _ in response.context['columns']] == ['Alice']

    def test_unknown_category_falls_back_to_all(self, api_client, seeded):
        response = api_client.get('/', {'category': 'legendary'})
        active = [c['value'] for c in response.context['categories'] if c['active']]
        assert active == ['all']

    def test_item_overlay(self, api_client, seeded, metadata_calls):
        response = api_client.get('/', {'item': '1-a'})

        selected = response.context['selected']
        assert selected['entry']['id'] == '1-a'
        assert selected['details'].name == 'Harlequin Crest'
        assert selected['image_url'] == 'http://items.test/images/harlequin-crest.png'
        assert b'Damage Reduced By 10%' in response.content
        assert len(metadata_calls) == 1

    def test_item_overlay_without_metadata(self, api_client, seeded, metadata_calls):
        response = api_client.get('/', {'item': '2-b'})

        selected = response.context['selected']
        assert selected['details'] is None
        assert selected['image_url'] is None

    def test_item_overlay_with_cache_down(self, api_client, seeded, container):
        class DownCache(FakeCache):
            def get(self, key):
                raise ConnectionError('redis down')

        container.register_factory(
            ItemMetadataService,
            lambda c: ItemMetadataService(cache=DownCache(), api_url='http://items.test/api/items'),
        )

        response = api_client.get('/', {'item': '1-a'})

        assert response.status_code == 200
        selected = response.context['selected']
        assert selected['entry']['id'] == '1-a'
        assert selected['details'] is None

    def test_unknown_item_has_no_overlay(self, api_client, seeded, metadata_calls):
        response = api_client.get('/', {'item': 'nope'})
        assert response.context['selected'] is None
        assert metadata_calls == []

    def test_load_more(self, api_client, loot_store, entry_factory):
        for i in range(30):
            loot_store.save(entry_factory(f'{i}-x', f'2024-01-15T12:00:{i:02d}.000Z', quality='rare'))

        first = api_client.get('/')
        assert first.context['has_more'] is True
        assert sum(len(cards) for _, cards in first.context['columns']) == 24

        second = api_client.get('/', {'page': '2'})
        assert second.context['has_more'] is False
        assert sum(len(cards) for _, cards in second.context['columns']) == 30

    def test_storage_failure_still_renders(self, api_client, loot_store, monkeypatch):
        def broken_recent(*args, **kwargs):
            raise ConnectionError('storage down')

        monkeypatch.setattr(loot_store, 'recent', broken_recent)

        response = api_client.get('/')

        assert response.status_code == 200
        assert response.context['loading'] is False

"""
Pytest configuration and fixtures for Loot Logger tests.
"""
import os
import pytest
from django.test import Client

# Use fakes for testing
os.environ.setdefault('USE_FAKES', 'true')


@pytest.fixture(autouse=True)
def reset_container():
    """Reset DI container before each test."""
    from infrastructure.bootstrap import Container
    Container.reset()
    yield
    Container.reset()


@pytest.fixture
def api_client():
    """Django test client for API requests."""
    return Client()


@pytest.fixture
def container():
    """The global container (fake infrastructure in tests)."""
    from infrastructure.bootstrap import get_container
    return get_container()


@pytest.fixture
def loot_store(container):
    """In-memory loot store used by the API."""
    from infrastructure.loot_store import LootStore
    return container.get(LootStore)


@pytest.fixture
def event_bus(container):
    """In-memory event bus used by the API."""
    from infrastructure.event_bus import EventBus
    return container.get(EventBus)


@pytest.fixture
def clock(container):
    """Fake clock, starts at 2024-01-15 12:00 UTC."""
    from infrastructure.clock import Clock
    return container.get(Clock)


@pytest.fixture
def loot_payload():
    """A unique drop as the bot sends it."""
    return {
        'timestamp': '2024-01-15T12:00:00.000Z',
        'character': 'Bob',
        'characterClass': 'Sorceress',
        'level': 85,
        'difficulty': 'Hell',
        'itemName': 'Shako',
        'itemId': 'harlequin-crest',
        'quality': 'unique',
        'location': 'Travincal',
        'droppedBy': 'Council Member',
        'stats': ['+2 To All Skills', '+141 To Life'],
    }


def make_entry(entry_id: str, timestamp: str, quality: str = 'normal', character: str = 'Bob',
               item_name: str = 'Item', **overrides) -> dict:
    """Wire-format entry for seeding stores and dashboard state."""
    entry = {
        'id': entry_id,
        'timestamp': timestamp,
        'character': character,
        'characterClass': '',
        'level': None,
        'difficulty': '',
        'itemName': item_name,
        'itemId': '',
        'quality': quality,
        'location': 'Unknown',
        'droppedBy': '',
        'stats': [],
    }
    entry.update(overrides)
    return entry


@pytest.fixture
def entry_factory():
    """Factory for wire-format entries."""
    return make_entry

"""
Tests for the watch_loot management command.
"""
from io import StringIO

import httpx
import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from services.dashboard import LootFeedClient


def patch_client(monkeypatch, handler):
    def make_client(base_url):
        return LootFeedClient(base_url, transport=httpx.MockTransport(handler))

    monkeypatch.setattr('apps.loot.management.commands.watch_loot.LootFeedClient', make_client)


def test_once_prints_grouped_feed(monkeypatch, entry_factory):
    entries = [
        entry_factory('1-a', '2024-01-15T12:00:00.000Z', quality='unique', item_name='Shako', character='Bob'),
        entry_factory('2-b', '2024-01-15T11:00:00.000Z', quality='rune', item_name='Ber Rune', character='Alice'),
    ]
    patch_client(monkeypatch, lambda request: httpx.Response(200, json={
        'logs': entries,
        'totals': {'total': 2, 'uniques': 1, 'sets': 0, 'runes': 1},
    }))
    out = StringIO()

    call_command('watch_loot', '--once', stdout=out)

    text = out.getvalue()
    assert 'Total 2  Uniques 1  Sets 0  Runes 1' in text
    assert '== Bob (1)' in text
    assert '[Rune] Ber Rune' in text


def test_once_fails_when_api_is_down(monkeypatch):
    def refuse(request):
        raise httpx.ConnectError('refused', request=request)

    patch_client(monkeypatch, refuse)

    with pytest.raises(CommandError):
        call_command('watch_loot', '--once', stdout=StringIO())

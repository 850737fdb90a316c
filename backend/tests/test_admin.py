"""
Tests for the read-only loot admin.
"""
import pytest
from django.contrib import admin

from apps.loot.admin import LootEntryAdmin
from apps.loot.models import LootEntry


@pytest.fixture
def model_admin():
    return LootEntryAdmin(LootEntry, admin.site)


@pytest.fixture
def superuser_request(rf, admin_user):
    request = rf.get('/admin/loot/lootentry/')
    request.user = admin_user
    return request


@pytest.mark.django_db
class TestLootEntryAdmin:

    def test_entries_cannot_be_added_changed_or_deleted(self, model_admin, superuser_request, entry_factory):
        entry = LootEntry.from_entry(entry_factory('1-a', '2024-01-15T10:00:00.000Z'))
        entry.save()

        assert model_admin.has_add_permission(superuser_request) is False
        assert model_admin.has_change_permission(superuser_request, entry) is False
        assert model_admin.has_delete_permission(superuser_request, entry) is False

    def test_no_bulk_delete_action(self, model_admin, superuser_request):
        assert 'delete_selected' not in model_admin.get_actions(superuser_request)

    def test_changelist_is_viewable(self, admin_client, entry_factory):
        LootEntry.from_entry(entry_factory('1-a', '2024-01-15T10:00:00.000Z', item_name='Shako')).save()

        response = admin_client.get('/admin/loot/lootentry/')

        assert response.status_code == 200
        assert b'Shako' in response.content
        assert b'delete_selected' not in response.content

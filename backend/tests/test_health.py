"""
Tests for the health check endpoint.
"""
import pytest


@pytest.mark.django_db
class TestHealthCheck:

    def test_healthy(self, api_client):
        response = api_client.get('/api/health/')

        assert response.status_code == 200
        data = response.json()
        assert data['status'] == 'healthy'
        assert data['checks'] == {'storage': 'ok', 'cache': 'ok', 'event_bus': 'ok'}

    def test_storage_down_is_unhealthy(self, api_client, loot_store, monkeypatch):
        def broken_ping():
            raise ConnectionError('storage down')

        monkeypatch.setattr(loot_store, 'ping', broken_ping)

        response = api_client.get('/api/health/')

        assert response.status_code == 503
        assert response.json()['checks']['storage'] == 'storage down'

    def test_event_bus_down_is_still_healthy(self, api_client, event_bus, monkeypatch):
        monkeypatch.setattr(event_bus, 'is_healthy', lambda: False)

        response = api_client.get('/api/health/')

        assert response.status_code == 200
        assert response.json()['checks']['event_bus'] == 'unavailable'

"""
API views (non-viewset endpoints).
"""
from rest_framework.decorators import api_view
from rest_framework.response import Response

from infrastructure.bootstrap import get_container
from infrastructure.cache import Cache
from infrastructure.event_bus import EventBus
from infrastructure.loot_store import LootStore


@api_view(['GET'])
def health_check(request):
    """
    Health check endpoint for load balancers and monitoring.

    Returns:
        200 OK if service is healthy
        503 Service Unavailable if loot storage is unreachable
    """
    health = {
        'status': 'healthy',
        'checks': {}
    }
    container = get_container()

    # Loot storage (required)
    try:
        container.get(LootStore).ping()
        health['checks']['storage'] = 'ok'
    except Exception as e:
        health['status'] = 'unhealthy'
        health['checks']['storage'] = str(e)

    # Cache (optional)
    try:
        cache = container.get(Cache)
        cache.set('health_check', 'ok', ttl=10)
        if cache.get('health_check') == 'ok':
            health['checks']['cache'] = 'ok'
        else:
            health['checks']['cache'] = 'read failed'
    except Exception as e:
        health['checks']['cache'] = f'error: {e}'

    # Broadcast channel (optional, ingest works without it)
    health['checks']['event_bus'] = 'ok' if container.get(EventBus).is_healthy() else 'unavailable'

    status_code = 200 if health['status'] == 'healthy' else 503
    return Response(health, status=status_code)

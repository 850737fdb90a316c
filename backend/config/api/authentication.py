"""
Shared-secret check for the loot webhook.

The bot sends the secret in the `x-webhook-secret` header. When no
secret is configured the webhook is open.
"""
import hmac

from django.conf import settings

WEBHOOK_SECRET_HEADER = 'HTTP_X_WEBHOOK_SECRET'


def has_valid_webhook_secret(request) -> bool:
    expected = getattr(settings, 'LOOT_WEBHOOK_SECRET', '')
    if not expected:
        return True

    provided = request.META.get(WEBHOOK_SECRET_HEADER, '')
    return hmac.compare_digest(provided.encode('utf-8'), expected.encode('utf-8'))

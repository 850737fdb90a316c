# Request/response contracts (pydantic)
from .base import ErrorResponse
from .loot import LootWebhookRequest

__all__ = [
    'ErrorResponse',
    'LootWebhookRequest',
]

# Queries package (Read operations)
from .base import BaseQuery
from .get_loot import GetLootQuery, GetLootResult

__all__ = [
    'BaseQuery',
    'GetLootQuery',
    'GetLootResult',
]

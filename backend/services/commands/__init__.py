# Commands package (Write operations)
from .base import BaseCommand
from .ingest_loot import IngestLootCommand, IngestLootResult

__all__ = [
    'BaseCommand',
    'IngestLootCommand',
    'IngestLootResult',
]

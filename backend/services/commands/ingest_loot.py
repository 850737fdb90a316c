"""
Ingest Loot Command - stores an item drop reported by the bot.

POST /api/loot
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from utils.datetime import to_iso
from utils.loot import NEW_LOOT_EVENT, generate_loot_id, is_valuable

from .base import BaseCommand


@dataclass
class IngestLootResult:
    """Result of ingesting a loot event."""
    success: bool
    entry_id: Optional[str] = None
    duplicate: bool = False
    broadcast: bool = False
    error: Optional[str] = None
    error_code: Optional[str] = None


class IngestLootCommand(BaseCommand[IngestLootResult]):
    """
    Persist a loot entry and broadcast it if it is valuable.

    Defaults for missing fields are applied by the request contract;
    only the timestamp default needs the clock and is applied here.

    The duplicate check is a plain read before the write. Two identical
    requests arriving at the same time can both be stored.
    """

    def execute(
        self,
        item_name: str,
        character: str,
        quality: str,
        location: str,
        timestamp: Optional[datetime] = None,
        character_class: str = '',
        level: Optional[int] = None,
        difficulty: str = '',
        item_id: str = '',
        dropped_by: str = '',
        stats: Optional[List[str]] = None,
    ) -> IngestLootResult:
        entry_timestamp = to_iso(timestamp) if timestamp is not None else self._clock.now_iso()

        existing_id = self._loot_store.find_duplicate(entry_timestamp, item_name, character)
        if existing_id:
            self.log_info(
                "Duplicate loot entry ignored",
                entry_id=existing_id,
                item_name=item_name,
                character=character
            )
            return IngestLootResult(success=True, entry_id=existing_id, duplicate=True)

        entry = {
            'id': generate_loot_id(self._clock.now_ms()),
            'timestamp': entry_timestamp,
            'character': character,
            'characterClass': character_class,
            'level': level,
            'difficulty': difficulty,
            'itemName': item_name,
            'itemId': item_id,
            'quality': quality,
            'location': location,
            'droppedBy': dropped_by,
            'stats': list(stats or []),
        }

        self._loot_store.save(entry)

        broadcast = False
        if is_valuable(quality):
            broadcast = self.publish_event(NEW_LOOT_EVENT, dict(entry))

        self.log_info(
            "Loot entry stored",
            entry_id=entry['id'],
            item_name=item_name,
            quality=quality,
            character=character,
            broadcast=broadcast
        )

        return IngestLootResult(success=True, entry_id=entry['id'], broadcast=broadcast)

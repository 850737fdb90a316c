"""
Loot Domain Models

One row per item the bot reports:
- LootEntry (append-only, never updated by the application)

Only used when LOOT_STORAGE_BACKEND=database; the Redis backend keeps
the same fields as JSON.
"""
from typing import Any, Dict

from django.db import models

from utils.datetime import parse_timestamp, to_iso


class LootEntry(models.Model):
    """One recorded item drop"""

    class Quality(models.TextChoices):
        NORMAL = 'normal', 'Normal'
        MAGIC = 'magic', 'Magic'
        RARE = 'rare', 'Rare'
        SET = 'set', 'Set'
        UNIQUE = 'unique', 'Unique'
        RUNE = 'rune', 'Rune'

    id = models.CharField(
        primary_key=True,
        max_length=40,
        editable=False
    )

    timestamp = models.DateTimeField(
        db_index=True,
        verbose_name='Drop time'
    )

    character = models.CharField(
        max_length=100,
        db_index=True,
        verbose_name='Character'
    )
    character_class = models.CharField(
        max_length=50,
        blank=True,
        verbose_name='Class'
    )
    level = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        verbose_name='Character level'
    )
    difficulty = models.CharField(
        max_length=20,
        blank=True
    )

    item_name = models.CharField(
        max_length=200,
        verbose_name='Item'
    )
    item_id = models.CharField(
        max_length=100,
        blank=True,
        help_text='Item identifier reported by the bot, used for metadata lookups'
    )
    quality = models.CharField(
        max_length=10,
        choices=Quality.choices,
        default=Quality.NORMAL,
        db_index=True
    )

    location = models.CharField(
        max_length=200,
        default='Unknown'
    )
    dropped_by = models.CharField(
        max_length=200,
        blank=True,
        verbose_name='Dropped by'
    )

    stats = models.JSONField(
        default=list,
        help_text='Rolled stat lines in the order the bot sent them'
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'loot_entry'
        verbose_name = 'Loot entry'
        verbose_name_plural = 'Loot entries'
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['timestamp', 'item_name', 'character'], name='loot_entry_fingerprint_idx'),
            models.Index(fields=['quality', 'timestamp'], name='loot_entry_quality_idx'),
        ]

    def __str__(self):
        return f'{self.item_name} ({self.quality}) - {self.character}'

    @classmethod
    def from_entry(cls, entry: Dict[str, Any]) -> 'LootEntry':
        """Build an unsaved row from a wire-format entry dict."""
        return cls(
            id=entry['id'],
            timestamp=parse_timestamp(entry['timestamp']),
            character=entry['character'],
            character_class=entry.get('characterClass', ''),
            level=entry.get('level'),
            difficulty=entry.get('difficulty', ''),
            item_name=entry['itemName'],
            item_id=entry.get('itemId', ''),
            quality=entry['quality'],
            location=entry['location'],
            dropped_by=entry.get('droppedBy', ''),
            stats=list(entry.get('stats') or []),
        )

    def to_entry(self) -> Dict[str, Any]:
        """Wire-format dict, as returned by GET /api/loot."""
        return {
            'id': self.id,
            'timestamp': to_iso(self.timestamp),
            'character': self.character,
            'characterClass': self.character_class,
            'level': self.level,
            'difficulty': self.difficulty,
            'itemName': self.item_name,
            'itemId': self.item_id,
            'quality': self.quality,
            'location': self.location,
            'droppedBy': self.dropped_by,
            'stats': list(self.stats or []),
        }

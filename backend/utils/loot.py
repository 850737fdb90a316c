"""
Loot entry helpers shared by the API, the storage adapters and the dashboard.

Entries travel as plain dicts with the webhook's camelCase keys:
id, timestamp, character, characterClass, level, difficulty, itemName,
itemId, quality, location, droppedBy, stats.
"""
import hashlib
import secrets
import string
from typing import Any, Dict, Iterable, Optional

QUALITIES = ('normal', 'magic', 'rare', 'set', 'unique', 'rune')

# Qualities that are pushed to the broadcast channel
VALUABLE_QUALITIES = frozenset({'unique', 'set', 'rare', 'magic', 'rune'})

NEW_LOOT_EVENT = 'new-loot'

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 9


def generate_loot_id(epoch_ms: int) -> str:
    """Generate id like 1705320000000-k3j9x0q2a"""
    suffix = ''.join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
    return f"{epoch_ms}-{suffix}"


def fingerprint(timestamp: str, item_name: str, character: str) -> str:
    """Stable hash of the fields used for duplicate detection."""
    raw = '\x1f'.join((timestamp, item_name, character))
    return hashlib.sha1(raw.encode('utf-8')).hexdigest()


def is_valuable(quality: str) -> bool:
    return quality in VALUABLE_QUALITIES


def matches_filters(
    entry: Dict[str, Any],
    quality: Optional[str] = None,
    character: Optional[str] = None
) -> bool:
    """Check an entry against the optional quality/character filters."""
    if quality and entry.get('quality') != quality:
        return False
    if character and entry.get('character') != character:
        return False
    return True


def summarize(entries: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """
    Aggregate counts shown in the dashboard stats bar.

    Returns:
        dict with total, uniques, sets and runes
    """
    totals = {'total': 0, 'uniques': 0, 'sets': 0, 'runes': 0}
    for entry in entries:
        totals['total'] += 1
        quality = entry.get('quality')
        if quality == 'unique':
            totals['uniques'] += 1
        elif quality == 'set':
            totals['sets'] += 1
        elif quality == 'rune':
            totals['runes'] += 1
    return totals

"""
Item metadata lookups for the dashboard detail overlay.

Metadata comes from a public items API (d2io by default). The lookup is
best effort: any failure returns None and the overlay falls back to the
name and rolled stats the bot reported.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)

DEFAULT_ITEMS_API_URL = 'https://d2io.vercel.app/api/items'
DEFAULT_IMAGE_BASE_URL = 'https://d2io.vercel.app'


def item_image_slug(item_name: str) -> str:
    """
    Derive an image slug from an item name.

    "Harlequin Crest" -> "harlequin-crest", "Tal Rasha's Wrappings" -> "tal-rashas-wrappings"
    """
    slug = item_name.lower().replace("'", '')
    slug = re.sub(r'[^a-z0-9]+', '-', slug)
    return slug.strip('-')


@dataclass
class ItemDetails:
    """Metadata for one item record."""
    id: str
    name: str
    image: str = ''
    type: str = ''
    base_item: str = ''
    magical_properties: List[str] = field(default_factory=list)
    defense: Optional[str] = None
    damage: List[str] = field(default_factory=list)
    required_level: Optional[int] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'ItemDetails':
        properties = record.get('properties')
        if not isinstance(properties, dict):
            properties = {}
        return cls(
            id=str(record.get('id', '')),
            name=record.get('name', ''),
            image=record.get('image') or '',
            type=record.get('type') or '',
            base_item=record.get('base_item') or '',
            magical_properties=list(properties.get('magical_properties') or []),
            defense=properties.get('defense'),
            damage=list(properties.get('damage') or []),
            required_level=properties.get('required_level'),
        )


class ItemMetadataService:
    """
    Reads the items API and finds records by id or name.

    The full item list is cached for CACHE_TTL seconds since the API only
    offers a single list endpoint.
    """

    CACHE_KEY = 'item_metadata:items'
    CACHE_TTL = 3600

    def __init__(
        self,
        cache=None,
        api_url: Optional[str] = None,
        image_base_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._cache = cache
        self._api_url = api_url or getattr(settings, 'ITEM_METADATA_URL', DEFAULT_ITEMS_API_URL)
        self._image_base_url = (
            image_base_url or getattr(settings, 'ITEM_IMAGE_BASE_URL', DEFAULT_IMAGE_BASE_URL)
        ).rstrip('/')
        self._timeout = timeout
        self._transport = transport

    def lookup(self, item_key: str) -> Optional[ItemDetails]:
        """
        Find an item by id, or by name (case-insensitive).

        Args:
            item_key: the entry's itemId, or its itemName when no id was sent

        Returns:
            ItemDetails, or None if not found or the API is unavailable
        """
        if not item_key:
            return None

        try:
            return self._find(item_key)
        except Exception as e:
            logger.warning(f"Item metadata unavailable for {item_key!r}: {e}", exc_info=True)
            return None

    def image_url(self, item_name: str, details: Optional[ItemDetails] = None) -> str:
        """Absolute image URL from metadata, or one derived from the item name."""
        if details and details.image:
            if details.image.startswith(('http://', 'https://')):
                return details.image
            return f"{self._image_base_url}/{details.image.lstrip('/')}"
        return f"{self._image_base_url}/images/{item_image_slug(item_name)}.png"

    def _find(self, item_key: str) -> Optional[ItemDetails]:
        items = self._load_items()
        wanted = item_key.lower()
        for record in items:
            if not isinstance(record, dict):
                continue
            if str(record.get('id', '')) == item_key or str(record.get('name', '')).lower() == wanted:
                return ItemDetails.from_record(record)
        return None

    def _load_items(self) -> List[Dict[str, Any]]:
        if self._cache:
            cached = self._cache.get_json(self.CACHE_KEY)
            if cached is not None:
                return cached

        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            response = client.get(self._api_url)
        response.raise_for_status()

        items = response.json()
        if not isinstance(items, list):
            raise ValueError(f"Unexpected items payload: {type(items).__name__}")

        if self._cache:
            self._cache.set_json(self.CACHE_KEY, items, ttl=self.CACHE_TTL)
        logger.info(f"Loaded {len(items)} item records from {self._api_url}")
        return items

"""
Loot webhook contracts.

The bot may omit any field. Missing, null, empty-string, blank and
empty-list values all fall back to the defaults below. Text limits match
the LootEntry columns.
"""
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Quality = Literal['normal', 'magic', 'rare', 'set', 'unique', 'rune']


class LootWebhookRequest(BaseModel):
    """POST /api/loot body"""

    model_config = ConfigDict(populate_by_name=True, extra='ignore', str_strip_whitespace=True)

    timestamp: Optional[datetime] = None
    character: str = Field(default='Unknown', max_length=100)
    character_class: str = Field(default='', alias='characterClass', max_length=50)
    level: Optional[int] = Field(default=None, ge=0, le=255)
    difficulty: str = Field(default='', max_length=20)
    item_name: str = Field(default='Unknown Item', alias='itemName', max_length=200)
    item_id: str = Field(default='', alias='itemId', max_length=100)
    quality: Quality = 'normal'
    location: str = Field(default='Unknown', max_length=200)
    dropped_by: str = Field(default='', alias='droppedBy', max_length=200)
    stats: List[str] = Field(default_factory=list)

    @model_validator(mode='before')
    @classmethod
    def drop_empty_values(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip()
            if value is None or value == '' or value == []:
                continue
            cleaned[key] = value
        return cleaned

    @field_validator('quality', mode='before')
    @classmethod
    def normalize_quality(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def to_command_kwargs(self) -> dict:
        """Keyword arguments for IngestLootCommand.execute"""
        return self.model_dump(by_alias=False)

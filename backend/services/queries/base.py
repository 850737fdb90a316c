"""
Base Query class for CQRS read operations.
Queries have no side effects.
"""
from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional
import logging

from infrastructure.cache import Cache
from infrastructure.clock import Clock
from infrastructure.loot_store import LootStore

T = TypeVar('T')


class BaseQuery(ABC, Generic[T]):
    """
    Base class for all Queries (read operations).

    Queries:
    - Have NO side effects
    - Should be idempotent by nature
    """

    def __init__(
        self,
        cache: Optional[Cache] = None,
        clock: Optional[Clock] = None,
        loot_store: Optional[LootStore] = None,
        logger: Optional[logging.Logger] = None,
        **kwargs  # Accept extra kwargs for DI compatibility
    ):
        self._cache = cache
        self._clock = clock
        self._loot_store = loot_store
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def execute(self, **kwargs) -> T:
        """
        Execute the query.
        Must be implemented by subclasses.
        """
        pass

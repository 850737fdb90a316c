"""
Base Command class for CQRS write operations.
Commands have side effects and may publish events.
"""
from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, Dict, Any
import logging

from infrastructure.event_bus import EventBus
from infrastructure.clock import Clock
from infrastructure.cache import Cache
from infrastructure.loot_store import LootStore

T = TypeVar('T')


class BaseCommand(ABC, Generic[T]):
    """
    Base class for all Commands (write operations).

    Commands:
    - Have side effects (create)
    - May publish events
    - Should be idempotent when possible
    """

    def __init__(
        self,
        event_bus: EventBus,
        clock: Clock,
        cache: Optional[Cache] = None,
        loot_store: Optional[LootStore] = None,
        logger: Optional[logging.Logger] = None
    ):
        self._event_bus = event_bus
        self._clock = clock
        self._cache = cache
        self._loot_store = loot_store
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def execute(self, **kwargs) -> T:
        """
        Execute the command.
        Must be implemented by subclasses.
        """
        pass

    def publish_event(self, event_type: str, payload: Dict[str, Any]) -> bool:
        """
        Publish event with graceful degradation.

        Event publishing failures are logged but do NOT fail the command.
        The entry is already stored at this point and clients will pick
        it up on their next poll.

        Returns:
            True if the bus accepted the event
        """
        try:
            self._event_bus.publish(event_type, payload)
            return True
        except Exception as e:
            self._logger.error(
                f"Failed to publish event {event_type}: {e}. "
                f"Event will be lost but command continues.",
                extra={'event_type': event_type, 'entry_id': payload.get('id')}
            )
            return False

    def log_info(self, message: str, **extra) -> None:
        """Log info message with extra fields."""
        self._logger.info(message, extra=extra)

"""
Dependency Injection container and application bootstrap.
"""
from typing import TypeVar, Type, Dict, Any, Optional
import logging

from django.conf import settings

from infrastructure.clock import Clock, SystemClock, FakeClock
from infrastructure.cache import Cache, RedisCache, FakeCache
from infrastructure.event_bus import EventBus, RabbitMQEventBus, RedisEventBus, FakeEventBus
from infrastructure.loot_store import (
    LootStore,
    RedisLootStore,
    DatabaseLootStore,
    FakeLootStore,
    DEFAULT_RETENTION_SECONDS,
)

T = TypeVar('T')

logger = logging.getLogger(__name__)


class Container:
    """
    Simple DI container for managing dependencies.
    Provides both real and fake implementations.
    """

    _instance: Optional['Container'] = None

    def __init__(self, use_fakes: bool = False):
        self._use_fakes = use_fakes
        self._singletons: Dict[Type, Any] = {}
        self._factories: Dict[Type, Any] = {}

        self._register_infrastructure()

    def _register_infrastructure(self):
        """Register infrastructure components."""
        if self._use_fakes:
            self._singletons[Clock] = FakeClock()
            self._singletons[Cache] = FakeCache()
            self._singletons[EventBus] = FakeEventBus()
            self._singletons[LootStore] = FakeLootStore()
            return

        redis_url = settings.REDIS_URL
        self._singletons[Clock] = SystemClock()
        self._singletons[Cache] = RedisCache(redis_url)

        bus_backend = getattr(settings, 'EVENT_BUS_BACKEND', 'redis')
        if bus_backend == 'rabbitmq':
            self._singletons[EventBus] = RabbitMQEventBus(settings.RABBITMQ_URL)
        elif bus_backend == 'redis':
            self._singletons[EventBus] = RedisEventBus(
                redis_url,
                channel=getattr(settings, 'LOOT_BROADCAST_CHANNEL', 'loot-feed')
            )
        else:
            raise ValueError(f"Unknown EVENT_BUS_BACKEND: {bus_backend}")

        storage_backend = getattr(settings, 'LOOT_STORAGE_BACKEND', 'database')
        if storage_backend == 'redis':
            self._singletons[LootStore] = RedisLootStore(
                redis_url,
                retention_seconds=getattr(settings, 'LOOT_RETENTION_SECONDS', DEFAULT_RETENTION_SECONDS)
            )
        elif storage_backend == 'database':
            self._singletons[LootStore] = DatabaseLootStore()
        else:
            raise ValueError(f"Unknown LOOT_STORAGE_BACKEND: {storage_backend}")

    def get(self, cls: Type[T]) -> T:
        """
        Get instance of a class.

        For infrastructure (Clock, Cache, EventBus, LootStore): returns singleton
        For Commands/Queries: creates new instance with injected dependencies
        """
        if cls in self._singletons:
            return self._singletons[cls]

        if cls in self._factories:
            return self._factories[cls](self)

        return self._create_service(cls)

    def _create_service(self, cls: Type[T]) -> T:
        """Create a service instance with dependencies."""
        clock = self._singletons.get(Clock)
        cache = self._singletons.get(Cache)
        event_bus = self._singletons.get(EventBus)
        loot_store = self._singletons.get(LootStore)

        from services.dashboard import ItemMetadataService
        if cls == ItemMetadataService:
            return ItemMetadataService(cache=cache)

        return cls(
            clock=clock,
            cache=cache,
            event_bus=event_bus,
            loot_store=loot_store,
            logger=logging.getLogger(cls.__name__)
        )

    def register_factory(self, cls: Type[T], factory) -> None:
        """Register a factory function."""
        self._factories[cls] = factory

    @classmethod
    def instance(cls) -> 'Container':
        """Get or create the global container instance."""
        if cls._instance is None:
            use_fakes = bool(getattr(settings, 'USE_FAKES', False))
            cls._instance = cls(use_fakes=use_fakes)
            logger.info(f"Container initialized (use_fakes={use_fakes})")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the global container (for testing)."""
        cls._instance = None


def get_container() -> Container:
    """Get the global container instance."""
    return Container.instance()


def create_test_container() -> Container:
    """Create a container with fake implementations for testing."""
    return Container(use_fakes=True)

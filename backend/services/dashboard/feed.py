"""
Background feeds that keep a DashboardState current.

- LootPoller re-fetches GET /api/loot on a fixed interval (replace)
- LootSubscriber listens on the broadcast channel (append)

Both run on daemon threads and stop when stop() is called. Failures are
logged and the next tick is the only retry.
"""
import logging
from abc import ABC, abstractmethod
import threading
from typing import Any, Callable, Dict, Optional

import httpx

from infrastructure.event_bus import EventBus
from utils.loot import NEW_LOOT_EVENT

from .state import DashboardState

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[], None]


class LootFeedClient:
    """HTTP client for the loot query endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._base_url = base_url.rstrip('/')
        self._timeout = timeout
        self._transport = transport

    def fetch(self, category: str = 'all', limit: int = 100) -> Dict[str, Any]:
        """
        Fetch the newest entries.

        Returns:
            dict with `logs` (newest first) and `totals` (may be None)

        Raises:
            httpx.HTTPError: on transport errors or non-2xx responses
        """
        params = {'limit': str(limit)}
        if category and category != 'all':
            params['category'] = category

        with httpx.Client(base_url=self._base_url, timeout=self._timeout, transport=self._transport) as client:
            response = client.get('/api/loot', params=params)
        response.raise_for_status()

        body = response.json()
        if not isinstance(body, dict):
            raise ValueError(f"Unexpected loot payload: {type(body).__name__}")
        return {
            'logs': body.get('logs') or [],
            'totals': body.get('totals'),
        }


class _BackgroundTask(ABC):
    """Daemon thread with a stop flag."""

    name = 'background-task'

    def __init__(self):
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @abstractmethod
    def _run(self) -> None:
        pass


class LootPoller(_BackgroundTask):
    """Replace the dashboard list with a fresh fetch every `interval` seconds."""

    name = 'loot-poller'

    def __init__(
        self,
        client: LootFeedClient,
        state: DashboardState,
        interval: float = 5.0,
        limit: int = 100,
        on_update: Optional[UpdateCallback] = None,
    ):
        super().__init__()
        self._client = client
        self._state = state
        self._interval = interval
        self._limit = limit
        self._on_update = on_update

    def run_once(self) -> bool:
        """Single fetch. Returns False if it failed."""
        try:
            page = self._client.fetch(category=self._state.category, limit=self._limit)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Loot poll failed: {e}")
            self._state.mark_failed()
            return False

        self._state.replace(page['logs'], totals=page['totals'])
        if self._on_update:
            self._on_update()
        return True

    def _run(self) -> None:
        while not self._stop.is_set():
            self.run_once()
            self._stop.wait(self._interval)


class LootSubscriber(_BackgroundTask):
    """Prepend every new-loot event from the broadcast channel."""

    name = 'loot-subscriber'

    def __init__(
        self,
        event_bus: EventBus,
        state: DashboardState,
        on_update: Optional[UpdateCallback] = None,
    ):
        super().__init__()
        self._event_bus = event_bus
        self._state = state
        self._on_update = on_update

    def handle(self, event_type: str, payload: Dict[str, Any]) -> None:
        if event_type != NEW_LOOT_EVENT:
            return
        if self._state.append(payload) and self._on_update:
            self._on_update()

    def _run(self) -> None:
        try:
            self._event_bus.listen(self.handle, self._stop)
        except Exception as e:
            logger.error(f"Loot subscription ended: {e}", exc_info=True)

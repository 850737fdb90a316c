"""
Event Bus abstraction for broadcasting loot events.

Dashboards subscribe to the broadcast channel and receive every
valuable drop as soon as it is stored.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List
import json
import logging
import threading
import time

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, Dict[str, Any]], None]


def encode_event(event_type: str, payload: Dict[str, Any]) -> str:
    """Wire format shared by all bus implementations."""
    return json.dumps({'event': event_type, 'data': payload}, ensure_ascii=False)


def decode_event(message: str) -> tuple[str, Dict[str, Any]]:
    body = json.loads(message)
    return body['event'], body['data']


class EventBus(ABC):
    """Abstract event bus interface."""

    @abstractmethod
    def publish(self, event_type: str, payload: Dict[str, Any]) -> None:
        """
        Publish event to the bus.

        Args:
            event_type: Event name (e.g., 'new-loot')
            payload: Event data, sent as-is
        """
        pass

    @abstractmethod
    def listen(self, handler: EventHandler, stop_event: threading.Event) -> None:
        """
        Deliver events to handler until stop_event is set.
        Blocks the calling thread.
        """
        pass

    def is_healthy(self) -> bool:
        return True


class RedisEventBus(EventBus):
    """
    Redis pub/sub implementation.

    Every event goes to a single named channel; subscribers filter by
    event name.
    """

    POLL_TIMEOUT = 1.0  # seconds

    def __init__(self, redis_url: str, channel: str = 'loot-feed'):
        import redis
        self._client = redis.from_url(redis_url, decode_responses=True)
        self._channel = channel

    @property
    def channel(self) -> str:
        return self._channel

    def publish(self, event_type: str, payload: Dict[str, Any]) -> None:
        receivers = self._client.publish(self._channel, encode_event(event_type, payload))
        logger.info(f"Published event: {event_type}", extra={'channel': self._channel, 'receivers': receivers})

    def listen(self, handler: EventHandler, stop_event: threading.Event) -> None:
        pubsub = self._client.pubsub(ignore_subscribe_messages=True)
        pubsub.subscribe(self._channel)
        logger.info(f"Subscribed to channel {self._channel}")
        try:
            while not stop_event.is_set():
                message = pubsub.get_message(timeout=self.POLL_TIMEOUT)
                if message is None or message.get('type') != 'message':
                    continue
                try:
                    event_type, payload = decode_event(message['data'])
                except (ValueError, KeyError, TypeError) as e:
                    logger.warning(f"Ignoring malformed message on {self._channel}: {e}")
                    continue
                handler(event_type, payload)
        finally:
            pubsub.close()

    def is_healthy(self) -> bool:
        try:
            return bool(self._client.ping())
        except Exception:
            return False


class RabbitMQEventBus(EventBus):
    """
    RabbitMQ implementation of event bus.

    Features:
    - Thread-safe connection handling
    - Automatic reconnection with exponential backoff
    - Subscribers get an exclusive queue bound to the topic exchange
    """

    POLL_TIMEOUT = 1  # seconds
    MAX_RETRIES = 3
    INITIAL_RETRY_DELAY = 0.5  # seconds
    MAX_RETRY_DELAY = 5.0  # seconds

    def __init__(self, rabbitmq_url: str, exchange: str = 'loot_events'):
        self._url = rabbitmq_url
        self._exchange = exchange
        self._connection = None
        self._channel = None
        self._connection_lock = threading.Lock()

    def _ensure_connection(self) -> None:
        """Open connection and channel if needed (caller must hold lock)."""
        import pika

        if self._connection is not None and self._connection.is_open \
                and self._channel is not None and self._channel.is_open:
            return

        self._close_connection_unsafe()

        params = pika.URLParameters(self._url)
        params.heartbeat = 180
        params.blocked_connection_timeout = 300
        params.socket_timeout = 10

        self._connection = pika.BlockingConnection(params)
        self._channel = self._connection.channel()
        self._channel.exchange_declare(
            exchange=self._exchange,
            exchange_type='topic',
            durable=True
        )
        logger.info(f"RabbitMQ connection established (exchange={self._exchange})")

    def _close_connection_unsafe(self):
        """Close connection without lock (caller must hold lock)."""
        if self._connection:
            try:
                if not self._connection.is_closed:
                    self._connection.close()
            except Exception as e:
                logger.debug(f"Ignoring error while closing RabbitMQ connection: {e}")
            self._connection = None
            self._channel = None

    def publish(self, event_type: str, payload: Dict[str, Any]) -> None:
        """
        Publish event with retry logic.
        Raises the last error after all retries fail.
        """
        import pika

        last_error = None
        retry_delay = self.INITIAL_RETRY_DELAY

        for attempt in range(self.MAX_RETRIES):
            with self._connection_lock:
                try:
                    self._ensure_connection()
                    self._channel.basic_publish(
                        exchange=self._exchange,
                        routing_key=event_type.replace('-', '.'),
                        body=encode_event(event_type, payload).encode('utf-8'),
                        properties=pika.BasicProperties(
                            delivery_mode=2,  # Persistent
                            content_type='application/json'
                        )
                    )
                    logger.info(f"Published event: {event_type}")
                    return

                except Exception as e:
                    last_error = e
                    logger.warning(
                        f"Publish attempt {attempt + 1}/{self.MAX_RETRIES} failed for {event_type}: {e}"
                    )
                    self._close_connection_unsafe()

            if attempt < self.MAX_RETRIES - 1:
                time.sleep(retry_delay)
                retry_delay = min(retry_delay * 2, self.MAX_RETRY_DELAY)

        logger.error(f"Failed to publish event {event_type} after {self.MAX_RETRIES} attempts: {last_error}")
        raise last_error

    def listen(self, handler: EventHandler, stop_event: threading.Event) -> None:
        """
        Consume every event from the exchange on a private queue.

        Runs on its own connection; self._connection belongs to publishers.
        """
        import pika

        params = pika.URLParameters(self._url)
        params.heartbeat = 180
        connection = pika.BlockingConnection(params)
        try:
            channel = connection.channel()
            channel.exchange_declare(exchange=self._exchange, exchange_type='topic', durable=True)
            result = channel.queue_declare(queue='', exclusive=True, auto_delete=True)
            queue = result.method.queue
            channel.queue_bind(exchange=self._exchange, queue=queue, routing_key='#')

            def on_message(ch, method, properties, body):
                try:
                    event_type, payload = decode_event(body.decode('utf-8'))
                except (ValueError, KeyError, TypeError) as e:
                    logger.warning(f"Ignoring malformed message on {self._exchange}: {e}")
                    return
                handler(event_type, payload)

            channel.basic_consume(queue=queue, on_message_callback=on_message, auto_ack=True)
            logger.info(f"Subscribed to exchange {self._exchange} (queue={queue})")

            while not stop_event.is_set():
                connection.process_data_events(time_limit=self.POLL_TIMEOUT)
        finally:
            if not connection.is_closed:
                connection.close()

    def close(self):
        """Close connection."""
        with self._connection_lock:
            self._close_connection_unsafe()

    def is_healthy(self) -> bool:
        with self._connection_lock:
            try:
                self._ensure_connection()
                self._connection.process_data_events(time_limit=0)
                return True
            except Exception:
                return False


class FakeEventBus(EventBus):
    """
    In-memory event bus for testing.
    Stores all published events and forwards them to active listeners.
    """

    def __init__(self):
        self._events: List[Dict[str, Any]] = []
        self._handlers: List[EventHandler] = []
        self._lock = threading.Lock()

    def publish(self, event_type: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            self._events.append({
                'event_type': event_type,
                'payload': payload
            })
            handlers = list(self._handlers)
        for handler in handlers:
            handler(event_type, payload)

    def listen(self, handler: EventHandler, stop_event: threading.Event) -> None:
        with self._lock:
            self._handlers.append(handler)
        try:
            stop_event.wait()
        finally:
            with self._lock:
                self._handlers.remove(handler)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._handlers)

    @property
    def events(self) -> List[Dict[str, Any]]:
        """Get all published events."""
        return self._events.copy()

    def get_events_by_type(self, event_type: str) -> List[Dict[str, Any]]:
        """Get events filtered by type."""
        return [e for e in self._events if e['event_type'] == event_type]

    def assert_event_published(self, event_type: str) -> Dict[str, Any]:
        """Assert that an event of given type was published. Returns the event."""
        events = self.get_events_by_type(event_type)
        if not events:
            raise AssertionError(f"No event of type '{event_type}' was published")
        return events[-1]

    def assert_no_events(self) -> None:
        """Assert that no events were published."""
        if self._events:
            types = [e['event_type'] for e in self._events]
            raise AssertionError(f"Expected no events, but found: {types}")

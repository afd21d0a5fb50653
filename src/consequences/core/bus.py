"""
Event Bus implementation for event-triggered chain dispatch.

The Event Bus is a simple, synchronous dispatcher for trigger events.
Handlers that need to do asynchronous work (such as the ChainDispatcher)
schedule it themselves and return immediately.
"""

from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Optional, Callable, List
import logging

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__name__", repr(handler))


@dataclass
class Event:
    """
    A named trigger.

    Events are process-wide and referenced by id. The bus stamps
    ``last_triggered`` whenever the event is published; nothing else in the
    core touches it.

    Attributes:
        unique_id: Event identifier (e.g., "hallway.motion")
        last_triggered: When the event last fired (None if never)
    """

    unique_id: str
    last_triggered: Optional[datetime] = None


class EventFilter:
    """
    Filter for event subscriptions.

    Allows subscribers to filter events by id.
    """

    def __init__(self, event_id: Optional[str] = None):
        """
        Initialize an event filter.

        Args:
            event_id: Filter by event id (None = all events)
        """
        self.event_id = event_id

    def matches(self, event: Event) -> bool:
        """
        Check if an event matches this filter.

        Args:
            event: The event to check

        Returns:
            True if the event matches the filter
        """
        if self.event_id and event.unique_id != self.event_id:
            return False
        return True

    def __repr__(self) -> str:
        return f"EventFilter(event_id={self.event_id!r})"


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Simple, synchronous event bus.

    Handlers are wrapped in try/except so that one bad subscriber cannot stop
    delivery to the others or crash the event source.
    """

    def __init__(self) -> None:
        """Initialize the event bus."""
        self._handlers: List[tuple[EventFilter, EventHandler]] = []

    def subscribe(
        self,
        handler: EventHandler,
        event_filter: Optional[EventFilter] = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Callable that receives Event objects
            event_filter: Optional filter for events (None = receive all events)
        """
        if event_filter is None:
            event_filter = EventFilter()

        self._handlers.append((event_filter, handler))
        logger.debug(f"Subscribed handler {_handler_name(handler)} with filter {event_filter}")

    def publish(self, event: Event, now: Optional[datetime] = None) -> None:
        """
        Fire an event and deliver it to all matching subscribers.

        Stamps ``event.last_triggered`` before delivery. Handlers are called
        synchronously, in subscription order.

        Args:
            event: The event to fire
            now: Trigger time (for testing)
        """
        event.last_triggered = now or _utc_now()
        logger.debug(f"Publishing event: {event.unique_id}")

        for event_filter, handler in list(self._handlers):
            if event_filter.matches(event):
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        f"Error in event handler {_handler_name(handler)} "
                        f"for event {event.unique_id}: {e}",
                        exc_info=True,
                    )

    def unsubscribe(self, handler: EventHandler) -> None:
        """
        Unsubscribe a handler from all events.

        Args:
            handler: The handler to unsubscribe
        """
        self._handlers = [(f, h) for f, h in self._handlers if h != handler]
        logger.debug(f"Unsubscribed handler {_handler_name(handler)}")

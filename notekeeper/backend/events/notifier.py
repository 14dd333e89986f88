"""
Change Notifier.

In-process fan-out of store change events. Every subscriber owns an
unbounded queue, so each published event reaches each subscriber exactly
once and in publish order.

Usage:
    notifier = ChangeNotifier()
    queue = notifier.subscribe()
    try:
        event = await queue.get()
    finally:
        notifier.unsubscribe(queue)
"""

import asyncio

from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.events.schemas import EventEnvelope

logger = get_logger(__name__)


class ChangeNotifier:
    """Delivers store change events to live subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[asyncio.Queue[EventEnvelope]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue[EventEnvelope]:
        """Register a new subscriber and return its queue."""
        queue: asyncio.Queue[EventEnvelope] = asyncio.Queue()
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[EventEnvelope]) -> None:
        """Drop a subscriber. Unknown queues are ignored."""
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def publish(self, event: EventEnvelope) -> None:
        """Hand the event to every current subscriber."""
        for queue in list(self._subscribers):
            queue.put_nowait(event)
        logger.debug(
            "Change published",
            extra={
                "event_type": event.event_type,
                "event_id": event.event_id,
                "subscribers": len(self._subscribers),
            },
        )

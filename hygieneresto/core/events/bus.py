"""Publish/subscribe channel between the HTTP wrapper and the session controller.

``ApiClient`` announces rejected requests on ``session.unauthorized`` and
``SessionController`` reacts by ending the session. Neither imports the other.
Each ``ClientApplication`` builds its own bus, so two clients in one process
never see each other's events.

Example usage:
    bus = EventBus()
    bus.subscribe(EventTypes.SESSION_LOGGED_OUT, show_login_page)
    failures = await bus.publish(EventTypes.SESSION_LOGGED_OUT, {"reason": "logout"})
"""

from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from loguru import logger

EventHandler = Callable[[dict[str, Any]], Awaitable[None]]


@dataclass(frozen=True)
class HandlerFailure:
    """A subscriber that raised while an event was delivered."""

    event_type: str
    handler_name: str
    exception: Exception


class EventBus:
    """Delivers each event to its subscribers in subscription order.

    A subscriber that raises is logged and reported back to the publisher;
    the remaining subscribers still run.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)
        logger.debug(f"{handler.__name__} subscribed to {event_type}")

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """Remove ``handler``. Unknown handlers are ignored."""
        subscribers = self._handlers.get(event_type)
        if subscribers and handler in subscribers:
            subscribers.remove(handler)
            logger.debug(f"{handler.__name__} unsubscribed from {event_type}")

    def handler_count(self, event_type: str) -> int:
        return len(self._handlers.get(event_type, ()))

    async def publish(
        self, event_type: str, payload: dict[str, Any]
    ) -> list[HandlerFailure]:
        """Await every subscriber of ``event_type`` with ``payload``.

        Returns:
            One ``HandlerFailure`` per subscriber that raised, empty when all
            of them succeeded.
        """
        # Snapshot: a subscriber may unsubscribe itself while notified
        subscribers = list(self._handlers.get(event_type, ()))
        logger.debug(f"{event_type} -> {len(subscribers)} subscriber(s)")

        failures: list[HandlerFailure] = []
        for handler in subscribers:
            try:
                await handler(payload)
            except Exception as e:  # noqa: BLE001 - one subscriber must not starve the others
                logger.exception(f"{handler.__name__} failed on {event_type}")
                failures.append(HandlerFailure(event_type, handler.__name__, e))
        return failures

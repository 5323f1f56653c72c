from typing import Any, Callable, Dict, List
from .models import Notification
from modeswitch.utils.logger import get_logger

logger = get_logger("events")

Subscriber = Callable[..., None]
WildcardSubscriber = Callable[[Notification, tuple], None]

class EventNotifier:
    """Explicit subscriber registry for controller and supervisor notifications.

    Subscribers of a single notification receive its payload as positional
    arguments:

        MODE_CHANGED        callback(mode)
        CONNECTION_CHANGED  callback(connected)
        RECONNECTING        callback()
        RECONNECTED         callback()

    Wildcard subscribers receive ``(notification, args)`` for every publish.
    A subscriber that raises is logged and skipped; the remaining subscribers
    are still called.
    """

    def __init__(self):
        self._subscribers: Dict[Notification, List[Subscriber]] = {kind: [] for kind in Notification}
        self._wildcard: List[WildcardSubscriber] = []

    def subscribe(self, kind: Notification, callback: Subscriber):
        if callback not in self._subscribers[kind]:
            self._subscribers[kind].append(callback)

    def unsubscribe(self, kind: Notification, callback: Subscriber) -> bool:
        if callback in self._subscribers[kind]:
            self._subscribers[kind].remove(callback)
            return True
        return False

    def subscribe_all(self, callback: WildcardSubscriber):
        if callback not in self._wildcard:
            self._wildcard.append(callback)

    def unsubscribe_all(self, callback: WildcardSubscriber) -> bool:
        if callback in self._wildcard:
            self._wildcard.remove(callback)
            return True
        return False

    def subscriber_count(self, kind: Notification) -> int:
        return len(self._subscribers[kind]) + len(self._wildcard)

    def publish(self, kind: Notification, *args: Any):
        # Copy so callbacks may unsubscribe themselves while being called
        for callback in list(self._subscribers[kind]):
            try:
                callback(*args)
            except Exception:
                logger.exception(f"Subscriber {callback!r} failed on {kind.value}")

        for callback in list(self._wildcard):
            try:
                callback(kind, args)
            except Exception:
                logger.exception(f"Subscriber {callback!r} failed on {kind.value}")

"""ABOUTME: Explicit publish/subscribe channel for tuning status updates.
ABOUTME: Consumers subscribe and unsubscribe; nothing is broadcast implicitly."""
import logging
from threading import Lock
from typing import Callable, Generic, List, NamedTuple, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TuningStatus(NamedTuple):
    """What consumers (UI, transport) need to show or forward.

    Target fields are None while auto mode has not settled on a string yet;
    cents_deviation is None whenever there is no stable reading or no target.
    """
    detected_frequency: Optional[float]
    detected_note_name: Optional[str]
    cents_deviation: Optional[float]
    target_note_name: Optional[str]
    target_frequency: Optional[float]
    is_active: bool = False
    auto_mode: bool = False


class Subscription:
    """Handle returned by EventChannel.subscribe()."""

    def __init__(self, channel: "EventChannel", callback: Callable):
        self._channel = channel
        self.callback = callback

    def cancel(self):
        """Stop receiving events. Safe to call more than once."""
        self._channel.unsubscribe(self)


class EventChannel(Generic[T]):
    """Fan-out of events to explicitly registered callbacks.

    Callbacks run on the publishing thread, outside the channel lock, so a
    subscriber may unsubscribe from inside its own callback. A failing
    subscriber is logged and does not stop delivery to the others.
    """

    def __init__(self):
        self._subscriptions: List[Subscription] = []
        self._lock = Lock()

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        subscription = Subscription(self, callback)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription):
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, event: T):
        with self._lock:
            subscriptions = list(self._subscriptions)

        for subscription in subscriptions:
            try:
                subscription.callback(event)
            except Exception:
                logger.exception("Subscriber %r failed", subscription.callback)

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, Optional

logger = logging.getLogger(__name__)

TOPIC_ITEMS = "items"
TOPIC_TRANSACTIONS = "transactions"
TOPIC_ACTIVITY = "activity"


class Subscription:
    """Handle for a live snapshot feed. ``cancel()`` stops delivery."""

    def __init__(
        self,
        hub: "SnapshotHub",
        topic: str,
        callback: Callable[[list], None],
        loader: Callable[[], list],
    ):
        self.topic = topic
        self._hub = hub
        self._callback = callback
        self._loader = loader
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._hub.remove(self)

    def deliver(self) -> None:
        if not self._active:
            return
        self._callback(self._loader())


class SnapshotHub:
    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: dict[str, list[Subscription]] = {}

    def add(
        self,
        topic: str,
        callback: Callable[[list], None],
        loader: Callable[[], list],
    ) -> Subscription:
        subscription = Subscription(self, topic, callback, loader)
        with self._lock:
            self._subscriptions.setdefault(topic, []).append(subscription)
        subscription.deliver()
        return subscription

    def remove(self, subscription: Subscription) -> None:
        with self._lock:
            entries = self._subscriptions.get(subscription.topic, [])
            if subscription in entries:
                entries.remove(subscription)

    def subscriber_count(self, topic: Optional[str] = None) -> int:
        with self._lock:
            if topic is not None:
                return len(self._subscriptions.get(topic, []))
            return sum(len(entries) for entries in self._subscriptions.values())

    def publish(self, topics: Iterable[str]) -> None:
        for topic in sorted(set(topics)):
            with self._lock:
                entries = list(self._subscriptions.get(topic, []))
            for subscription in entries:
                # The write already committed; a failing listener must not undo that.
                try:
                    subscription.deliver()
                except Exception:
                    logger.exception("Snapshot delivery failed for topic %s", topic)


__all__ = [
    "SnapshotHub",
    "Subscription",
    "TOPIC_ACTIVITY",
    "TOPIC_ITEMS",
    "TOPIC_TRANSACTIONS",
]

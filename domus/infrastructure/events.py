"""Refresh signal: observable data version bumped after every committed mutation.

Readers either poll `version` (clients compare it with the version they last
rendered) or subscribe a callback to be told which entity changed.

Example Usage:
    from domus.infrastructure.events import refresh_signal

    unsubscribe = refresh_signal.subscribe(lambda change: print(change.entity, change.action))
    refresh_signal.publish("payment", "created")
    unsubscribe()
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataChange:
    """Notification delivered to subscribers"""

    version: int
    entity: str  # house | room | tenant | payment | database
    action: str  # created | updated | deleted | reset
    entity_id: int | None = None


Subscriber = Callable[[DataChange], None]


class RefreshSignal:
    """Thread-safe version counter with change subscribers"""

    def __init__(self) -> None:
        self._version = 0
        self._subscribers: list[Subscriber] = []
        self._lock = threading.RLock()

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that removes it"""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, entity: str, action: str, entity_id: int | None = None) -> DataChange:
        """Bump the version and notify subscribers of the change"""
        with self._lock:
            self._version += 1
            change = DataChange(version=self._version, entity=entity, action=action, entity_id=entity_id)
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(change)
            except Exception:
                # A failing subscriber must not block the others or the writer
                logger.exception("Refresh subscriber failed", extra={"entity": entity, "action": action})

        return change


refresh_signal = RefreshSignal()

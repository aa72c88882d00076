"""
Pool notifications.

One event per committed state change, published after the change is stored.
"""

from __future__ import annotations
import logging
from collections import deque
from typing import Callable

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class PoolEvent(BaseModel):
    """Base notification, keyed by the pool it concerns."""
    model_config = ConfigDict(frozen=True)

    pool_id: bytes


class OwnerSet(PoolEvent):
    owner: str


class ScoreSubmitted(PoolEvent):
    count: int  # Ratings accepted so far, including this one


class AverageRecomputed(PoolEvent):
    pass


class AccessGranted(PoolEvent):
    to: str


class MadePublic(PoolEvent):
    pass


Subscriber = Callable[[PoolEvent], None]


class EventBus:
    """
    In-process fan-out of pool notifications.

    Keeps the most recent history_size events, in publication order.
    """

    def __init__(self, history_size: int = 1000):
        self._subscribers: list[Subscriber] = []
        self._history: deque[PoolEvent] = deque(maxlen=history_size)

    @property
    def history(self) -> list[PoolEvent]:
        return list(self._history)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register callback for all future events.

        Returns:
            Function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: PoolEvent) -> None:
        self._history.append(event)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                # State is already committed when listeners run
                logger.exception(f"Subscriber {callback!r} failed on {type(event).__name__}")

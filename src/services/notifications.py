"""Broadcast of generation events to UI subscribers."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List

from utils.error_handling import log_exception

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationCreated:
    id: int
    image_path: Path


Subscriber = Callable[[GenerationCreated], None]


class GenerationEvents:
    """Observer list. A failing subscriber never affects the others or the publisher."""

    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` and return a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            self.unsubscribe(callback)

        return _unsubscribe

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: GenerationCreated) -> int:
        """Deliver ``event`` to every subscriber; returns how many succeeded."""
        with self._lock:
            subscribers = list(self._subscribers)

        delivered = 0
        for callback in subscribers:
            try:
                callback(event)
            except Exception as e:
                log_exception(
                    e,
                    "Generation subscriber failed",
                    extra={"generation_id": event.id},
                    level=logging.WARNING,
                )
                continue
            delivered += 1
        return delivered

"""
In-process publish/subscribe for triage events.

Observers run one after another in subscription order. A failing observer
is logged and skipped; it never reaches the publisher or the observers
after it.
"""

import inspect
from abc import ABC, abstractmethod
from typing import Awaitable, List, Optional, Union

from ...core.structured_logger import StructuredLogger, get_logger
from .triage_events import BaseTriageEvent


class TriageObserver(ABC):
    """Reacts to triage events. ``update`` may be sync or async."""

    @abstractmethod
    def update(self, event: BaseTriageEvent) -> Union[None, Awaitable[None]]:
        """Handle one event."""

    @property
    def name(self) -> str:
        return type(self).__name__


class TriageEventBus:
    """Subject side of the observer pattern for triage events."""

    def __init__(self, logger: Optional[StructuredLogger] = None) -> None:
        self._observers: List[TriageObserver] = []
        self._logger = logger or get_logger(__name__)

    def subscribe(self, observer: TriageObserver) -> None:
        if observer in self._observers:
            return
        self._observers.append(observer)
        self._logger.info(
            "Observer subscribed",
            observer=self._observer_name(observer),
            total_observers=len(self._observers),
        )

    def unsubscribe(self, observer: TriageObserver) -> None:
        if observer not in self._observers:
            return
        self._observers.remove(observer)
        self._logger.info(
            "Observer unsubscribed",
            observer=self._observer_name(observer),
            total_observers=len(self._observers),
        )

    attach = subscribe
    detach = unsubscribe

    async def notify(self, event: BaseTriageEvent) -> None:
        self._logger.info(
            "Notifying observers",
            event_type=event.event_type,
            event_id=event.event_id,
            patient_id=event.patient_id,
            observer_count=len(self._observers),
        )
        # Snapshot so observers may (un)subscribe while being notified.
        for observer in list(self._observers):
            try:
                outcome = observer.update(event)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as exc:
                self._logger.error(
                    "Observer notification failed",
                    observer=self._observer_name(observer),
                    event_type=event.event_type,
                    event_id=event.event_id,
                    error=str(exc),
                )

    def get_observer_count(self) -> int:
        return len(self._observers)

    @property
    def observers(self) -> List[TriageObserver]:
        return list(self._observers)

    @staticmethod
    def _observer_name(observer: object) -> str:
        return getattr(observer, "name", type(observer).__name__)

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Iterable

from ..catalog.models import CatalogEntity

logger = logging.getLogger(__name__)

DEFAULT_SESSION = "default"


class RecencyTracker:
    """
    Bounded, FIFO-evicted memory of recently returned cocktail ids.

    Re-recording an id moves it to the newest position. All methods are
    guarded by one lock so a tracker can be shared between request threads.
    """

    def __init__(self, max_recent: int = 20) -> None:
        if max_recent < 1:
            raise ValueError("max_recent must be at least 1")
        self.max_recent = max_recent
        self._ids: OrderedDict[str, None] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids)

    def __contains__(self, entity_id: object) -> bool:
        with self._lock:
            return entity_id in self._ids

    def recent_ids(self) -> list[str]:
        """Oldest first."""
        with self._lock:
            return list(self._ids)

    def record(self, entity: CatalogEntity | str) -> None:
        entity_id = entity if isinstance(entity, str) else entity.id
        with self._lock:
            self._ids.pop(entity_id, None)
            self._ids[entity_id] = None
            while len(self._ids) > self.max_recent:
                self._ids.popitem(last=False)

    def record_all(self, entities: Iterable[CatalogEntity | str]) -> None:
        for entity in entities:
            self.record(entity)

    def filter_out(self, catalog: Iterable[CatalogEntity]) -> list[CatalogEntity]:
        with self._lock:
            recent = set(self._ids)
        return [e for e in catalog if e.id not in recent]

    def reset(self) -> None:
        with self._lock:
            self._ids.clear()


class RecencyRegistry:
    """
    One ``RecencyTracker`` per caller-supplied session id.

    Sessions are kept in least-recently-used order and the oldest is dropped
    once more than ``max_sessions`` are held.
    """

    def __init__(self, max_recent: int = 20, max_sessions: int = 1000) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_recent = max_recent
        self.max_sessions = max_sessions
        self._trackers: OrderedDict[str, RecencyTracker] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._trackers)

    def tracker(self, session_id: str | None = None) -> RecencyTracker:
        key = session_id or DEFAULT_SESSION
        with self._lock:
            tracker = self._trackers.pop(key, None)
            if tracker is None:
                tracker = RecencyTracker(self.max_recent)
            self._trackers[key] = tracker
            while len(self._trackers) > self.max_sessions:
                evicted, _ = self._trackers.popitem(last=False)
                logger.debug("Evicted recency for session %s", evicted)
            return tracker

    def reset(self, session_id: str | None = None) -> None:
        key = session_id or DEFAULT_SESSION
        with self._lock:
            tracker = self._trackers.pop(key, None)
        if tracker is not None:
            tracker.reset()
        logger.info("Recency reset for session %s", key)

    def clear(self) -> None:
        """Drop every session's tracker."""
        with self._lock:
            self._trackers.clear()

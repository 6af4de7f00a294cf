"""Live query results that are pushed to subscribers after each write."""

from __future__ import annotations

import logging
import threading
from typing import Callable, FrozenSet, Generic, Iterable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Subscriber = Callable[[List[T]], None]


class LiveQuery(Generic[T]):
    """Query whose full result is re-sent to subscribers whenever it changes.

    ``fetch`` runs the query and returns a fresh list; ``tables`` names the
    tables whose writes make the current result stale.  Every emission is a
    complete replacement snapshot, never a diff.
    """

    def __init__(
        self,
        fetch: Callable[[], List[T]],
        tables: Iterable[str],
        hub: "QueryHub",
        name: str = "",
    ) -> None:
        self._fetch = fetch
        self.tables: FrozenSet[str] = frozenset(tables)
        self.name = name
        self._hub = hub
        self._lock = threading.Lock()
        self._subscribers: List[Subscriber] = []
        self._value: Optional[List[T]] = None

    @property
    def value(self) -> Optional[List[T]]:
        """Last snapshot sent to subscribers, ``None`` before the first one."""

        return self._value

    def fetch(self) -> List[T]:
        """Run the query once without notifying anybody."""

        return self._fetch()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` and send it the current snapshot.

        Returns a function that removes the subscription again.
        """

        # hub membership changes under the same lock as the subscriber list
        with self._lock:
            if not self._subscribers:
                self._hub.register(self)
            self._subscribers.append(callback)
        snapshot = self._fetch()
        self._value = snapshot
        callback(list(snapshot))

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)
                if not self._subscribers:
                    self._hub.unregister(self)

        return unsubscribe

    @property
    def has_subscribers(self) -> bool:
        with self._lock:
            return bool(self._subscribers)

    def refresh(self) -> None:
        """Re-run the query and push the result to every subscriber."""

        with self._lock:
            subscribers = list(self._subscribers)
        if not subscribers:
            return
        snapshot = self._fetch()
        self._value = snapshot
        logger.debug("Live query %s emitting %d rows", self.name, len(snapshot))
        for callback in subscribers:
            callback(list(snapshot))


class QueryHub:
    """Registry of subscribed live queries, notified by table name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._queries: List[LiveQuery] = []

    def register(self, query: LiveQuery) -> None:
        with self._lock:
            if query not in self._queries:
                self._queries.append(query)

    def unregister(self, query: LiveQuery) -> None:
        with self._lock:
            if query in self._queries:
                self._queries.remove(query)

    def active(self) -> List[LiveQuery]:
        with self._lock:
            return list(self._queries)

    def notify(self, tables: Iterable[str]) -> None:
        """Refresh every live query that reads one of ``tables``."""

        changed = set(tables)
        for query in self.active():
            if query.tables & changed:
                query.refresh()

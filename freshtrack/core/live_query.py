"""
Requêtes vivantes : ré-exécutées après chaque écriture sur les tables observées
"""

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, Callable, Dict, Iterable, Optional, Set, TypeVar

from sqlalchemy.orm import Session

from freshtrack.core.flow import ErrorObserver, Flow, Subscription, deliver, deliver_error
from freshtrack.utils.exceptions import StorageError

if TYPE_CHECKING:
    from freshtrack.core.database import Database

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InvalidationTracker:
    """
    Registre des observateurs par table.

    ``notify`` est appelé depuis le worker de la base après chaque commit ;
    les callbacks doivent donc être thread-safe.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._observers: Dict[int, tuple] = {}
        self._next_id = 0

    def add_observer(self, tables: Iterable[str], callback: Callable[[], None]) -> int:
        with self._lock:
            observer_id = self._next_id
            self._next_id += 1
            self._observers[observer_id] = (frozenset(tables), callback)
            return observer_id

    def remove_observer(self, observer_id: int):
        with self._lock:
            self._observers.pop(observer_id, None)

    def notify(self, tables: Iterable[str]):
        changed: Set[str] = set(tables)
        with self._lock:
            callbacks = [
                callback
                for observed, callback in self._observers.values()
                if observed & changed
            ]

        for callback in callbacks:
            callback()

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)


class LiveQuery(Flow[T]):
    """
    Flux dont chaque abonné possède son propre curseur : la requête est
    exécutée à l'abonnement puis à chaque invalidation d'une table observée.
    """

    def __init__(
        self,
        database: "Database",
        tables: Iterable[str],
        fetch: Callable[[Session], T],
        name: str = "live_query",
    ):
        self._database = database
        self._tables = frozenset(tables)
        self._fetch = fetch
        self.name = name

    def subscribe(
        self,
        observer: Callable[[T], None],
        on_error: Optional[ErrorObserver] = None,
    ) -> Subscription:
        return _LiveQueryCursor(self, observer, on_error).start()


class _LiveQueryCursor:
    def __init__(
        self,
        query: LiveQuery,
        observer: Callable,
        on_error: Optional[ErrorObserver] = None,
    ):
        self._query = query
        self._observer = observer
        self._on_error = on_error
        self._loop = asyncio.get_running_loop()
        self._dirty = False
        self._task = None
        self._observer_id = None
        self.subscription = Subscription(on_dispose=self._stop)

    def start(self) -> Subscription:
        tracker = self._query._database.invalidation_tracker
        self._observer_id = tracker.add_observer(
            self._query._tables, self._on_invalidated
        )
        self._schedule()
        return self.subscription

    def _on_invalidated(self):
        try:
            self._loop.call_soon_threadsafe(self._schedule)
        except RuntimeError:
            # Boucle fermée sans désabonnement préalable
            logger.debug(f"Dropping invalidation for closed loop ({self._query.name})")

    def _schedule(self):
        if self.subscription.disposed:
            return
        self._dirty = True
        if self._task is None or self._task.done():
            self._task = self._loop.create_task(self._run())

    async def _run(self):
        while self._dirty and not self.subscription.disposed:
            self._dirty = False
            try:
                result = await self._query._database.run(self._query._fetch)
            except Exception as e:
                # Le curseur reste inscrit : la prochaine invalidation relance la requête
                logger.error(
                    f"Live query {self._query.name} failed: {e}", exc_info=True
                )
                if not isinstance(e, StorageError):
                    error = StorageError(f"Live query {self._query.name} failed: {e}")
                    error.__cause__ = e
                    e = error
                deliver_error(self._on_error, e, self.subscription)
                continue

            logger.debug(f"Live query {self._query.name} re-evaluated")
            deliver(self._observer, result, self.subscription)

    def _stop(self):
        if self._observer_id is not None:
            self._query._database.invalidation_tracker.remove_observer(
                self._observer_id
            )
        if self._task is not None and not self._task.done():
            self._task.cancel()

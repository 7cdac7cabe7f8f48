import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import Callable, Iterable, Optional, TypeVar

from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from freshtrack.core.live_query import InvalidationTracker, LiveQuery
from freshtrack.utils.exceptions import StorageError

logger = logging.getLogger(__name__)

Base = declarative_base()

T = TypeVar("T")


class Database:
    """
    Handle explicite sur le stockage local (SQLite via SQLAlchemy).

    Toutes les opérations passent par un worker unique : les écritures sont
    sérialisées et une lecture lancée après une écriture la voit toujours.
    Cycle de vie : ``await open()`` puis ``await close()``.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[Engine] = None
        self.invalidation_tracker = InvalidationTracker()
        self._session_factory: Optional[sessionmaker] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._open_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    async def open(self) -> "Database":
        async with self._open_lock:
            if self.is_open:
                return self

            self.engine = _build_engine(self.url, self.echo)
            self._session_factory = sessionmaker(
                bind=self.engine, autoflush=False, expire_on_commit=False
            )
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="freshtrack-db"
            )
            try:
                await self.run_in_worker(self._initialize)
            except Exception as e:
                logger.error(f"Database open failed: {self.url}: {e}", exc_info=True)
                await self._release()
                if isinstance(e, SQLAlchemyError):
                    raise StorageError(f"Cannot open database {self.url}: {e}") from e
                raise

            logger.info(f"Database opened: {self.url}")
            return self

    async def close(self):
        async with self._open_lock:
            if not self.is_open:
                return

            await self._release()
            logger.info(f"Database closed: {self.url}")

    async def _release(self):
        """Arrête le worker puis libère le moteur, hors de la boucle d'événements.

        Les tâches déjà soumises au worker se terminent avant la libération.
        """
        executor, self._executor = self._executor, None
        engine = self.engine

        def shutdown():
            if executor is not None:
                executor.shutdown(wait=True)
            if engine is not None:
                engine.dispose()

        try:
            await asyncio.to_thread(shutdown)
        finally:
            self.engine = None
            self._session_factory = None

    async def __aenter__(self) -> "Database":
        return await self.open()

    async def __aexit__(self, *exc):
        await self.close()

    def _initialize(self):
        from freshtrack.models import CategoryEntity
        from freshtrack.models.category import default_categories

        Base.metadata.create_all(bind=self.engine)

        with self.session() as session:
            count = session.scalar(select(func.count()).select_from(CategoryEntity))
            if count:
                logger.debug("Categories already present, skipping seed")
                return

            for category in default_categories():
                session.merge(category)
            session.commit()
            logger.info("Default categories seeded")

        self.invalidation_tracker.notify([CategoryEntity.__tablename__])

    @contextmanager
    def session(self):
        if self._session_factory is None:
            raise RuntimeError("Database is not open")

        session: Session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    async def run_in_worker(self, fn: Callable[..., T], *args) -> T:
        if self._executor is None:
            raise RuntimeError("Database is not open")

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, lambda: fn(*args))

    async def run(self, fetch: Callable[[Session], T]) -> T:
        """Exécute une lecture dans une session, sur le worker."""

        def work():
            with self.session() as session:
                try:
                    return fetch(session)
                except SQLAlchemyError as e:
                    raise StorageError(f"Read failed: {e}") from e

        return await self.run_in_worker(work)

    def live_query(
        self, tables: Iterable[str], fetch: Callable[[Session], T], name: str
    ) -> LiveQuery:
        return LiveQuery(self, tables, fetch, name=name)


def _build_engine(url: str, echo: bool) -> Engine:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)

    return create_engine(url, echo=echo, pool_pre_ping=True)

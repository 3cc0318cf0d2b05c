"""
Event store: durable CRUD over the events table
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, TypeVar

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from eventlog.core.db import Base, build_engine, build_session_factory
from eventlog.core.errors import EventNotFoundError, PersistenceError, StorageUnavailableError
from eventlog.models import Event
from eventlog.schemas.event import EventFields, EventRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventStore:
    """SQLite-backed store that owns event identity.

    Every operation is one transaction. All database work runs on a single
    worker thread, so calls issued concurrently from different screens are
    applied one after another and never interleave partial writes.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._init_lock: Optional[asyncio.Lock] = None
        self._init_lock_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def is_initialized(self) -> bool:
        return self._session_factory is not None

    async def initialize(self) -> None:
        """Open the database and create the events table if absent.

        Safe to call more than once.

        Raises:
            StorageUnavailableError: If the database cannot be opened.
        """
        async with self._get_init_lock():
            if self.is_initialized:
                return

            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="event-store")

            def _open() -> Engine:
                engine = build_engine(self.database_url, echo=self.echo)
                try:
                    Base.metadata.create_all(bind=engine)
                except SQLAlchemyError:
                    engine.dispose()
                    raise
                return engine

            try:
                engine = await self._run(_open)
            except SQLAlchemyError as e:
                logger.error(f"Error opening database {self.database_url}: {e}")
                raise StorageUnavailableError() from e

            self._engine = engine
            self._session_factory = build_session_factory(engine)
            logger.info(f"Event store initialized at {self.database_url}")

    async def close(self) -> None:
        """Dispose the connection pool and stop the worker thread"""
        if self._engine is not None:
            await self._run(self._engine.dispose)
        self._engine = None
        self._session_factory = None
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        logger.info("Event store closed")

    async def insert(self, fields: EventFields) -> int:
        """Insert a new event and return its assigned id"""
        factory = self._require_factory()

        def _insert() -> int:
            with factory() as db:
                event = Event(
                    title=fields.title,
                    description=fields.description,
                    date=fields.date,
                    photo=fields.photo,
                    audio_uri=fields.audio_uri,
                )
                db.add(event)
                db.commit()
                db.refresh(event)
                return event.id

        event_id = await self._execute("save the event", _insert)
        logger.info(f"Inserted event {event_id}")
        return event_id

    async def update(self, event_id: int, fields: EventFields) -> None:
        """Replace all mutable fields of an event.

        Raises:
            EventNotFoundError: If no event has this id.
        """
        factory = self._require_factory()

        def _update() -> None:
            with factory() as db:
                event = db.query(Event).filter(Event.id == event_id).first()
                if not event:
                    raise EventNotFoundError(event_id)
                event.title = fields.title
                event.description = fields.description
                event.date = fields.date
                event.photo = fields.photo
                event.audio_uri = fields.audio_uri
                db.commit()

        await self._execute("update the event", _update)
        logger.info(f"Updated event {event_id}")

    async def delete_one(self, event_id: int) -> None:
        """Delete a single event.

        Raises:
            EventNotFoundError: If no event has this id.
        """
        factory = self._require_factory()

        def _delete() -> None:
            with factory() as db:
                event = db.query(Event).filter(Event.id == event_id).first()
                if not event:
                    raise EventNotFoundError(event_id)
                db.delete(event)
                db.commit()

        await self._execute("delete the event", _delete)
        logger.info(f"Deleted event {event_id}")

    async def delete_all(self) -> int:
        """Delete every event and return how many rows were removed"""
        factory = self._require_factory()

        def _delete_all() -> int:
            with factory() as db:
                count = db.query(Event).delete()
                db.commit()
                return count

        count = await self._execute("delete all events", _delete_all)
        logger.info(f"Deleted all events ({count} rows)")
        return count

    async def get(self, event_id: int) -> EventRecord:
        """Return a single event.

        Raises:
            EventNotFoundError: If no event has this id.
        """
        factory = self._require_factory()

        def _get() -> EventRecord:
            with factory() as db:
                event = db.query(Event).filter(Event.id == event_id).first()
                if not event:
                    raise EventNotFoundError(event_id)
                return self._to_record(event)

        return await self._execute("load the event", _get)

    async def list_recent(self, limit: int) -> List[EventRecord]:
        """Return up to ``limit`` events, most recently created first"""
        factory = self._require_factory()

        def _list() -> List[EventRecord]:
            with factory() as db:
                events = db.query(Event).order_by(Event.id.desc()).limit(limit).all()
                return [self._to_record(event) for event in events]

        return await self._execute("load recent events", _list)

    async def list_all(self) -> List[EventRecord]:
        """Return every event in insertion order"""
        factory = self._require_factory()

        def _list() -> List[EventRecord]:
            with factory() as db:
                events = db.query(Event).order_by(Event.id).all()
                return [self._to_record(event) for event in events]

        return await self._execute("load events", _list)

    def _get_init_lock(self) -> asyncio.Lock:
        # asyncio locks belong to one loop; a store reused from a new loop gets a new lock
        loop = asyncio.get_running_loop()
        if self._init_lock is None or self._init_lock_loop is not loop:
            self._init_lock = asyncio.Lock()
            self._init_lock_loop = loop
        return self._init_lock

    def _require_factory(self) -> sessionmaker:
        if self._session_factory is None:
            raise StorageUnavailableError("Event store is not initialized")
        return self._session_factory

    async def _run(self, fn: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, fn)

    async def _execute(self, operation: str, fn: Callable[[], T]) -> T:
        try:
            return await self._run(fn)
        except SQLAlchemyError as e:
            logger.error(f"Error trying to {operation}: {e}")
            raise PersistenceError(operation) from e

    @staticmethod
    def _to_record(event: Event) -> EventRecord:
        return EventRecord(
            id=event.id,
            title=event.title or "",
            description=event.description or "",
            date=event.date,
            photo=event.photo,
            audio_uri=event.audio_uri,
        )

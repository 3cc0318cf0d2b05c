"""
Event list screen: search over every event and guarded delete-all
"""

import logging
from typing import Optional, Tuple

from eventlog.core.errors import EventLogError
from eventlog.schemas.event import EventRecord
from eventlog.screens.base import Screen
from eventlog.services.deletion_guard import DeletionGuard
from eventlog.services.event_cache import EventProjection
from eventlog.services.event_store import EventStore
from eventlog.services.scheduling import Scheduler

logger = logging.getLogger(__name__)


class EventListScreen(Screen):
    def __init__(
        self,
        store: EventStore,
        scheduler: Scheduler,
        countdown: Optional[int] = None,
        tick_seconds: Optional[float] = None,
    ):
        super().__init__()
        self.store = store
        self.projection = EventProjection(store)
        self.guard = DeletionGuard(
            store,
            scheduler,
            countdown=countdown,
            tick_seconds=tick_seconds,
        )

    @property
    def search_query(self) -> str:
        return self.projection.query

    @property
    def visible_events(self) -> Tuple[EventRecord, ...]:
        return self.projection.filtered

    @property
    def countdown_message(self) -> str:
        if self.guard.armed:
            return "Deletion is enabled."
        return f"Deletion will be enabled in {self.guard.countdown} seconds."

    async def on_focus(self) -> None:
        if await self.ensure_storage(self.store):
            await self.attempt(self.projection.refresh())

    async def on_unmount(self) -> None:
        self.guard.cancel()

    def search(self, query: str) -> Tuple[EventRecord, ...]:
        return self.projection.apply_filter(query)

    def open_delete_all(self) -> None:
        if self.require_available():
            self.guard.open()

    def cancel_delete_all(self) -> None:
        self.guard.cancel()

    async def confirm_delete_all(self) -> Optional[int]:
        if not self.guard.armed:
            return None
        try:
            count = await self.guard.confirm()
        except EventLogError as e:
            self.notify_error(e)
            return None
        self.notify(f"Deleted {count} events")
        await self.attempt(self.projection.refresh())
        return count

"""
Emergency Event Log
Application entry point
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from eventlog.core.config import settings
from eventlog.schemas.event import DraftFragment, EventRecord
from eventlog.screens import EventDetailsScreen, EventListScreen, HomeScreen, RecordAudioScreen
from eventlog.services.event_store import EventStore
from eventlog.services.media import MediaCapability
from eventlog.services.scheduling import AsyncioScheduler, Scheduler

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@dataclass
class EmergencyLogApp:
    """Services shared by every screen"""
    store: EventStore
    media: MediaCapability
    scheduler: Scheduler
    home: HomeScreen
    event_list: EventListScreen

    def details_screen(self, event: EventRecord) -> EventDetailsScreen:
        return EventDetailsScreen(self.store, self.media, event)

    def recorder_screen(self, payload: Optional[DraftFragment] = None) -> RecordAudioScreen:
        return RecordAudioScreen(self.media, payload)

    async def start(self) -> None:
        """Open the store and mount the tab screens"""
        await self.store.initialize()
        await self.home.mount()
        await self.event_list.mount()
        logger.info("Application started")

    async def shutdown(self) -> None:
        await self.event_list.unmount()
        await self.home.unmount()
        await self.store.close()
        logger.info("Application shutdown")

def create_app(
    media: MediaCapability,
    database_url: Optional[str] = None,
    scheduler: Optional[Scheduler] = None,
) -> EmergencyLogApp:
    store = EventStore(database_url or settings.DATABASE_URL, echo=settings.SQL_ECHO)
    scheduler = scheduler or AsyncioScheduler()
    return EmergencyLogApp(
        store=store,
        media=media,
        scheduler=scheduler,
        home=HomeScreen(store, media),
        event_list=EventListScreen(store, scheduler),
    )

async def check_storage(database_url: str) -> int:
    """Open the event database and report how many events it holds"""
    store = EventStore(database_url, echo=settings.SQL_ECHO)
    await store.initialize()
    try:
        events = await store.list_all()
    finally:
        await store.close()
    logger.info(f"{len(events)} events stored in {database_url}")
    return len(events)

if __name__ == "__main__":
    asyncio.run(check_storage(settings.DATABASE_URL))

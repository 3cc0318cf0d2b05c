"""
Home screen: event form plus the most recent events
"""

import logging
from datetime import datetime
from typing import Callable, Optional, Tuple, Union

from eventlog.core.config import settings
from eventlog.core.errors import EventLogError, EventNotFoundError
from eventlog.schemas.event import DraftFragment, EventRecord
from eventlog.screens.base import Screen
from eventlog.services.event_cache import EventProjection
from eventlog.services.event_store import EventStore
from eventlog.services.form_session import FormSession
from eventlog.services.media import MediaCapability, call_media
from eventlog.utils.formatting import format_audio_duration, to_stored_date

logger = logging.getLogger(__name__)


class HomeScreen(Screen):
    def __init__(
        self,
        store: EventStore,
        media: MediaCapability,
        recent_limit: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        super().__init__()
        self.store = store
        self.media = media
        self.projection = EventProjection(store, limit=recent_limit or settings.RECENT_EVENTS_LIMIT)
        self.form = FormSession(store, clock=clock)
        self.audio_duration: Optional[int] = None

    @property
    def events(self) -> Tuple[EventRecord, ...]:
        return self.projection.snapshot

    @property
    def submit_label(self) -> str:
        return "Update event" if self.form.is_editing else "Add event"

    @property
    def selected_date(self) -> str:
        return to_stored_date(self.form.draft.date)

    @property
    def audio_duration_label(self) -> Optional[str]:
        if not self.form.draft.audio_uri:
            return None
        return format_audio_duration(self.audio_duration) or "Loading..."

    async def on_focus(self) -> None:
        if await self.ensure_storage(self.store):
            await self.attempt(self.projection.refresh())

    async def submit(self) -> Optional[int]:
        if not self.require_available():
            return None
        editing = self.form.is_editing
        try:
            event_id = await self.form.submit()
        except EventNotFoundError as e:
            # Edited event was deleted elsewhere; keep the draft and resync the list
            self.notify_error(e)
            await self.attempt(self.projection.refresh())
            return None
        except EventLogError as e:
            self.notify_error(e)
            return None
        if event_id is None:
            # an earlier tap is still writing this draft
            return None

        self.audio_duration = None
        self.notify("Event updated" if editing else "Event added")
        await self.attempt(self.projection.refresh())
        return event_id

    def cancel(self) -> None:
        self.form.reset()
        self.audio_duration = None

    def set_title(self, title: str) -> None:
        self.form.draft.title = title

    def set_description(self, description: str) -> None:
        self.form.draft.description = description

    def set_date(self, value: datetime) -> None:
        self.form.draft.date = value

    async def edit(self, event: EventRecord) -> None:
        self.form.load(event)
        self.audio_duration = None
        if event.audio_uri:
            await self._load_audio_duration(event.audio_uri)

    async def delete(self, event_id: int) -> None:
        if not self.require_available():
            return
        try:
            await self.store.delete_one(event_id)
        except EventNotFoundError:
            logger.info(f"Event {event_id} was already deleted")
        except EventLogError as e:
            self.notify_error(e)
            return
        await self.attempt(self.projection.refresh())

    async def select_photo(self) -> Optional[str]:
        uri = await self.attempt(call_media("pick a photo", self.media.pick_photo))
        if uri:
            self.form.draft.photo = uri
        return uri

    def open_recorder(self) -> DraftFragment:
        """Payload for navigating to the recorder"""
        return self.form.navigation_payload()

    async def return_from_recorder(self, payload: Union[DraftFragment, dict]) -> None:
        previous_uri = self.form.draft.audio_uri
        self.form.merge_media_result(payload)
        audio_uri = self.form.draft.audio_uri
        if audio_uri != previous_uri:
            self.audio_duration = None
            if audio_uri:
                await self._load_audio_duration(audio_uri)

    async def _load_audio_duration(self, uri: str) -> None:
        self.audio_duration = await self.attempt(
            call_media("read the audio duration", self.media.duration_millis, uri)
        )

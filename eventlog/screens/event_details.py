"""
Event details screen
"""

from typing import Optional

from eventlog.core.errors import EventLogError, EventNotFoundError
from eventlog.schemas.event import EventRecord
from eventlog.screens.base import Screen
from eventlog.services.event_store import EventStore
from eventlog.services.media import MediaCapability, MediaSession


class EventDetailsScreen(Screen):
    """Shows one event and plays its recording.

    Playback is released when the screen unmounts.
    """

    def __init__(self, store: EventStore, media: MediaCapability, event: EventRecord):
        super().__init__()
        self.store = store
        self.event: Optional[EventRecord] = event
        self.session = MediaSession(media, audio_uri=event.audio_uri)

    @property
    def has_photo(self) -> bool:
        return bool(self.event and self.event.photo)

    @property
    def photo_label(self) -> str:
        return "" if self.has_photo else "No image available"

    @property
    def can_play(self) -> bool:
        return bool(self.event and self.event.audio_uri)

    async def on_focus(self) -> None:
        if self.event is None:
            return
        try:
            self.event = await self.store.get(self.event.id)
        except EventNotFoundError as e:
            self.event = None
            self.notify_error(e)
            await self.session.release()
            return
        except EventLogError as e:
            # Keep the previous copy on screen
            self.notify_error(e)
            return
        self.session.audio_uri = self.event.audio_uri

    async def play_audio(self) -> None:
        if self.can_play:
            await self.attempt(self.session.play(self.event.audio_uri))

    async def stop_audio(self) -> None:
        await self.attempt(self.session.stop_playback())

    async def on_unmount(self) -> None:
        await self.attempt(self.session.release())

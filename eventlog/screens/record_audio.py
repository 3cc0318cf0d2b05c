"""
Voice recorder screen
"""

from typing import Optional, Union

from eventlog.schemas.event import DraftFragment
from eventlog.screens.base import Screen
from eventlog.services.media import MediaCapability, MediaSession
from eventlog.utils.formatting import format_record_time


class RecordAudioScreen(Screen):
    """Records, plays back and deletes the draft's voice note.

    Entered with the draft's navigation payload; ``save()`` returns the
    payload to merge back, carrying only the audio reference.
    """

    def __init__(self, media: MediaCapability, payload: Union[DraftFragment, dict, None] = None):
        super().__init__()
        if isinstance(payload, dict):
            payload = DraftFragment.model_validate(payload)
        self.payload = payload or DraftFragment()
        self.session = MediaSession(media, audio_uri=self.payload.audio_uri)
        self.record_millis = 0

    @property
    def audio_uri(self) -> Optional[str]:
        return self.session.audio_uri

    @property
    def record_time(self) -> str:
        return format_record_time(self.record_millis)

    @property
    def can_start(self) -> bool:
        return not self.session.is_recording

    @property
    def can_stop(self) -> bool:
        return self.session.is_recording

    @property
    def can_delete(self) -> bool:
        return bool(self.audio_uri) or self.session.is_recording

    @property
    def can_play(self) -> bool:
        return bool(self.audio_uri) and not self.session.is_recording

    @property
    def can_stop_playback(self) -> bool:
        return bool(self.audio_uri) and self.session.is_playing

    @property
    def can_save(self) -> bool:
        return bool(self.audio_uri) or self.session.is_recording

    def on_recording_status(self, duration_millis: int) -> None:
        """Progress callback from the platform recorder"""
        self.record_millis = duration_millis

    async def start_recording(self) -> None:
        self.record_millis = 0
        await self.attempt(self.session.start_recording())

    async def stop_recording(self) -> None:
        await self.attempt(self.session.stop_recording())

    async def delete_recording(self) -> None:
        await self.attempt(self.session.delete_recording())
        if not self.audio_uri:
            self.record_millis = 0

    async def play(self) -> None:
        await self.attempt(self.session.play())

    async def stop_playback(self) -> None:
        await self.attempt(self.session.stop_playback())

    async def save(self) -> DraftFragment:
        """Stop any active recording and build the payload for the form"""
        if self.session.is_recording:
            await self.stop_recording()
        return DraftFragment(audio_uri=self.audio_uri)

    async def on_unmount(self) -> None:
        await self.attempt(self.session.release())

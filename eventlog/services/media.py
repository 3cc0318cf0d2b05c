"""
Media capability contract and scoped recording/playback handles
"""

import logging
from typing import Any, Awaitable, Callable, Optional, Protocol, TypeVar

from eventlog.core.errors import MediaUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MediaCapability(Protocol):
    """Platform photo/audio services. URIs are opaque to the event log."""

    async def pick_photo(self) -> Optional[str]: ...

    async def start_recording(self) -> Any: ...

    async def stop_recording(self, handle: Any) -> str: ...

    async def play(self, uri: str) -> Any: ...

    async def stop(self, handle: Any) -> None: ...

    async def delete_resource(self, uri: str) -> None: ...

    async def duration_millis(self, uri: str) -> Optional[int]: ...


async def call_media(action: str, fn: Callable[..., Awaitable[T]], *args: Any) -> T:
    """Call the media capability, reporting any failure as MediaUnavailableError"""
    try:
        return await fn(*args)
    except MediaUnavailableError:
        raise
    except Exception as e:
        logger.error(f"Error trying to {action}: {e}")
        raise MediaUnavailableError(action, str(e)) from e


class MediaSession:
    """Holds at most one recording and one playback handle for a screen.

    ``release()`` stops both and is called on explicit stop and on unmount.
    Used as an async context manager it also runs on every exit path.
    """

    def __init__(self, media: MediaCapability, audio_uri: Optional[str] = None):
        self.media = media
        self.audio_uri = audio_uri
        self._recording: Any = None
        self._playback: Any = None

    @property
    def is_recording(self) -> bool:
        return self._recording is not None

    @property
    def is_playing(self) -> bool:
        return self._playback is not None

    async def __aenter__(self) -> "MediaSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.release()

    async def start_recording(self) -> None:
        if self.is_recording:
            return
        await self.stop_playback()
        self._recording = await call_media("start recording", self.media.start_recording)
        logger.info("Recording started")

    async def stop_recording(self) -> Optional[str]:
        """Stop the active recording and keep its URI"""
        if not self.is_recording:
            return self.audio_uri
        handle, self._recording = self._recording, None
        self.audio_uri = await call_media("stop recording", self.media.stop_recording, handle)
        logger.info(f"Recording saved to {self.audio_uri}")
        return self.audio_uri

    async def play(self, uri: Optional[str] = None) -> None:
        uri = uri or self.audio_uri
        if not uri:
            raise MediaUnavailableError("play the recording", "no recording available")
        if self.is_recording:
            raise MediaUnavailableError("play the recording", "recording in progress")
        await self.stop_playback()
        self._playback = await call_media("play the recording", self.media.play, uri)

    async def stop_playback(self) -> None:
        if not self.is_playing:
            return
        handle, self._playback = self._playback, None
        await call_media("stop playback", self.media.stop, handle)

    async def delete_recording(self) -> None:
        """Release every handle, then delete the recorded resource"""
        await self.release()
        if self.audio_uri:
            uri = self.audio_uri
            await call_media("delete the recording", self.media.delete_resource, uri)
            self.audio_uri = None
            logger.info(f"Deleted recording {uri}")

    async def release(self) -> None:
        """Stop recording and playback; both are attempted even if one fails"""
        try:
            await self.stop_recording()
        finally:
            await self.stop_playback()

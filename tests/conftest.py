"""
Shared test fixtures
"""

import asyncio
from typing import Callable, List, Optional

import pytest

from eventlog.core.errors import PersistenceError
from eventlog.services.event_store import EventStore


class ManualTimer:
    def __init__(self, interval: float, callback: Callable[[], None], due: float):
        self.interval = interval
        self.callback = callback
        self.due = due
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when the test advances it"""

    def __init__(self):
        self.now = 0.0
        self.timers: List[ManualTimer] = []

    @property
    def active_timers(self) -> List[ManualTimer]:
        return [t for t in self.timers if not t.cancelled]

    def call_every(self, interval: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(interval, callback, due=self.now + interval)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self.active_timers if t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.now = timer.due
            timer.due += timer.interval
            timer.callback()
        self.now = target


class FakeMedia:
    """In-memory media capability that records every call"""

    def __init__(self):
        self.resources = {}
        self.active_recordings = set()
        self.active_playbacks = {}
        self.calls: List[tuple] = []
        self.failing = set()
        self.photo_uri: Optional[str] = "file:///photos/kitchen.jpg"
        self._counter = 0

    def _check(self, name: str) -> None:
        self.calls.append((name,))
        if name in self.failing:
            raise RuntimeError(f"{name} failed")

    async def pick_photo(self):
        self._check("pick_photo")
        return self.photo_uri

    async def start_recording(self):
        self._check("start_recording")
        self._counter += 1
        handle = f"rec-{self._counter}"
        self.active_recordings.add(handle)
        return handle

    async def stop_recording(self, handle):
        self._check("stop_recording")
        self.active_recordings.discard(handle)
        uri = f"file:///audio/{handle}.m4a"
        self.resources[uri] = 65_000
        return uri

    async def play(self, uri):
        self._check("play")
        if uri not in self.resources:
            raise FileNotFoundError(uri)
        self._counter += 1
        handle = f"play-{self._counter}"
        self.active_playbacks[handle] = uri
        return handle

    async def stop(self, handle):
        self._check("stop")
        self.active_playbacks.pop(handle, None)

    async def delete_resource(self, uri):
        self._check("delete_resource")
        self.calls[-1] = ("delete_resource", uri, len(self.active_playbacks), len(self.active_recordings))
        self.resources.pop(uri, None)

    async def duration_millis(self, uri):
        self._check("duration_millis")
        return self.resources.get(uri)


class FailingStore:
    """Store stand-in whose every call fails at the database level"""

    def __init__(self):
        self.calls = []

    async def initialize(self):
        self.calls.append("initialize")

    async def _fail(self, name):
        self.calls.append(name)
        raise PersistenceError(name)

    async def insert(self, fields):
        await self._fail("insert")

    async def update(self, event_id, fields):
        await self._fail("update")

    async def delete_one(self, event_id):
        await self._fail("delete_one")

    async def delete_all(self):
        await self._fail("delete_all")

    async def list_recent(self, limit):
        await self._fail("list_recent")

    async def list_all(self):
        await self._fail("list_all")


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'test_events.db'}"


@pytest.fixture
def store(database_url):
    """Create an initialized event store"""
    store = EventStore(database_url)
    asyncio.run(store.initialize())
    try:
        yield store
    finally:
        asyncio.run(store.close())


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def media():
    return FakeMedia()


@pytest.fixture
def failing_store():
    return FailingStore()

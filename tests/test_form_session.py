"""
Tests for the create-or-edit form session
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from eventlog.core.errors import EventNotFoundError, PersistenceError
from eventlog.schemas.event import DraftFragment, EventFields
from eventlog.services.event_cache import EventProjection
from eventlog.services.form_session import FormSession

FIXED_NOW = datetime(2024, 5, 17, 22, 45, 30)

@pytest.fixture
def session(store):
    return FormSession(store, projections=[EventProjection(store)], clock=lambda: FIXED_NOW)

def test_new_session_is_empty_create_mode(session):
    assert session.draft.title == ""
    assert session.draft.description == ""
    assert session.draft.date == FIXED_NOW
    assert session.draft.photo is None
    assert session.draft.audio_uri is None
    assert not session.is_editing

def test_merge_keeps_fields_missing_from_payload(session):
    session.draft.title = "A"
    session.draft.description = "B"

    draft = session.merge_media_result({"audioURI": "x"})

    assert draft.title == "A"
    assert draft.description == "B"
    assert draft.audio_uri == "x"
    assert draft.date == FIXED_NOW

def test_merge_explicit_none_clears_field(session):
    session.draft.audio_uri = "file:///audio/old.m4a"
    session.merge_media_result(DraftFragment(audio_uri=None))
    assert session.draft.audio_uri is None

def test_merge_parses_iso_dates(session):
    session.merge_media_result({"date": "2024-01-02T10:30:00.000Z", "editingEventId": 3})
    assert session.draft.date == datetime(2024, 1, 2, 10, 30, tzinfo=timezone.utc)
    assert session.draft.editing_event_id == 3

def test_navigation_payload_round_trip(session):
    session.draft.title = "Fire"
    session.draft.photo = "file:///photos/1.jpg"
    payload = session.navigation_payload()

    assert payload.title == "Fire"
    assert payload.date == FIXED_NOW.isoformat()
    assert payload.model_dump(by_alias=True)["editingEventId"] is None

    # user keeps typing while the recorder is open
    session.draft.title = "Kitchen fire"
    session.merge_media_result(DraftFragment(audio_uri="file:///audio/1.m4a"))
    assert session.draft.title == "Kitchen fire"
    assert session.draft.photo == "file:///photos/1.jpg"

def test_submit_inserts_and_resets(session, store):
    session.draft.title = "Fire"
    session.draft.description = "Kitchen"

    event_id = asyncio.run(session.submit())

    events = asyncio.run(store.list_all())
    assert [(e.id, e.title, e.date) for e in events] == [(event_id, "Fire", "2024-05-17")]
    assert session.draft.title == ""
    assert not session.is_editing
    assert [e.id for e in session.projections[0].snapshot] == [event_id]

def test_submit_updates_loaded_event(session, store):
    async def scenario():
        event_id = await store.insert(EventFields(title="Fire", description="Kitchen", date="2024-01-01"))
        other_id = await store.insert(EventFields(title="Flood", date="2024-01-02"))
        session.load(await store.get(event_id))
        session.draft.description = "Kitchen and hallway"
        returned = await session.submit()
        return event_id, other_id, returned, await store.list_all()

    event_id, other_id, returned, events = asyncio.run(scenario())
    assert returned == event_id
    assert len(events) == 2
    updated = next(e for e in events if e.id == event_id)
    assert updated.description == "Kitchen and hallway"
    assert updated.date == "2024-01-01"
    assert next(e for e in events if e.id == other_id).title == "Flood"

def test_load_sets_editing_id(session, store):
    event_id = asyncio.run(store.insert(EventFields(title="Fire", date="2024-01-01", photo="p")))
    draft = session.load(asyncio.run(store.get(event_id)))
    assert draft.editing_event_id == event_id
    assert draft.photo == "p"
    assert draft.date == datetime(2024, 1, 1)

    session.load(None)
    assert not session.is_editing

def test_date_truncated_only_at_submit(session, store):
    session.draft.date = datetime(2024, 3, 9, 23, 59, 59)
    assert session.draft.date.hour == 23
    assert session.to_fields().date == "2024-03-09"

def test_aware_date_uses_local_calendar_day(session):
    aware = datetime(2024, 3, 9, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    session.draft.date = aware
    assert session.to_fields().date == aware.astimezone().date().isoformat()

def test_failed_submit_keeps_draft(failing_store):
    session = FormSession(failing_store, clock=lambda: FIXED_NOW)
    session.draft.title = "Fire"

    with pytest.raises(PersistenceError):
        asyncio.run(session.submit())
    assert session.draft.title == "Fire"

def test_update_of_deleted_event_keeps_draft(session, store):
    async def scenario():
        event_id = await store.insert(EventFields(title="Fire", date="2024-01-01"))
        session.load(await store.get(event_id))
        await store.delete_one(event_id)
        await session.submit()

    with pytest.raises(EventNotFoundError):
        asyncio.run(scenario())
    assert session.is_editing
    assert session.draft.title == "Fire"
    assert asyncio.run(store.list_all()) == []

def test_reset_clears_everything(session):
    session.merge_media_result({"title": "A", "photo": "p", "audioURI": "x", "editingEventId": 9})
    session.reset()
    assert session.draft.title == ""
    assert session.draft.photo is None
    assert session.draft.audio_uri is None
    assert session.draft.editing_event_id is None

def test_double_submit_writes_once(session, store):
    session.draft.title = "Fire"

    async def scenario():
        return await asyncio.gather(session.submit(), session.submit())

    first, second = asyncio.run(scenario())
    assert second is None
    assert [(e.id, e.title) for e in asyncio.run(store.list_all())] == [(first, "Fire")]
    assert not session.is_submitting

def test_submit_can_retry_after_failure(failing_store, store):
    session = FormSession(failing_store, clock=lambda: FIXED_NOW)
    session.draft.title = "Fire"
    with pytest.raises(PersistenceError):
        asyncio.run(session.submit())

    session.store = store
    event_id = asyncio.run(session.submit())
    assert [e.id for e in asyncio.run(store.list_all())] == [event_id]

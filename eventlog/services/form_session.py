"""
Create-or-edit draft for a single event
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Union

from eventlog.schemas.event import DraftFragment, EventFields, EventRecord
from eventlog.services.event_cache import EventProjection
from eventlog.services.event_store import EventStore
from eventlog.utils.formatting import parse_draft_date, to_stored_date

logger = logging.getLogger(__name__)


@dataclass
class Draft:
    """Unsaved form state. ``date`` keeps full date-time precision."""
    title: str = ""
    description: str = ""
    date: datetime = field(default_factory=datetime.now)
    photo: Optional[str] = None
    audio_uri: Optional[str] = None
    editing_event_id: Optional[int] = None


class FormSession:
    """Owns the single mutable draft used to create or update an event"""

    def __init__(
        self,
        store: EventStore,
        projections: Iterable[EventProjection] = (),
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.projections: List[EventProjection] = list(projections)
        self.clock = clock
        self.draft = self._empty_draft()
        self._submitting = False

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def is_editing(self) -> bool:
        return self.draft.editing_event_id is not None

    def load(self, event: Optional[EventRecord] = None) -> Draft:
        """Pre-populate the draft from an event, or reset to create mode"""
        if event is None:
            return self.reset()

        self.draft = Draft(
            title=event.title,
            description=event.description,
            date=parse_draft_date(event.date),
            photo=event.photo,
            audio_uri=event.audio_uri,
            editing_event_id=event.id,
        )
        logger.info(f"Editing event {event.id}")
        return self.draft

    def merge_media_result(self, fragment: Union[DraftFragment, dict]) -> Draft:
        """Merge the fields carried back by the media-capture flow.

        Fields missing from the payload keep their current draft values. A
        field that is present with ``None`` clears the draft value.
        """
        if isinstance(fragment, dict):
            fragment = DraftFragment.model_validate(fragment)

        changes = fragment.model_dump(exclude_unset=True)
        if "date" in changes:
            changes["date"] = parse_draft_date(changes["date"]) if changes["date"] else self.clock()
        if "title" in changes and changes["title"] is None:
            changes["title"] = ""
        if "description" in changes and changes["description"] is None:
            changes["description"] = ""

        self.draft = replace(self.draft, **changes)
        return self.draft

    def navigation_payload(self) -> DraftFragment:
        """Payload handed forward to the media-capture flow"""
        return DraftFragment(
            title=self.draft.title,
            description=self.draft.description,
            date=self.draft.date.isoformat(),
            photo=self.draft.photo,
            audio_uri=self.draft.audio_uri,
            editing_event_id=self.draft.editing_event_id,
        )

    def to_fields(self) -> EventFields:
        return EventFields(
            title=self.draft.title,
            description=self.draft.description,
            date=to_stored_date(self.draft.date),
            photo=self.draft.photo,
            audio_uri=self.draft.audio_uri,
        )

    async def submit(self) -> Optional[int]:
        """Write the draft to the store and return the event id.

        Returns None without writing while an earlier submit of the draft is
        still pending. On a store error the draft is left untouched so the
        user can retry. Once the write succeeds the draft is reset before
        the attached projections are refreshed.
        """
        if self._submitting:
            logger.warning("Submit ignored, previous submit still pending")
            return None

        fields = self.to_fields()
        editing_event_id = self.draft.editing_event_id

        self._submitting = True
        try:
            if editing_event_id is not None:
                await self.store.update(editing_event_id, fields)
                event_id = editing_event_id
            else:
                event_id = await self.store.insert(fields)
        finally:
            self._submitting = False

        self.reset()
        for projection in self.projections:
            await projection.refresh()
        return event_id

    def reset(self) -> Draft:
        self.draft = self._empty_draft()
        return self.draft

    def _empty_draft(self) -> Draft:
        return Draft(date=self.clock())

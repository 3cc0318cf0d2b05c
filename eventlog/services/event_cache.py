"""
In-memory projections of the event store for list and search screens
"""

import logging
from typing import Optional, Tuple

from eventlog.schemas.event import EventRecord
from eventlog.services.event_store import EventStore

logger = logging.getLogger(__name__)


def matches_query(event: EventRecord, query: str) -> bool:
    """Case-insensitive substring match on title, description and date"""
    needle = query.lower()
    return (
        needle in event.title.lower()
        or needle in event.description.lower()
        or needle in event.date.lower()
    )


class EventProjection:
    """Pull-based snapshot of the store plus a filtered view.

    The snapshot is only replaced by ``refresh()``; owners call it on mount
    and every time their screen regains focus. With a ``limit`` the
    projection holds the most recent events, otherwise all of them.
    """

    def __init__(self, store: EventStore, limit: Optional[int] = None):
        self.store = store
        self.limit = limit
        self.query = ""
        self._snapshot: Tuple[EventRecord, ...] = ()
        self._filtered: Tuple[EventRecord, ...] = ()

    @property
    def snapshot(self) -> Tuple[EventRecord, ...]:
        return self._snapshot

    @property
    def filtered(self) -> Tuple[EventRecord, ...]:
        return self._filtered

    async def refresh(self) -> Tuple[EventRecord, ...]:
        """Re-read the store and replace the snapshot wholesale.

        The current query is re-applied to the new snapshot. If the read
        fails the previous snapshot is kept and the error propagates.
        """
        if self.limit is not None:
            events = await self.store.list_recent(self.limit)
        else:
            events = await self.store.list_all()

        self._snapshot = tuple(events)
        self._filtered = self._compute(self.query)
        logger.debug(f"Projection refreshed with {len(self._snapshot)} events")
        return self._snapshot

    def apply_filter(self, query: str) -> Tuple[EventRecord, ...]:
        """Filter the last snapshot without touching the store"""
        self.query = query or ""
        self._filtered = self._compute(self.query)
        return self._filtered

    def _compute(self, query: str) -> Tuple[EventRecord, ...]:
        # Always derived from the full snapshot, never from the previous result
        if not query:
            return self._snapshot
        return tuple(event for event in self._snapshot if matches_query(event, query))

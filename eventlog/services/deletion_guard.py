"""
Cooldown-gated confirmation for deleting every event
"""

import logging
from enum import Enum
from typing import Iterable, List, Optional

from eventlog.core.config import settings
from eventlog.core.errors import EventLogError
from eventlog.services.event_cache import EventProjection
from eventlog.services.event_store import EventStore
from eventlog.services.scheduling import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class GuardState(Enum):
    CLOSED = "closed"
    CONFIRMING = "confirming"
    ARMED = "armed"


class DeletionGuard:
    """Confirmation prompt that only enables "delete all" after a countdown.

    Every ``open()`` starts from the full countdown; cancelling discards any
    progress. The confirm action runs the bulk delete at most once per
    arming and always leaves the guard closed.
    """

    def __init__(
        self,
        store: EventStore,
        scheduler: Scheduler,
        projections: Iterable[EventProjection] = (),
        countdown: Optional[int] = None,
        tick_seconds: Optional[float] = None,
    ):
        self.store = store
        self.scheduler = scheduler
        self.projections: List[EventProjection] = list(projections)
        self.initial_countdown = settings.DELETE_ALL_COUNTDOWN if countdown is None else countdown
        self.tick_seconds = settings.COUNTDOWN_TICK_SECONDS if tick_seconds is None else tick_seconds

        self.state = GuardState.CLOSED
        self.countdown = self.initial_countdown
        self._timer: Optional[TimerHandle] = None

    @property
    def armed(self) -> bool:
        return self.state is GuardState.ARMED

    @property
    def is_open(self) -> bool:
        return self.state is not GuardState.CLOSED

    def open(self) -> None:
        """Show the prompt and start the countdown from the beginning"""
        self._reset()
        if self.initial_countdown <= 0:
            self.state = GuardState.ARMED
            return
        self.state = GuardState.CONFIRMING
        self._timer = self.scheduler.call_every(self.tick_seconds, self._tick)
        logger.info(f"Delete-all prompt opened, enabled in {self.countdown} seconds")

    def cancel(self) -> None:
        """Close the prompt, discarding countdown progress"""
        self._reset()
        logger.info("Delete-all prompt cancelled")

    async def confirm(self) -> Optional[int]:
        """Delete every event if the guard is armed.

        Returns the number of deleted events, or None when the guard was
        not armed and nothing was deleted. If the delete fails the guard is
        closed and the error propagates; a failed projection refresh after a
        successful delete is only logged.
        """
        if not self.armed:
            logger.warning(f"Delete-all confirm ignored in state {self.state.value}")
            return None

        # Close before awaiting so a second confirm cannot delete again
        self._reset()
        count = await self.store.delete_all()
        logger.info(f"Delete-all confirmed, removed {count} events")

        for projection in self.projections:
            try:
                await projection.refresh()
            except EventLogError as e:
                # the rows are gone either way; callers still get the count
                logger.error(f"Error refreshing events after delete-all: {e}")
        return count

    def _tick(self) -> None:
        if self.state is not GuardState.CONFIRMING:
            return
        self.countdown -= 1
        if self.countdown <= 0:
            self.countdown = 0
            self._cancel_timer()
            self.state = GuardState.ARMED
            logger.info("Delete-all armed")

    def _reset(self) -> None:
        self._cancel_timer()
        self.state = GuardState.CLOSED
        self.countdown = self.initial_countdown

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

"""
Shared screen lifecycle and error reporting
"""

import logging
from typing import Awaitable, List, Optional, TypeVar

from eventlog.core.errors import EventLogError, StorageUnavailableError
from eventlog.schemas.common import Notification
from eventlog.utils.notifications import error_notice, success_notice

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Screen:
    """Lifecycle for a screen controller.

    The UI layer calls ``mount()`` once, ``focus()`` every time the screen
    becomes visible again and ``unmount()`` when it navigates away. Store
    and media errors are caught here and turned into notifications.
    """

    def __init__(self):
        self.mounted = False
        self.available = True
        self.notifications: List[Notification] = []

    @property
    def last_notification(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None

    async def mount(self) -> None:
        self.mounted = True
        await self.on_mount()

    async def focus(self) -> None:
        if self.mounted:
            await self.on_focus()

    async def unmount(self) -> None:
        self.mounted = False
        await self.on_unmount()

    async def on_mount(self) -> None:
        await self.on_focus()

    async def on_focus(self) -> None:
        pass

    async def on_unmount(self) -> None:
        pass

    def notify(self, message: str) -> None:
        self._push(success_notice(message))

    def notify_error(self, error: EventLogError) -> None:
        if isinstance(error, StorageUnavailableError):
            self.available = False
        self._push(error_notice(error))

    async def attempt(self, action: Awaitable[T]) -> Optional[T]:
        """Await an action, converting event log errors into notifications"""
        try:
            return await action
        except EventLogError as e:
            logger.warning(f"{type(self).__name__}: {e}")
            self.notify_error(e)
            return None

    async def ensure_storage(self, store) -> bool:
        """Open the store, retrying when an earlier attempt left it unavailable"""
        try:
            await store.initialize()
        except EventLogError as e:
            logger.warning(f"{type(self).__name__}: {e}")
            self.notify_error(e)
            return False
        if not self.available:
            logger.info(f"{type(self).__name__}: storage available again")
        self.available = True
        return True

    def require_available(self) -> bool:
        if not self.available:
            self.notify_error(StorageUnavailableError())
        return self.available

    def _push(self, notification: Notification) -> None:
        # Results that arrive after the screen went away are dropped
        if not self.mounted:
            logger.debug(f"Dropping notification for unmounted screen: {notification.message}")
            return
        self.notifications.append(notification)

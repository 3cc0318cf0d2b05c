"""
Error taxonomy for the event log
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Error codes surfaced to the user layer"""

    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    MEDIA_UNAVAILABLE = "MEDIA_UNAVAILABLE"


class EventLogError(Exception):
    """Base error with code and user-safe message"""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class StorageUnavailableError(EventLogError):
    """Raised when the backing database cannot be opened or was never initialized"""

    def __init__(self, message: str = "Event storage is unavailable") -> None:
        super().__init__(code=ErrorCode.STORAGE_UNAVAILABLE, message=message)


class PersistenceError(EventLogError):
    """Raised when a read or write fails at the database level"""

    def __init__(self, operation: str) -> None:
        super().__init__(
            code=ErrorCode.PERSISTENCE_ERROR,
            message=f"Could not {operation}",
        )
        self.operation = operation


class EventNotFoundError(EventLogError):
    """Raised when an update or delete targets a missing event"""

    def __init__(self, event_id: int) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class MediaUnavailableError(EventLogError):
    """Raised when capture or playback is denied or fails"""

    def __init__(self, action: str, reason: Optional[str] = None) -> None:
        message = f"Could not {action}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(code=ErrorCode.MEDIA_UNAVAILABLE, message=message)
        self.action = action

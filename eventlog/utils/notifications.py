"""
Standardized user notifications
"""

from typing import Any

from eventlog.core.errors import EventLogError
from eventlog.schemas.common import Notification

def success_notice(message: str, details: Any = None) -> Notification:
    """Create a success notification"""
    return Notification(
        success=True,
        message=message,
        details=details
    )

def error_notice(error: EventLogError, details: Any = None) -> Notification:
    """Create an error notification from an event log error"""
    return Notification(
        success=False,
        message=error.message,
        error_code=error.code.value,
        details=details
    )

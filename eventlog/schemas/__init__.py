"""
Pydantic schemas package
"""

from .common import *
from .event import *

__all__ = [
    "Notification",
    "EventFields",
    "EventRecord",
    "DraftFragment",
]

"""
Screen controllers package
"""

from .event_details import EventDetailsScreen
from .event_list import EventListScreen
from .home import HomeScreen
from .record_audio import RecordAudioScreen

__all__ = ["HomeScreen", "EventListScreen", "EventDetailsScreen", "RecordAudioScreen"]

"""
Event-related Pydantic schemas
"""

from datetime import date as calendar_date
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field, field_validator

class EventFields(BaseModel):
    """Mutable fields of an event, as written to the store"""
    title: str = ""
    description: str = ""
    date: str
    photo: Optional[str] = None
    audio_uri: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("audio_uri", "audioURI"),
        serialization_alias="audioURI",
    )

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        try:
            parsed = calendar_date.fromisoformat(value)
        except ValueError:
            raise ValueError("date must be a YYYY-MM-DD calendar date")
        if parsed.isoformat() != value:
            raise ValueError("date must be a YYYY-MM-DD calendar date")
        return value

class EventRecord(EventFields):
    """Point-in-time copy of a stored event"""
    id: int

    class Config:
        frozen = True
        from_attributes = True

class DraftFragment(BaseModel):
    """Navigation payload carried to and from the media-capture flow.

    Only the fields actually present in the payload are merged back into
    a draft, see ``FormSession.merge_media_result``.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None  # ISO date or date-time
    photo: Optional[str] = None
    audio_uri: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("audio_uri", "audioURI"),
        serialization_alias="audioURI",
    )
    editing_event_id: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("editing_event_id", "editingEventId"),
        serialization_alias="editingEventId",
    )

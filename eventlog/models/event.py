"""
Event model
"""

from sqlalchemy import Column, Integer, String, Text

from eventlog.core.db import Base

class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text)
    description = Column(Text)
    date = Column(String(10))  # YYYY-MM-DD
    photo = Column(Text, nullable=True)
    audio_uri = Column("audioURI", Text, nullable=True)

    # AUTOINCREMENT keeps ids from being reused after deletes
    __table_args__ = {"sqlite_autoincrement": True}

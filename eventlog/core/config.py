"""
Configuration settings for the application
"""

import os
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./events1.db")
    SQL_ECHO: bool = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

    # Home screen shows only the most recent events
    RECENT_EVENTS_LIMIT: int = int(os.getenv("RECENT_EVENTS_LIMIT", "5"))

    # Delete-all confirmation
    DELETE_ALL_COUNTDOWN: int = int(os.getenv("DELETE_ALL_COUNTDOWN", "5"))
    COUNTDOWN_TICK_SECONDS: float = float(os.getenv("COUNTDOWN_TICK_SECONDS", "1.0"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"

settings = Settings()

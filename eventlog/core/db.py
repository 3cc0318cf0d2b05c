"""
Database engine and session factory helpers
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def is_memory_url(database_url: str) -> bool:
    """True for in-memory SQLite URLs"""
    return database_url in ("sqlite://", "sqlite:///:memory:")


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for the event database.

    File databases are switched to WAL journaling on every new connection.
    """
    engine = create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False},
    )

    if database_url.startswith("sqlite") and not is_memory_url(database_url):
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

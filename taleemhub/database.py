"""Database engine, session management, and table creation."""

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import TaleemHubConfig
from .models.base import Base

logger = logging.getLogger("taleemhub.database")

_engine = None
_session_factory = None


def get_engine(config: TaleemHubConfig) -> Engine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        connect_args = {}
        if config.database_url.startswith("sqlite"):
            # Storage calls run synchronously on the event loop; pooled connections
            # are not pinned to the thread that opened them
            connect_args = {"check_same_thread": False, "timeout": 30}
        _engine = create_engine(
            config.database_url,
            echo=config.debug,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
    return _engine


def get_session_factory(config: TaleemHubConfig) -> sessionmaker[Session]:
    """Get or create the session factory."""
    global _session_factory
    if _session_factory is None:
        engine = get_engine(config)
        _session_factory = sessionmaker(engine, expire_on_commit=False)
    return _session_factory


def create_tables(config: TaleemHubConfig) -> None:
    """Create all database tables."""
    engine = get_engine(config)
    Base.metadata.create_all(engine)
    logger.info("Database tables ensured for %s", engine.url.render_as_string(hide_password=True))


def close_engine() -> None:
    """Close the database engine."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None

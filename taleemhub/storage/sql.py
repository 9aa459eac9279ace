"""Relational storage backend — one ``storage_entries`` row per key."""

from typing import Iterator, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..models.storage_entry import StorageEntry
from ..utils.logging import get_logger
from .base import KeyValueStorage, StorageError

logger = get_logger("storage.sql")


class SQLStorage(KeyValueStorage):
    """Key-value storage over a SQLAlchemy session factory."""

    name = "sql"

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get_item(self, key: str) -> Optional[str]:
        try:
            with self._session_factory() as session:
                entry = session.get(StorageEntry, key)
                return entry.value if entry is not None else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot read key {key!r}: {exc}") from exc

    def set_item(self, key: str, value: str) -> None:
        try:
            with self._session_factory() as session:
                entry = session.get(StorageEntry, key)
                if entry is None:
                    session.add(StorageEntry(key=key, value=value))
                else:
                    entry.value = value
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot write key {key!r}: {exc}") from exc
        logger.debug("storage_entry_written", key=key)

    def remove_item(self, key: str) -> None:
        try:
            with self._session_factory() as session:
                entry = session.get(StorageEntry, key)
                if entry is not None:
                    session.delete(entry)
                    session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot remove key {key!r}: {exc}") from exc

    def keys(self) -> Iterator[str]:
        try:
            with self._session_factory() as session:
                rows = session.execute(select(StorageEntry.key).order_by(StorageEntry.key))
                return iter([row[0] for row in rows])
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot list keys: {exc}") from exc

"""Key-value persistence backed by SQLAlchemy."""

import logging
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inventory_tracker.database import async_session_factory
from inventory_tracker.models import StorageEntry

logger = logging.getLogger(__name__)

# Dialects with an atomic INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


class PersistenceError(Exception):
    """Raised when reading or writing a storage slot fails."""


class KeyValueStorage:
    """Async string slots stored in the ``key_value_store`` table.

    Each key holds one text value; writes overwrite the whole value.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        """Initialize the storage.

        Args:
            session_factory: Session factory to use. Defaults to the
                application's database.
        """
        self._session_factory = session_factory or async_session_factory

    async def get_item(self, key: str) -> str | None:
        """Read the value stored under ``key``, or None if the slot is empty.

        Raises:
            PersistenceError: If the database cannot be read.
        """
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(StorageEntry.value).where(StorageEntry.key == key)
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to read storage key %s: %s", key, e)
            raise PersistenceError(f"Failed to read {key!r}: {e}") from e

    async def set_item(self, key: str, value: str) -> None:
        """Overwrite the value stored under ``key`` in a single upsert.

        Raises:
            PersistenceError: If the database cannot be written or its
                dialect has no upsert support.
        """
        try:
            async with self._session_factory() as session:
                dialect = session.get_bind().dialect.name
                insert = _UPSERT_INSERTS.get(dialect)
                if insert is None:
                    raise PersistenceError(f"Unsupported database dialect: {dialect}")

                stmt = insert(StorageEntry).values(
                    key=key,
                    value=value,
                    updated_at=datetime.now(UTC),
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[StorageEntry.key],
                    set_={
                        "value": stmt.excluded.value,
                        "updated_at": stmt.excluded.updated_at,
                    },
                )
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Failed to write storage key %s: %s", key, e)
            raise PersistenceError(f"Failed to write {key!r}: {e}") from e

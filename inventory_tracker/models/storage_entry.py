"""Key-value entry model for the persisted product collection."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from inventory_tracker.database import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class StorageEntry(Base):
    """A single key-value slot.

    The whole product collection lives in one entry, serialized as a JSON
    array, and is overwritten in full on every save.

    Attributes:
        key: Slot name (e.g., '@inventory_products_v1')
        value: Serialized payload
        updated_at: Timestamp of the last overwrite
    """

    __tablename__ = "key_value_store"

    key: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
    )
    value: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<StorageEntry(key={self.key!r}, size={len(self.value or '')})>"

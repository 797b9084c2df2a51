"""SQLAlchemy 2.0 ORM models for the local durable store.

The local store is a flat string-keyed table: one row per key, the value
being an opaque text blob (a whole serialized collection, or a cached
credential). Nothing else is modelled relationally.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Shared base for all ORM models."""


class StorageItemRow(Base):
    """One key/value pair of local storage."""

    __tablename__ = "storage_items"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

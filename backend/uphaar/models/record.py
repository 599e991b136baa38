"""
Uphaar Backend: Record SQLAlchemy Model
=======================================

What:  The single `records` table backing SqlRecordStore.
How:   One row per document, keyed by (collection, id), with the document body
       in a JSON column. Items and user profiles share the table and are told
       apart by `collection`.

Table Design:
    - Composite primary key (collection, id): ids are only unique per collection
    - data: JSON on every backend (json on PostgreSQL, TEXT-backed on SQLite)
    - created_at / updated_at: row bookkeeping in UTC; the document's own
      createdAt/updatedAt fields live inside `data`
    - idx_records_collection: every query is scoped to one collection
"""

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from uphaar.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Record(Base):
    __tablename__ = "records"

    collection: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="Collection name, e.g. items or users",
    )

    id: Mapped[str] = mapped_column(
        String(128),
        primary_key=True,
        comment="Document id, unique within its collection",
    )

    data: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Document body",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_records_collection", "collection"),
    )

    def __repr__(self) -> str:
        return f"<Record(collection='{self.collection}', id='{self.id}')>"

"""
SQL-backed RecordStore.

Documents are rows of the `records` table (see models/record.py). Filters are
compiled to typed JSON-field comparisons so they run in the database on both
PostgreSQL and SQLite; ordering and limit use the same rules as the in-memory
store so the two stores return identical results.

Every SQLAlchemy failure is wrapped in RecordStoreError with the operation and
collection in its context.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from uphaar.exceptions import PreconditionFailedError, RecordStoreError
from uphaar.models.record import Record, utcnow
from uphaar.store.base import Document, Filter, RecordStore
from uphaar.store.documents import (
    apply_changes,
    matches,
    new_document_id,
    reject_increments,
    sort_documents,
)

logger = logging.getLogger(__name__)


def _field_condition(condition: Filter):
    element = Record.data[condition.field]
    value = condition.value
    # bool before int: True is an int
    if isinstance(value, bool):
        column = element.as_boolean()
    elif isinstance(value, int):
        column = element.as_integer()
    elif isinstance(value, float):
        column = element.as_float()
    else:
        column = element.as_string()

    if condition.op == "==":
        return column == value
    return column != value


class SqlRecordStore(RecordStore):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ):
        self._session_factory = session_factory
        self._engine = engine

    @asynccontextmanager
    async def _session(self, operation: str, collection: str) -> AsyncIterator[AsyncSession]:
        """Session that commits on success and rolls back on any error."""
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Record store %s on %s failed: %s", operation, collection, e)
                raise RecordStoreError(
                    context={"operation": operation, "collection": collection, "error": str(e)}
                ) from e
            except Exception:
                await session.rollback()
                raise

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        async with self._session("get", collection) as session:
            record = await session.get(Record, (collection, doc_id))
            if record is None:
                return None
            return Document(id=record.id, data=dict(record.data))

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        reject_increments(data)
        doc_id = new_document_id()
        async with self._session("add", collection) as session:
            session.add(Record(collection=collection, id=doc_id, data=dict(data)))
        return doc_id

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        reject_increments(data)
        async with self._session("set", collection) as session:
            record = await session.get(Record, (collection, doc_id))
            if record is None:
                session.add(Record(collection=collection, id=doc_id, data=dict(data)))
            else:
                record.data = dict(data)
                record.updated_at = utcnow()

    async def update(
        self,
        collection: str,
        doc_id: str,
        changes: Dict[str, Any],
        expect: Sequence[Filter] = (),
    ) -> None:
        async with self._session("update", collection) as session:
            result = await session.execute(
                select(Record)
                .where(Record.collection == collection, Record.id == doc_id)
                .with_for_update()
            )
            record = result.scalar_one_or_none()
            if record is None:
                raise RecordStoreError(
                    "Document to update does not exist",
                    context={"collection": collection, "id": doc_id},
                )
            if not matches(record.data, expect):
                raise PreconditionFailedError(context={"collection": collection, "id": doc_id})
            # Assign a new dict: in-place mutation of a JSON column is not tracked
            record.data = apply_changes(record.data, changes)
            record.updated_at = utcnow()

    async def delete(self, collection: str, doc_id: str) -> None:
        async with self._session("delete", collection) as session:
            await session.execute(
                delete(Record).where(Record.collection == collection, Record.id == doc_id)
            )

    async def query(
        self,
        collection: str,
        where: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        stmt = select(Record).where(Record.collection == collection)
        for condition in where:
            stmt = stmt.where(_field_condition(condition))

        async with self._session("query", collection) as session:
            result = await session.execute(stmt)
            found = [Document(id=r.id, data=dict(r.data)) for r in result.scalars()]

        return sort_documents(found, order_by, descending, limit)

    async def aclose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

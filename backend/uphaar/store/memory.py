"""
In-process RecordStore.

Used by the test-suite and for running the API locally without a database
(RECORD_STORE=memory). Reads and writes go through deep copies so callers
can never mutate stored state, and one asyncio.Lock serializes writes so
Increment updates are atomic.
"""

import asyncio
import copy
from typing import Any, Dict, List, Optional, Sequence

from uphaar.exceptions import PreconditionFailedError, RecordStoreError
from uphaar.store.base import Document, Filter, RecordStore
from uphaar.store.documents import (
    apply_changes,
    matches,
    new_document_id,
    reject_increments,
    sort_documents,
)


class InMemoryRecordStore(RecordStore):
    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = asyncio.Lock()

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(name, {})

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        data = self._collection(collection).get(doc_id)
        if data is None:
            return None
        return Document(id=doc_id, data=copy.deepcopy(data))

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        reject_increments(data)
        doc_id = new_document_id()
        async with self._lock:
            self._collection(collection)[doc_id] = copy.deepcopy(data)
        return doc_id

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        reject_increments(data)
        async with self._lock:
            self._collection(collection)[doc_id] = copy.deepcopy(data)

    async def update(
        self,
        collection: str,
        doc_id: str,
        changes: Dict[str, Any],
        expect: Sequence[Filter] = (),
    ) -> None:
        async with self._lock:
            documents = self._collection(collection)
            if doc_id not in documents:
                raise RecordStoreError(
                    "Document to update does not exist",
                    context={"collection": collection, "id": doc_id},
                )
            if not matches(documents[doc_id], expect):
                raise PreconditionFailedError(context={"collection": collection, "id": doc_id})
            documents[doc_id] = apply_changes(documents[doc_id], changes)

    async def delete(self, collection: str, doc_id: str) -> None:
        async with self._lock:
            self._collection(collection).pop(doc_id, None)

    async def query(
        self,
        collection: str,
        where: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        found = [
            Document(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in self._collection(collection).items()
            if matches(data, where)
        ]
        return sort_documents(found, order_by, descending, limit)

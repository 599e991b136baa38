"""
Record Store interface.

A collection-scoped document store: every document lives in a named
collection under a string id and holds a JSON-compatible dict. Services talk
only to this interface; which implementation backs it is decided once at
startup (see context.build_record_store).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

FILTER_OPS = ("==", "!=")
FILTER_VALUE_TYPES = (str, int, float, bool)


@dataclass
class Document:
    id: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape: the stored fields plus the id."""
        return {"id": self.id, **self.data}


@dataclass(frozen=True)
class Filter:
    """
    A single-field condition.

    Both operators only match documents that HAVE the field: a document without
    `claimedBy` matches neither `claimedBy == "u1"` nor `claimedBy != "u1"`.
    """

    field: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in FILTER_OPS:
            raise ValueError(f"Unsupported filter operator {self.op!r}")
        if not isinstance(self.value, FILTER_VALUE_TYPES):
            raise ValueError(
                f"Filter value for {self.field!r} must be str, int, float or bool"
            )


@dataclass(frozen=True)
class Increment:
    """Update value meaning "add amount to the stored number" (missing counts as 0)."""

    amount: int = 1


class RecordStore(ABC):
    """
    Abstract document store.

    Implementations raise RecordStoreError for backend failures and for
    update() on a missing document.
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        ...

    @abstractmethod
    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Insert under a store-generated id and return it."""

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Create or fully replace."""

    @abstractmethod
    async def update(
        self,
        collection: str,
        doc_id: str,
        changes: Dict[str, Any],
        expect: Sequence[Filter] = (),
    ) -> None:
        """
        Merge changes into an existing document; Increment values are applied atomically.

        When expect is given, the stored document must still match every filter
        at write time, otherwise PreconditionFailedError is raised and nothing
        is written.
        """

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Remove if present."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        where: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        ...

    async def aclose(self) -> None:
        """Release connections. No-op by default."""

"""Document rules shared by every RecordStore implementation."""

import copy
import uuid
from typing import Any, Dict, Iterable, List, Optional, Sequence

from uphaar.store.base import Document, Filter, Increment

_MISSING = object()


def new_document_id() -> str:
    return uuid.uuid4().hex


def matches(data: Dict[str, Any], where: Sequence[Filter]) -> bool:
    for condition in where:
        value = data.get(condition.field, _MISSING)
        if value is _MISSING or value is None:
            return False
        if condition.op == "==" and value != condition.value:
            return False
        if condition.op == "!=" and value == condition.value:
            return False
    return True


def sort_documents(
    documents: Iterable[Document],
    order_by: Optional[str],
    descending: bool = False,
    limit: Optional[int] = None,
) -> List[Document]:
    """
    Order by one field, then truncate.

    Documents lacking the field sort first ascending and last descending.
    """
    result = list(documents)
    if order_by:
        result.sort(
            key=lambda doc: (
                doc.data.get(order_by) is not None,
                doc.data.get(order_by) if doc.data.get(order_by) is not None else "",
            ),
            reverse=descending,
        )
    if limit is not None:
        result = result[: max(limit, 0)]
    return result


def apply_changes(data: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    """Return a merged copy of data; Increment values add to the current number."""
    merged = copy.deepcopy(data)
    for key, value in changes.items():
        if isinstance(value, Increment):
            current = merged.get(key) or 0
            merged[key] = current + value.amount
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def reject_increments(data: Dict[str, Any]) -> None:
    """add() and set() store plain values only."""
    for key, value in data.items():
        if isinstance(value, Increment):
            raise ValueError(f"Increment is only valid in update(), got one for {key!r}")

"""
Uphaar Backend: Item Service (Business Rules)
=============================================

What:  Every item operation behind the /items routes.
How:   Reads and writes the `items` collection of the Record Store and raises
       the application exceptions for expected failures; the route wrapper
       turns those into {"error": ...} responses.
Who:   ItemHandlers (routes/items.py).

Item lifecycle:
    created    isAvailable=true,  isGivenAway=false, claimCount=0
      │ claim (by someone other than the owner)
      ▼
    claimed    isAvailable=false, claimedBy, claimedAt, claimCount+1
      │ complete | given (owner only)
      ▼
    given away isGivenAway=true,  isAvailable=false, completedAt | givenAwayAt

Returned items are wire dicts: the stored camelCase fields plus "id".
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from uphaar.auth.identity import Identity
from uphaar.exceptions import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    PreconditionFailedError,
)
from uphaar.schemas.item import CompleteItemRequest, ItemCreate, ItemUpdate
from uphaar.store.base import Filter, Increment, RecordStore

logger = logging.getLogger(__name__)

ITEMS = "items"

# Fields a PUT body can never overwrite
PROTECTED_FIELDS = ("userId", "createdAt", "claimCount", "claimedBy", "claimedAt")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ItemService:
    def __init__(self, store: RecordStore):
        self.store = store

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_available(self) -> List[Dict[str, Any]]:
        """Items still up for grabs, newest first."""
        docs = await self.store.query(
            ITEMS,
            where=[Filter("isAvailable", "==", True)],
            order_by="createdAt",
            descending=True,
        )
        return [doc.to_dict() for doc in docs]

    async def list_by_owner(self, user_id: str) -> List[Dict[str, Any]]:
        """Every item listed by user_id, newest first, whatever its state."""
        docs = await self.store.query(
            ITEMS,
            where=[Filter("userId", "==", user_id)],
            order_by="createdAt",
            descending=True,
        )
        return [doc.to_dict() for doc in docs]

    async def get(self, item_id: str) -> Dict[str, Any]:
        doc = await self.store.get(ITEMS, item_id)
        if doc is None:
            raise NotFoundError("item", item_id)
        return doc.to_dict()

    async def _get_owned(self, item_id: str, user: Identity, denied: str) -> Dict[str, Any]:
        item = await self.get(item_id)
        if item.get("userId") != user.uid:
            raise ForbiddenError(denied, context={"item_id": item_id, "uid": user.uid})
        return item

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(self, user: Identity, payload: ItemCreate) -> Dict[str, Any]:
        now = utc_now_iso()
        data = payload.model_dump(by_alias=True, exclude_none=True)
        data.update(
            userId=user.uid,
            isAvailable=True,
            isGivenAway=False,
            claimCount=0,
            createdAt=now,
            updatedAt=now,
        )
        item_id = await self.store.add(ITEMS, data)
        logger.info("Item %s created by %s", item_id, user.uid)
        return {"id": item_id, **data}

    async def update(self, item_id: str, user: Identity, payload: ItemUpdate) -> Dict[str, Any]:
        await self._get_owned(item_id, user, "You can only update your own items")

        changes = payload.model_dump(by_alias=True, exclude_unset=True)
        for protected in PROTECTED_FIELDS:
            changes.pop(protected, None)
        changes["updatedAt"] = utc_now_iso()

        await self.store.update(ITEMS, item_id, changes)
        logger.info("Item %s updated by %s (%s)", item_id, user.uid, ", ".join(sorted(changes)))
        return await self.get(item_id)

    async def delete(self, item_id: str, user: Identity) -> None:
        await self._get_owned(item_id, user, "You can only delete your own items")
        await self.store.delete(ITEMS, item_id)
        logger.info("Item %s deleted by %s", item_id, user.uid)

    # ── State transitions ─────────────────────────────────────────────────

    async def claim(self, item_id: str, user: Identity) -> Dict[str, Any]:
        """
        Claim an available item for user.

        The checks run on a read that may be stale by the time of the write, so
        the update itself requires isAvailable == true; a concurrent claim that
        got there first makes this one fail as "no longer available".
        """
        item = await self.get(item_id)

        if not item.get("isAvailable"):
            raise InvalidStateError("Item is no longer available", context={"item_id": item_id})
        if item.get("userId") == user.uid:
            raise InvalidStateError("You cannot claim your own item", context={"item_id": item_id})
        if item.get("claimedBy") == user.uid:
            raise InvalidStateError(
                "You have already claimed this item", context={"item_id": item_id}
            )

        now = utc_now_iso()
        try:
            await self.store.update(
                ITEMS,
                item_id,
                {
                    "claimCount": Increment(1),
                    "claimedBy": user.uid,
                    "claimedAt": now,
                    "isAvailable": False,
                    "updatedAt": now,
                },
                expect=[Filter("isAvailable", "==", True)],
            )
        except PreconditionFailedError as e:
            raise InvalidStateError(
                "Item is no longer available", context={"item_id": item_id}
            ) from e
        logger.info("Item %s claimed by %s", item_id, user.uid)
        return await self.get(item_id)

    async def complete(
        self,
        item_id: str,
        user: Identity,
        payload: Optional[CompleteItemRequest] = None,
    ) -> Dict[str, Any]:
        item = await self._get_owned(item_id, user, "You can only complete your own items")
        if item.get("isGivenAway"):
            raise InvalidStateError(
                "Item is already marked as completed", context={"item_id": item_id}
            )

        now = utc_now_iso()
        changes: Dict[str, Any] = {
            "isGivenAway": True,
            "isAvailable": False,
            "completedAt": now,
            "updatedAt": now,
        }
        if payload is not None and payload.claimed_by_user_id:
            changes["claimedBy"] = payload.claimed_by_user_id

        await self.store.update(ITEMS, item_id, changes)
        logger.info("Item %s completed by %s", item_id, user.uid)
        return await self.get(item_id)

    async def mark_given(self, item_id: str, user: Identity) -> Dict[str, Any]:
        item = await self._get_owned(
            item_id, user, "You can only mark your own items as given away"
        )
        if item.get("isGivenAway"):
            raise InvalidStateError(
                "Item is already marked as given away", context={"item_id": item_id}
            )

        now = utc_now_iso()
        await self.store.update(
            ITEMS,
            item_id,
            {
                "isGivenAway": True,
                "isAvailable": False,
                "givenAwayAt": now,
                "updatedAt": now,
            },
        )
        logger.info("Item %s marked given away by %s", item_id, user.uid)
        return await self.get(item_id)

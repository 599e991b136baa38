"""
Uphaar Backend: User Service
============================

What:  Profiles in the `users` collection (keyed by uid) and per-user item stats.
Who:   UserHandlers (routes/users.py).

Visibility:
    - public profile (GET /users/:uid): uid, displayName, photoURL, bio, location
    - own profile (GET /users/profile): the whole stored document
"""

import logging
from typing import Any, Dict, Tuple

from uphaar.auth.identity import Identity
from uphaar.exceptions import NotFoundError
from uphaar.schemas.user import ProfileUpdate
from uphaar.services.item_service import ITEMS, utc_now_iso
from uphaar.store.base import Filter, RecordStore

logger = logging.getLogger(__name__)

USERS = "users"
PUBLIC_PROFILE_FIELDS = ("uid", "displayName", "photoURL", "bio", "location")


class UserService:
    def __init__(self, store: RecordStore):
        self.store = store

    async def get_public_profile(self, uid: str) -> Dict[str, Any]:
        doc = await self.store.get(USERS, uid)
        if doc is None:
            raise NotFoundError("user", uid)
        return {name: doc.data.get(name) for name in PUBLIC_PROFILE_FIELDS}

    async def get_own_profile(self, user: Identity) -> Dict[str, Any]:
        doc = await self.store.get(USERS, user.uid)
        if doc is None:
            raise NotFoundError("user profile", user.uid)
        return doc.data

    def _profile_from_identity(self, user: Identity) -> Dict[str, Any]:
        now = utc_now_iso()
        return {
            "uid": user.uid,
            "displayName": user.name or "",
            "email": user.email or "",
            "photoURL": user.picture or "",
            "createdAt": now,
            "updatedAt": now,
        }

    async def ensure_profile(self, user: Identity) -> Tuple[Dict[str, Any], bool]:
        """
        Return (profile, is_new).

        Called by the client right after sign-in: creates the profile from the
        token's claims on first login, otherwise returns the stored one as is.
        """
        doc = await self.store.get(USERS, user.uid)
        if doc is not None:
            return doc.data, False

        profile = self._profile_from_identity(user)
        await self.store.set(USERS, user.uid, profile)
        logger.info("Created profile for %s", user.uid)
        return profile, True

    async def update_profile(self, user: Identity, payload: ProfileUpdate) -> Dict[str, Any]:
        """Merge the fields present in payload, creating the profile first if needed."""
        changes = payload.model_dump(by_alias=True, exclude_unset=True)
        changes["updatedAt"] = utc_now_iso()

        if await self.store.get(USERS, user.uid) is None:
            profile = self._profile_from_identity(user)
            profile.update(changes)
            await self.store.set(USERS, user.uid, profile)
        else:
            await self.store.update(USERS, user.uid, changes)

        logger.info("Updated profile for %s", user.uid)
        return await self.get_own_profile(user)

    async def get_stats(self, uid: str) -> Dict[str, int]:
        items = await self.store.query(ITEMS, where=[Filter("userId", "==", uid)])
        claimed = await self.store.query(ITEMS, where=[Filter("claimedBy", "==", uid)])

        return {
            "givenItemsCount": sum(1 for d in items if d.data.get("isAvailable") is False),
            "offeredItemsCount": sum(1 for d in items if d.data.get("isAvailable") is True),
            "itemsShared": len(items),
            "itemsGivenAway": sum(1 for d in items if d.data.get("isGivenAway")),
            "itemsClaimed": len(claimed),
        }

"""Uphaar Backend: User Service unit tests."""

import pytest

from conftest import CLAIMER, OWNER
from uphaar.exceptions import NotFoundError
from uphaar.schemas.user import ProfileUpdate
from uphaar.services.user_service import UserService
from uphaar.store.memory import InMemoryRecordStore


class TestUserService:
    def setup_method(self):
        self.store = InMemoryRecordStore()
        self.service = UserService(self.store)

    @pytest.mark.asyncio
    async def test_ensure_profile_creates_from_identity(self):
        profile, is_new = await self.service.ensure_profile(OWNER)
        assert is_new is True
        assert profile["uid"] == OWNER.uid
        assert profile["displayName"] == OWNER.name
        assert profile["email"] == OWNER.email
        assert profile["photoURL"] == OWNER.picture

        again, is_new = await self.service.ensure_profile(OWNER)
        assert is_new is False
        assert again == profile

    @pytest.mark.asyncio
    async def test_missing_profiles(self):
        with pytest.raises(NotFoundError) as exc:
            await self.service.get_public_profile("nobody")
        assert exc.value.message == "User not found"

        with pytest.raises(NotFoundError) as exc:
            await self.service.get_own_profile(CLAIMER)
        assert exc.value.message == "User profile not found"

    @pytest.mark.asyncio
    async def test_public_profile_hides_private_fields(self):
        await self.service.ensure_profile(OWNER)
        await self.service.update_profile(
            OWNER, ProfileUpdate.model_validate({"phone": "+91 99999", "bio": "Hi", "location": "Pune"})
        )
        public = await self.service.get_public_profile(OWNER.uid)
        assert set(public) == {"uid", "displayName", "photoURL", "bio", "location"}
        assert public["bio"] == "Hi"

        own = await self.service.get_own_profile(OWNER)
        assert own["phone"] == "+91 99999"
        assert own["email"] == OWNER.email

    @pytest.mark.asyncio
    async def test_update_creates_missing_profile(self):
        profile = await self.service.update_profile(
            CLAIMER, ProfileUpdate.model_validate({"displayName": "Ravi", "photoURL": "p.png"})
        )
        assert profile["uid"] == CLAIMER.uid
        assert profile["displayName"] == "Ravi"
        assert profile["photoURL"] == "p.png"

    @pytest.mark.asyncio
    async def test_stats(self):
        await self.store.add("items", {"userId": OWNER.uid, "isAvailable": True, "isGivenAway": False})
        await self.store.add(
            "items",
            {"userId": OWNER.uid, "isAvailable": False, "isGivenAway": True, "claimedBy": CLAIMER.uid},
        )
        await self.store.add(
            "items",
            {"userId": OWNER.uid, "isAvailable": False, "isGivenAway": False, "claimedBy": CLAIMER.uid},
        )

        assert await self.service.get_stats(OWNER.uid) == {
            "givenItemsCount": 2,
            "offeredItemsCount": 1,
            "itemsShared": 3,
            "itemsGivenAway": 1,
            "itemsClaimed": 0,
        }
        claimer_stats = await self.service.get_stats(CLAIMER.uid)
        assert claimer_stats["itemsClaimed"] == 2
        assert claimer_stats["itemsShared"] == 0

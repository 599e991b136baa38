"""
Uphaar Backend: Record Store Tests
==================================

What:  The RecordStore contract, run against both implementations.
How:   The `record_store` fixture is parametrized: the in-memory store, and
       SqlRecordStore on a throwaway SQLite file (aiosqlite) with the schema
       created from Base.metadata.
"""

import asyncio

import pytest
import pytest_asyncio

from uphaar.config import Settings
from uphaar.database import Base, build_engine, build_session_factory
from uphaar.exceptions import PreconditionFailedError, RecordStoreError
from uphaar.store.base import Document, Filter, Increment
from uphaar.store.memory import InMemoryRecordStore
from uphaar.store.sql import SqlRecordStore


@pytest_asyncio.fixture(params=["memory", "sql"])
async def record_store(request, tmp_path):
    if request.param == "memory":
        yield InMemoryRecordStore()
        return

    engine = build_engine(Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'records.db'}"))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    store = SqlRecordStore(build_session_factory(engine), engine)
    yield store
    await store.aclose()


class TestRecordStoreCrud:
    @pytest.mark.asyncio
    async def test_add_and_get(self, record_store):
        doc_id = await record_store.add("items", {"title": "Lamp", "tags": ["a"]})
        doc = await record_store.get("items", doc_id)
        assert doc == Document(id=doc_id, data={"title": "Lamp", "tags": ["a"]})
        assert doc.to_dict() == {"id": doc_id, "title": "Lamp", "tags": ["a"]}

    @pytest.mark.asyncio
    async def test_get_missing(self, record_store):
        assert await record_store.get("items", "missing") is None

    @pytest.mark.asyncio
    async def test_collections_are_separate(self, record_store):
        await record_store.set("users", "u1", {"uid": "u1"})
        assert await record_store.get("items", "u1") is None

    @pytest.mark.asyncio
    async def test_set_creates_then_replaces(self, record_store):
        await record_store.set("users", "u1", {"uid": "u1", "bio": "old"})
        await record_store.set("users", "u1", {"uid": "u1"})
        assert (await record_store.get("users", "u1")).data == {"uid": "u1"}

    @pytest.mark.asyncio
    async def test_update_merges_and_increments(self, record_store):
        doc_id = await record_store.add("items", {"title": "Lamp", "claimCount": 0})
        await record_store.update("items", doc_id, {"claimCount": Increment(1), "claimedBy": "u2"})
        await record_store.update("items", doc_id, {"claimCount": Increment(2), "views": Increment()})
        assert (await record_store.get("items", doc_id)).data == {
            "title": "Lamp",
            "claimCount": 3,
            "claimedBy": "u2",
            "views": 1,
        }

    @pytest.mark.asyncio
    async def test_conditional_update(self, record_store):
        doc_id = await record_store.add("items", {"isAvailable": True, "claimCount": 0})
        available = [Filter("isAvailable", "==", True)]

        await record_store.update(
            "items", doc_id, {"isAvailable": False, "claimCount": Increment(1)}, expect=available
        )
        with pytest.raises(PreconditionFailedError):
            await record_store.update(
                "items", doc_id, {"claimedBy": "late", "claimCount": Increment(1)}, expect=available
            )

        assert (await record_store.get("items", doc_id)).data == {
            "isAvailable": False,
            "claimCount": 1,
        }

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, record_store):
        with pytest.raises(RecordStoreError):
            await record_store.update("items", "missing", {"title": "x"})

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, record_store):
        doc_id = await record_store.add("items", {"title": "Lamp"})
        await record_store.delete("items", doc_id)
        await record_store.delete("items", doc_id)
        assert await record_store.get("items", doc_id) is None

    @pytest.mark.asyncio
    async def test_increment_rejected_outside_update(self, record_store):
        with pytest.raises(ValueError):
            await record_store.add("items", {"claimCount": Increment(1)})

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self, record_store):
        doc_id = await record_store.add("items", {"imageUrls": ["a"]})
        doc = await record_store.get("items", doc_id)
        doc.data["imageUrls"].append("b")
        assert (await record_store.get("items", doc_id)).data == {"imageUrls": ["a"]}


class TestRecordStoreQuery:
    @pytest_asyncio.fixture
    async def seeded(self, record_store):
        ids = {}
        ids["a"] = await record_store.add(
            "items", {"userId": "u1", "isAvailable": True, "createdAt": "2026-01-01", "claimCount": 2}
        )
        ids["b"] = await record_store.add(
            "items", {"userId": "u1", "isAvailable": False, "createdAt": "2026-03-01", "claimedBy": "u2"}
        )
        ids["c"] = await record_store.add(
            "items", {"userId": "u2", "isAvailable": True, "createdAt": "2026-02-01"}
        )
        ids["d"] = await record_store.add("items", {"userId": "u3", "isAvailable": True})
        return ids

    @pytest.mark.asyncio
    async def test_equality_filters(self, record_store, seeded):
        docs = await record_store.query("items", where=[Filter("userId", "==", "u1")])
        assert {d.id for d in docs} == {seeded["a"], seeded["b"]}

        docs = await record_store.query(
            "items", where=[Filter("userId", "==", "u1"), Filter("isAvailable", "==", True)]
        )
        assert [d.id for d in docs] == [seeded["a"]]

    @pytest.mark.asyncio
    async def test_boolean_false_filter(self, record_store, seeded):
        docs = await record_store.query("items", where=[Filter("isAvailable", "==", False)])
        assert [d.id for d in docs] == [seeded["b"]]

    @pytest.mark.asyncio
    async def test_integer_filter(self, record_store, seeded):
        docs = await record_store.query("items", where=[Filter("claimCount", "==", 2)])
        assert [d.id for d in docs] == [seeded["a"]]

    @pytest.mark.asyncio
    async def test_filters_skip_documents_without_the_field(self, record_store, seeded):
        equal = await record_store.query("items", where=[Filter("claimedBy", "==", "u2")])
        assert [d.id for d in equal] == [seeded["b"]]

        not_equal = await record_store.query("items", where=[Filter("claimedBy", "!=", "u9")])
        assert [d.id for d in not_equal] == [seeded["b"]]

    @pytest.mark.asyncio
    async def test_order_descending_puts_missing_last(self, record_store, seeded):
        docs = await record_store.query("items", order_by="createdAt", descending=True)
        assert [d.id for d in docs] == [seeded["b"], seeded["c"], seeded["a"], seeded["d"]]

    @pytest.mark.asyncio
    async def test_order_ascending_puts_missing_first(self, record_store, seeded):
        docs = await record_store.query("items", order_by="createdAt")
        assert [d.id for d in docs] == [seeded["d"], seeded["a"], seeded["c"], seeded["b"]]

    @pytest.mark.asyncio
    async def test_limit(self, record_store, seeded):
        docs = await record_store.query("items", order_by="createdAt", descending=True, limit=2)
        assert [d.id for d in docs] == [seeded["b"], seeded["c"]]

    @pytest.mark.asyncio
    async def test_empty_collection(self, record_store):
        assert await record_store.query("items") == []


class TestFilterValidation:
    def test_unknown_operator(self):
        with pytest.raises(ValueError, match="Unsupported filter operator"):
            Filter("userId", ">", "u1")

    def test_unsupported_value(self):
        with pytest.raises(ValueError):
            Filter("claimedBy", "==", None)


class TestInMemoryConcurrency:
    @pytest.mark.asyncio
    async def test_concurrent_increments_are_not_lost(self):
        store = InMemoryRecordStore()
        doc_id = await store.add("items", {"claimCount": 0})
        await asyncio.gather(
            *(store.update("items", doc_id, {"claimCount": Increment(1)}) for _ in range(25))
        )
        assert (await store.get("items", doc_id)).data["claimCount"] == 25

"""
Uphaar Backend: Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides come first, before any uphaar import reads
       Settings. Everything runs against the in-memory Record Store and a fake
       Token Verifier, so no database, network or Firebase project is needed.

Fixture Hierarchy (all function-scoped):
    store ─┐
    verifier ─┴─→ context ─→ dispatcher
                          ├─→ test_client (httpx over the FastAPI binding)
                          └─→ serverless (ServerlessHandler)
    make_request: builds HttpRequest values for dispatcher-level tests
    seeded_item:  one available item owned by OWNER
"""

import os
from urllib.parse import parse_qsl

# Override settings for testing BEFORE any app imports
os.environ["RECORD_STORE"] = "memory"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["FIREBASE_PROJECT_ID"] = "uphaar-test"
os.environ["CORS_ORIGINS"] = "http://localhost:3000,https://uphaar.example"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from uphaar.adapters.serverless import ServerlessHandler
from uphaar.adapters.server import create_app
from uphaar.auth.identity import Identity
from uphaar.auth.verifier import TokenVerifier
from uphaar.config import Settings
from uphaar.context import build_context
from uphaar.exceptions import TokenVerificationError
from uphaar.http.types import HttpRequest
from uphaar.routes.registry import build_dispatcher
from uphaar.store.memory import InMemoryRecordStore

OWNER = Identity(uid="owner-uid", email="owner@example.com", name="Asha Owner", picture="https://img/owner.png")
CLAIMER = Identity(uid="claimer-uid", email="claimer@example.com", name="Ravi Claimer")

OWNER_TOKEN = "owner-token"
CLAIMER_TOKEN = "claimer-token"


class FakeTokenVerifier(TokenVerifier):
    """Maps known token strings to identities; every other token is rejected."""

    def __init__(self, tokens: Dict[str, Identity]):
        self.tokens = tokens
        self.calls: List[str] = []
        self.closed = False

    async def verify(self, token: str) -> Identity:
        self.calls.append(token)
        if token not in self.tokens:
            raise TokenVerificationError(context={"reason": "unknown test token"})
        return self.tokens[token]

    async def aclose(self) -> None:
        self.closed = True


def auth_headers(token: str) -> Dict[str, str]:
    return {"authorization": f"Bearer {token}"}


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def verifier():
    return FakeTokenVerifier({OWNER_TOKEN: OWNER, CLAIMER_TOKEN: CLAIMER})


@pytest.fixture
def context(settings, store, verifier):
    return build_context(settings, store=store, verifier=verifier)


@pytest.fixture
def dispatcher(context):
    return build_dispatcher(context)


@pytest.fixture
def serverless(context):
    return ServerlessHandler.from_context(context)


@pytest.fixture
def make_request():
    """
    Factory for HttpRequest values as a host binding would build them.

    Usage:
        request = make_request("POST", "/items/abc/claim", token=CLAIMER_TOKEN)
    """

    def _make(
        method: str,
        url: str,
        body: Any = None,
        token: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> HttpRequest:
        all_headers: Dict[str, Any] = dict(headers or {})
        if token is not None:
            all_headers.update(auth_headers(token))
        path, _, query_string = url.partition("?")
        return HttpRequest(
            method=method,
            path=path,
            headers=all_headers,
            body=body,
            query=dict(parse_qsl(query_string)),
        )

    return _make


@pytest_asyncio.fixture
async def seeded_item(store):
    """One available item owned by OWNER; returns its id."""
    return await store.add(
        "items",
        {
            "title": "Wooden bookshelf",
            "description": "Five shelves, some scratches",
            "category": "furniture",
            "condition": "good",
            "location": "Pune",
            "imageUrls": [],
            "isFree": True,
            "price": 0,
            "userId": OWNER.uid,
            "isAvailable": True,
            "isGivenAway": False,
            "claimCount": 0,
            "createdAt": "2026-01-10T09:00:00+00:00",
            "updatedAt": "2026-01-10T09:00:00+00:00",
        },
    )


@pytest_asyncio.fixture
async def test_client(context):
    """
    HTTPX AsyncClient talking to the FastAPI binding through ASGITransport.

    The context is injected, so the app's lifespan (which ASGITransport does
    not run) is not needed to build the dispatcher.
    """
    app = create_app(context=context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

"""
Uphaar Backend: Application Context
===================================

What:  The collaborators a running process needs, constructed once at startup.
How:   build_context(settings) creates the configured Record Store and the
       Token Verifier explicitly and hands them to the services. Nothing is
       looked up through module globals at request time; host bindings and
       tests receive an AppContext and pass it down.
Who:   create_app() lifespan (server), lambda_function (serverless), tests.

Shutdown: aclose() releases the verifier's HTTP client and the store's
connection pool.
"""

import logging
from typing import Optional

from uphaar.auth.verifier import FirebaseTokenVerifier, TokenVerifier
from uphaar.config import Settings, settings as default_settings
from uphaar.database import build_engine, build_session_factory
from uphaar.services.item_service import ItemService
from uphaar.services.user_service import UserService
from uphaar.store.base import RecordStore
from uphaar.store.memory import InMemoryRecordStore
from uphaar.store.sql import SqlRecordStore

logger = logging.getLogger(__name__)


class AppContext:
    def __init__(self, settings: Settings, store: RecordStore, verifier: TokenVerifier):
        self.settings = settings
        self.store = store
        self.verifier = verifier
        self.items = ItemService(store)
        self.users = UserService(store)

    async def aclose(self) -> None:
        await self.verifier.aclose()
        await self.store.aclose()


def build_record_store(settings: Settings) -> RecordStore:
    if settings.record_store == "memory":
        logger.info("Record store: in-memory")
        return InMemoryRecordStore()

    engine = build_engine(settings)
    logger.info("Record store: SQL (%s)", engine.url.render_as_string(hide_password=True))
    return SqlRecordStore(build_session_factory(engine), engine)


def build_context(
    settings: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
    verifier: Optional[TokenVerifier] = None,
) -> AppContext:
    settings = settings or default_settings
    return AppContext(
        settings=settings,
        store=store or build_record_store(settings),
        verifier=verifier or FirebaseTokenVerifier.from_settings(settings),
    )

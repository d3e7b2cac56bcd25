"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (cache, Firestore, repositories).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.firebase import (
    FirestoreDocumentStore,
    close_firebase,
    init_firebase,
)
from app.infrastructure.persistence.container import build_repositories

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: Redis cache (if enabled), Firestore client, repository
    container. Without Firestore credentials app.state.repositories stays
    None and data routes answer 500 (StoreNotConfiguredException); health
    still answers. Shutdown order: cache disconnect, Firestore pool close.
    """
    settings = get_settings()

    # ---- Startup ----
    if settings.redis_enabled:
        from app.infrastructure.cache.redis_cache import CacheService

        cache = CacheService()
        await cache.connect()
        app.state.cache = cache
    else:
        app.state.cache = None

    client = init_firebase()
    if client is not None:
        app.state.store = FirestoreDocumentStore(client)
        app.state.repositories = build_repositories(app.state.store, app.state.cache, settings)
        logger.info("Repositories ready (cache %s)", "on" if app.state.cache else "off")
    else:
        app.state.store = None
        app.state.repositories = None
        logger.warning("Firestore not configured; data endpoints will answer 500")

    yield

    # ---- Shutdown ----
    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        logger.info("Cache disconnected")

    if getattr(app.state, "store", None) is not None:
        await close_firebase()
        app.state.store = None
        logger.info("Firestore client closed")

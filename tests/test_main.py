"""Tests for the composition root."""

import pytest

from pawfeed.config import Settings
from pawfeed.main import build_storage, build_store, notification_store_lifespan
from pawfeed.services.identity import StaticIdentityProvider
from pawfeed.services.storage import InMemoryKeyValueStore, RedisKeyValueStore

from tests.factories import NotificationCreateFactory


class TestBuildStorage:
    def test_in_memory_without_redis_url(self):
        assert isinstance(build_storage(Settings(REDIS_URL=None)), InMemoryKeyValueStore)

    def test_redis_with_url(self):
        storage = build_storage(Settings(REDIS_URL="redis://localhost:6379/0"))
        assert isinstance(storage, RedisKeyValueStore)


class TestLifespan:
    @pytest.mark.asyncio
    async def test_store_usable_inside_lifespan(self, api_client):
        settings = Settings(REDIS_URL=None, SENTRY_DSN=None)
        identity = StaticIdentityProvider(None)

        async with notification_store_lifespan(identity, settings=settings, api_client=api_client) as store:
            received = []
            store.subscribe(received.append)
            created = await store.append(NotificationCreateFactory())
            assert [n.id for n in await store.list()] == [created.id]

        assert store.get_stats()["subscribers"] == 0
        assert len(received) == 2

    @pytest.mark.asyncio
    async def test_build_store_uses_settings(self, api_client):
        settings = Settings(NOTIFICATIONS_STORAGE_KEY="feed", REDIS_URL=None)
        storage = InMemoryKeyValueStore()
        store = build_store(
            StaticIdentityProvider(None),
            settings=settings,
            storage=storage,
            api_client=api_client,
        )

        await store.append(NotificationCreateFactory())

        assert await storage.get("feed") is not None
        assert await storage.get("notifications") is None

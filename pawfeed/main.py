"""
Composition root for the notification feed.

Builds one NotificationStore per process from settings and hands it to
whatever owns the UI. There is no module-level store instance; callers keep
the one they built.

- Logging configured once at startup
- Sentry enabled when SENTRY_DSN is set
- Store, HTTP client and storage connection closed on exit
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
import logging

from pawfeed.config import Settings, get_settings
from pawfeed.core.sentry import init_sentry
from pawfeed.services.identity import IdentityProvider, TokenStore
from pawfeed.services.notification_store import NotificationStore
from pawfeed.services.notifications_api import NotificationsAPIClient
from pawfeed.services.storage import (
    InMemoryKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
)

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # httpx logs full request lines at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_storage(settings: Settings) -> KeyValueStore:
    if settings.REDIS_URL:
        logger.info("Using Redis notification storage")
        return RedisKeyValueStore(redis_url=settings.REDIS_URL)
    logger.info("REDIS_URL not set, using in-memory notification storage")
    return InMemoryKeyValueStore()


def build_store(
    identity: IdentityProvider,
    token_store: Optional[TokenStore] = None,
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStore] = None,
    api_client: Optional[NotificationsAPIClient] = None,
) -> NotificationStore:
    """Wire a NotificationStore from settings, overriding any collaborator given."""
    settings = settings or get_settings()
    return NotificationStore(
        storage=storage or build_storage(settings),
        api_client=api_client or NotificationsAPIClient(
            base_url=settings.NOTIFICATIONS_API_URL,
            timeout=settings.NOTIFICATIONS_HTTP_TIMEOUT,
        ),
        identity=identity,
        token_store=token_store,
        storage_key=settings.NOTIFICATIONS_STORAGE_KEY,
        fetch_debounce_ms=settings.NOTIFICATIONS_FETCH_DEBOUNCE_MS,
    )


@asynccontextmanager
async def notification_store_lifespan(
    identity: IdentityProvider,
    token_store: Optional[TokenStore] = None,
    settings: Optional[Settings] = None,
    **overrides,
) -> AsyncIterator[NotificationStore]:
    """Process lifetime of the store: set up on entry, torn down on exit."""
    settings = settings or get_settings()
    configure_logging(settings)
    init_sentry(settings)

    logger.info("Starting notification feed...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    store = build_store(identity, token_store=token_store, settings=settings, **overrides)
    try:
        yield store
    finally:
        logger.info("Shutting down notification feed...")
        await store.close()

"""
Notification store: the canonical in-app notification feed.

Merges the remote notifications API with the locally persisted list,
filters by recipient and role, and pushes the filtered list to UI
subscribers after every change.

The durable store holds the only copy of record under a single key. Every
operation reads the full unfiltered list, applies its change, writes it
back and broadcasts the filtered view. Read-modify-write sections are
serialized by a single-writer lock so concurrent appends cannot drop each
other's writes.

Usage:
    store = NotificationStore(storage=..., api_client=..., identity=...)
    unsubscribe = store.subscribe(render_badge)
    notifications = await store.list()
    await store.mark_read(notifications[0].id)
"""

import asyncio
import logging
import time
import uuid
from typing import Callable, List, Optional

from pydantic import ValidationError

from pawfeed.core.sentry import capture_exception
from pawfeed.exceptions import IdentityError, PawfeedError, SerializationError
from pawfeed.schemas.notification import (
    CurrentUser,
    Notification,
    NotificationCreate,
    NotificationList,
    utc_timestamp,
)
from pawfeed.services.identity import IdentityProvider, TokenStore, resolve_token
from pawfeed.services.notification_templates import (
    BookingRequest,
    BookingStatusChange,
    ChatMessage,
    booking_request,
    booking_status,
    chat_message,
)
from pawfeed.services.notifications_api import NotificationsAPIClient
from pawfeed.services.storage import KeyValueStore
from pawfeed.services.subscribers import Listener, SubscriberRegistry, Unsubscribe
from pawfeed.services.visibility import filter_for_user

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "notifications"
DEFAULT_FETCH_DEBOUNCE_MS = 3000


class NotificationStore:
    """
    Canonical notification list with remote refresh and UI fan-out.

    No public method raises: storage and remote failures are logged and
    the call falls back to an empty list, unchanged state or a dropped
    update.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        api_client: NotificationsAPIClient,
        identity: IdentityProvider,
        token_store: Optional[TokenStore] = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
        fetch_debounce_ms: int = DEFAULT_FETCH_DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self._storage = storage
        self._api = api_client
        self._identity = identity
        self._token_store = token_store
        self._key = storage_key
        self._debounce_seconds = fetch_debounce_ms / 1000.0
        self._clock = clock
        self._new_id = id_factory

        self._subscribers = SubscriberRegistry()
        self._write_lock = asyncio.Lock()
        # None means "never fetched"; refresh() resets it
        self._last_fetch_at: Optional[float] = None

        self._remote_attempts = 0
        self._debounced_fetches = 0
        self._storage_failures = 0

    # Subscriptions

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Receive the filtered list after every change."""
        return self._subscribers.subscribe(listener)

    async def _broadcast(self, notifications: List[Notification]) -> List[Notification]:
        visible = await self._filter(notifications)
        self._subscribers.broadcast(visible)
        return visible

    # Durable storage

    async def _load(self) -> List[Notification]:
        """Read the unfiltered canonical list. Absent key reads as empty."""
        raw = await self._storage.get(self._key)
        if not raw:
            return []
        try:
            return NotificationList.validate_json(raw)
        except ValidationError as e:
            raise SerializationError(self._key, f"{e.error_count()} validation errors") from e

    async def _save(self, notifications: List[Notification]) -> None:
        payload = NotificationList.dump_json(notifications, by_alias=True)
        await self._storage.set(self._key, payload)
        logger.debug(f"Saved {len(notifications)} notifications")

    # Identity

    async def _current_user(self) -> Optional[CurrentUser]:
        try:
            return await self._identity.get_current_user()
        except IdentityError as e:
            logger.warning(f"Could not resolve current user: {e.detail}", extra=e.to_dict())
        except Exception as e:
            error = IdentityError(f"Identity provider failed: {e}")
            logger.warning(f"Could not resolve current user: {error.detail}", extra=error.to_dict())
        return None

    async def _filter(self, notifications: List[Notification]) -> List[Notification]:
        """Visible subset for the current user; unfiltered if filtering fails."""
        user = await self._current_user()
        try:
            visible = filter_for_user(notifications, user)
        except Exception:
            logger.exception("Notification filtering failed, returning unfiltered list")
            return list(notifications)
        if user is not None:
            logger.debug(
                f"Filtered {len(notifications)} -> {len(visible)} notifications "
                f"for user {user.id} (pet_sitter={user.is_pet_sitter})"
            )
        return visible

    async def _token_for(self, user: CurrentUser) -> Optional[str]:
        try:
            return await resolve_token(user, self._token_store)
        except Exception as e:
            logger.warning(f"Token lookup failed for user {user.id}: {e}")
            return None

    # Remote

    def _debounced(self) -> bool:
        now = self._clock()
        if self._last_fetch_at is not None and now - self._last_fetch_at < self._debounce_seconds:
            return True
        self._last_fetch_at = now
        return False

    async def _fetch_remote(self) -> List[Notification]:
        """
        Fetch from the API at most once per debounce window.

        Returns [] when debounced, signed out, missing a token or on any
        remote failure.
        """
        if self._debounced():
            self._debounced_fetches += 1
            logger.debug("Skipping notification API call due to debounce")
            return []

        user = await self._current_user()
        if user is None:
            logger.debug("No user signed in, skipping notification API call")
            return []

        token = await self._token_for(user)
        if not token:
            logger.info(f"No token available for user {user.id}, skipping notification API call")
            return []

        self._remote_attempts += 1
        return await self._api.fetch_notifications(token)

    async def _load_visible(self) -> List[Notification]:
        remote = await self._fetch_remote()
        async with self._write_lock:
            if remote:
                await self._save(remote)
                notifications = remote
            else:
                notifications = await self._load()
                logger.debug(f"Using {len(notifications)} local notifications")
            return await self._broadcast(notifications)

    async def _load_local_visible(self) -> List[Notification]:
        async with self._write_lock:
            return await self._broadcast(await self._load())

    async def list(self) -> List[Notification]:
        """
        Notifications visible to the current user, newest first.

        A non-empty remote result replaces the local list. Otherwise the
        local list is used. Never raises; the last resort is [].
        """
        try:
            return await self._load_visible()
        except Exception as e:
            self._record_failure(e, "list")

        try:
            return await self._load_local_visible()
        except Exception as e:
            self._record_failure(e, "list_local_fallback")
        return []

    async def refresh(self) -> List[Notification]:
        """Like list(), but ignores the debounce window."""
        self._last_fetch_at = None
        return await self.list()

    async def unread_count(self) -> int:
        notifications = await self.list()
        return sum(1 for n in notifications if not n.is_read)

    # Mutations

    async def append(
        self,
        payload: NotificationCreate,
        for_user_id: Optional[str] = None,
    ) -> Optional[Notification]:
        """
        Create a notification locally and prepend it to the list.

        Returns:
            The created notification, or None when it could not be stored
        """
        fields = payload.model_dump(exclude={"user_id"})
        notification = Notification(
            **fields,
            id=self._new_id(),
            time=utc_timestamp(),
            is_read=False,
            user_id=for_user_id if for_user_id is not None else payload.user_id,
        )
        logger.info(
            f"Adding notification {notification.id} ({notification.type}): {notification.title}"
        )

        try:
            async with self._write_lock:
                notifications = await self._load()
                notifications.insert(0, notification)
                await self._save(notifications)
        except Exception as e:
            self._record_failure(e, "append")
            return None

        # Stored from here on; a failed fan-out must not report the append as lost
        try:
            await self._broadcast(notifications)
        except Exception as e:
            self._record_failure(e, "append_broadcast")
        return notification

    async def append_for_user(
        self,
        user_id: str,
        payload: NotificationCreate,
    ) -> Optional[Notification]:
        """Create a notification visible only to ``user_id``."""
        return await self.append(payload, for_user_id=user_id)

    async def _update(self, operation: str, change: Callable[[List[Notification]], List[Notification]]) -> None:
        try:
            async with self._write_lock:
                notifications = change(await self._load())
                await self._save(notifications)
                await self._broadcast(notifications)
        except Exception as e:
            self._record_failure(e, operation)

    async def _sync_remote(self, operation: str, call) -> None:
        """Best-effort remote update; the local change happens regardless."""
        user = await self._current_user()
        if user is None:
            logger.debug(f"No user signed in, skipping remote {operation}")
            return
        token = await self._token_for(user)
        if not token:
            logger.debug(f"No token for user {user.id}, skipping remote {operation}")
            return
        try:
            await call(token)
        except Exception as e:
            logger.warning(f"Remote {operation} failed, updating locally only: {e}")

    async def mark_read(self, notification_id: str) -> None:
        await self._sync_remote(
            "mark_read",
            lambda token: self._api.mark_read(notification_id, token),
        )
        await self._update(
            "mark_read",
            lambda items: [
                n.model_copy(update={"is_read": True}) if n.id == notification_id else n
                for n in items
            ],
        )

    async def mark_all_read(self) -> None:
        await self._sync_remote("mark_all_read", self._api.mark_all_read)
        await self._update(
            "mark_all_read",
            lambda items: [n.model_copy(update={"is_read": True}) for n in items],
        )

    async def delete(self, notification_id: str) -> None:
        await self._update(
            "delete",
            lambda items: [n for n in items if n.id != notification_id],
        )

    async def clear_all(self) -> None:
        """Erase the stored list and tell subscribers it is empty."""
        logger.info("Clearing all notifications")
        try:
            async with self._write_lock:
                await self._storage.delete(self._key)
        except Exception as e:
            self._record_failure(e, "clear_all")
            return
        self._subscribers.broadcast([])

    # Notification builders

    async def notify_booking_request(self, booking: BookingRequest) -> Optional[Notification]:
        return await self.append(booking_request(booking))

    async def notify_booking_status(self, booking: BookingStatusChange) -> Optional[Notification]:
        return await self.append(booking_status(booking))

    async def notify_message(self, message: ChatMessage) -> Optional[Notification]:
        return await self.append(chat_message(message))

    # Housekeeping

    def _record_failure(self, error: Exception, operation: str) -> None:
        if isinstance(error, PawfeedError):
            self._storage_failures += 1
            logger.error(f"Notification {operation} failed: {error}", extra=error.to_dict())
        else:
            logger.exception(f"Unexpected error during notification {operation}")
        capture_exception(error, context={"operation": operation})

    def get_stats(self) -> dict:
        return {
            "subscribers": self._subscribers.count,
            "remote_attempts": self._remote_attempts,
            "debounced_fetches": self._debounced_fetches,
            "storage_failures": self._storage_failures,
        }

    async def close(self) -> None:
        """Drop all subscribers and release network and storage resources."""
        self._subscribers.clear()
        await self._api.close()
        await self._storage.close()

"""
Client for the marketplace notifications API.

Endpoints:
    GET  /api/notifications/                 list for the bearer's account
    PUT  /api/notifications/{id}/read        mark one read
    PUT  /api/notifications/mark-all-read    mark all read

Every method degrades instead of raising: fetches return an empty list and
updates return False when the API is unreachable or answers with an error.
"""

from typing import List, Optional
import logging

import httpx
from pydantic import ValidationError

from pawfeed.exceptions import RemoteServiceError
from pawfeed.schemas.notification import (
    Notification,
    RemoteNotification,
    RemoteNotificationList,
)

logger = logging.getLogger(__name__)


class NotificationsAPIClient:
    """Thin async wrapper around the notifications endpoints."""

    LIST_PATH = "/api/notifications/"
    MARK_READ_PATH = "/api/notifications/{notification_id}/read"
    MARK_ALL_READ_PATH = "/api/notifications/mark-all-read"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout)
        return self._client

    @staticmethod
    def _auth_headers(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    async def _request(self, method: str, path: str, token: str, **kwargs) -> httpx.Response:
        """Send a request; non-2xx and transport failures raise RemoteServiceError."""
        try:
            response = await self._get_client().request(
                method,
                path,
                headers=self._auth_headers(token),
                **kwargs,
            )
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            raise RemoteServiceError(
                f"{method} {path} returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise RemoteServiceError(f"{method} {path} failed: {e}") from e

    async def fetch_notifications(self, token: str) -> List[Notification]:
        """
        Fetch the account's notifications mapped into the canonical shape.

        Returns:
            Notifications in server order, or [] on any failure
        """
        try:
            response = await self._request("GET", self.LIST_PATH, token)
            envelope = RemoteNotificationList.model_validate(response.json())
        except RemoteServiceError as e:
            logger.warning(f"Notification fetch failed: {e.detail}")
            return []
        except (ValueError, ValidationError) as e:
            logger.warning(f"Malformed notifications payload: {e}")
            return []

        if not envelope.success or not envelope.notifications:
            return []

        notifications = []
        for raw in envelope.notifications:
            try:
                notifications.append(RemoteNotification.model_validate(raw).to_notification())
            except ValidationError as e:
                logger.warning(f"Skipping malformed remote notification: {e.error_count()} errors")

        logger.info(f"Fetched {len(notifications)} notifications from API")
        return notifications

    async def mark_read(self, notification_id: str, token: str) -> bool:
        path = self.MARK_READ_PATH.format(notification_id=notification_id)
        try:
            await self._request("PUT", path, token, json={})
        except RemoteServiceError as e:
            logger.warning(f"Failed to mark notification {notification_id} read on API: {e.detail}")
            return False
        logger.info(f"Marked notification {notification_id} read on API")
        return True

    async def mark_all_read(self, token: str) -> bool:
        try:
            await self._request("PUT", self.MARK_ALL_READ_PATH, token, json={})
        except RemoteServiceError as e:
            logger.warning(f"Failed to mark all notifications read on API: {e.detail}")
            return False
        logger.info("Marked all notifications read on API")
        return True

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

"""
Recipient and role based visibility of notifications.

Pet sitters see every notification type. Pet owners only see messages,
system notices and booking status changes (confirmations/cancellations).
A notification addressed to a specific user is visible to that user only.
"""

from typing import Iterable, List, Optional

from pawfeed.schemas.notification import (
    BookingStatus,
    CurrentUser,
    Notification,
    NotificationType,
)

SITTER_VISIBLE_TYPES = frozenset({
    NotificationType.BOOKING.value,
    NotificationType.MESSAGE.value,
    NotificationType.REVIEW.value,
    NotificationType.SYSTEM.value,
})

OWNER_VISIBLE_TYPES = frozenset({
    NotificationType.MESSAGE.value,
    NotificationType.SYSTEM.value,
})

BOOKING_STATUS_VALUES = frozenset(status.value for status in BookingStatus)


def is_booking_status_change(notification: Notification) -> bool:
    """Booking notification reporting a confirmation or cancellation."""
    if notification.type != NotificationType.BOOKING.value:
        return False
    # data is free-form; only a string status can match
    data = notification.data if isinstance(notification.data, dict) else {}
    status = data.get("status")
    if isinstance(status, str) and status in BOOKING_STATUS_VALUES:
        return True
    title = notification.title or ""
    return "confirmed" in title or "cancelled" in title


def is_visible(notification: Notification, user: CurrentUser) -> bool:
    if notification.user_id:
        return notification.user_id == user.id

    if user.is_pet_sitter:
        return notification.type in SITTER_VISIBLE_TYPES

    return notification.type in OWNER_VISIBLE_TYPES or is_booking_status_change(notification)


def filter_for_user(
    notifications: Iterable[Notification],
    user: Optional[CurrentUser],
) -> List[Notification]:
    """
    Return the notifications ``user`` may see, preserving order.

    With no signed-in user the list is returned unfiltered.
    """
    if user is None:
        return list(notifications)
    return [n for n in notifications if is_visible(n, user)]

from pawfeed.schemas.notification import (
    BookingStatus,
    CurrentUser,
    Notification,
    NotificationCreate,
    NotificationType,
    RemoteNotification,
    RemoteNotificationList,
)

__all__ = [
    "BookingStatus",
    "CurrentUser",
    "Notification",
    "NotificationCreate",
    "NotificationType",
    "RemoteNotification",
    "RemoteNotificationList",
]

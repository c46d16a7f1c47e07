"""
Test factories for generating realistic test data.

Uses factory_boy for declarative test data generation.
"""

from .notification import (
    RemoteNotificationFactory,
    ReadRemoteNotificationFactory,
    NotificationCreateFactory,
    SystemNotificationFactory,
    ReviewNotificationFactory,
    BookingRequestNotificationFactory,
    BookingConfirmedNotificationFactory,
)

__all__ = [
    "RemoteNotificationFactory",
    "ReadRemoteNotificationFactory",
    "NotificationCreateFactory",
    "SystemNotificationFactory",
    "ReviewNotificationFactory",
    "BookingRequestNotificationFactory",
    "BookingConfirmedNotificationFactory",
]

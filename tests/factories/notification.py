"""
Notification test factories.

Generates remote API records and local create payloads for testing.
"""

import factory
from faker import Faker

from pawfeed.schemas.notification import NotificationCreate

fake = Faker()


class RemoteNotificationFactory(factory.Factory):
    """
    Factory for records as served by GET /api/notifications/.

    Usage:
        record = RemoteNotificationFactory()
        record = RemoteNotificationFactory(type="review")
        records = RemoteNotificationFactory.create_batch(5)
    """

    class Meta:
        model = dict

    id = factory.Sequence(lambda n: n + 1)
    type = factory.LazyFunction(
        lambda: fake.random_element(["booking", "message", "review", "system"])
    )
    title = factory.LazyFunction(
        lambda: fake.random_element([
            "New Booking Request",
            "New Message",
            "New Review Received",
            "Profile Update Required",
        ])
    )
    message = factory.LazyFunction(fake.sentence)
    created_at = factory.LazyFunction(lambda: fake.date_time_this_month().isoformat())
    read_at = None
    data = None


class ReadRemoteNotificationFactory(RemoteNotificationFactory):
    """Factory for records the server already marked read."""

    read_at = factory.LazyFunction(lambda: fake.date_time_this_month().isoformat())


class NotificationCreateFactory(factory.Factory):
    """Factory for local create payloads."""

    class Meta:
        model = NotificationCreate

    type = "message"
    title = "New Message"
    message = factory.LazyFunction(fake.sentence)
    action = "Reply"
    data = None


class SystemNotificationFactory(NotificationCreateFactory):
    type = "system"
    title = "Payment Processed"
    action = None


class ReviewNotificationFactory(NotificationCreateFactory):
    type = "review"
    title = "New Review Received"
    action = None
    data = factory.LazyFunction(lambda: {"rating": 5, "reviewerName": fake.name()})


class BookingRequestNotificationFactory(NotificationCreateFactory):
    type = "booking"
    title = "New Booking Request"
    action = "View Request"
    data = factory.LazyFunction(lambda: {"bookingId": str(fake.random_int(1, 999))})


class BookingConfirmedNotificationFactory(NotificationCreateFactory):
    type = "booking"
    title = "Booking Confirmed"
    action = "Message"
    data = factory.LazyFunction(
        lambda: {"bookingId": str(fake.random_int(1, 999)), "status": "confirmed"}
    )

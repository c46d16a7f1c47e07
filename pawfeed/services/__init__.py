# Services module
from pawfeed.services.notification_store import NotificationStore
from pawfeed.services.subscribers import SubscriberRegistry
from pawfeed.services.notifications_api import NotificationsAPIClient
from pawfeed.services.storage import InMemoryKeyValueStore, RedisKeyValueStore

__all__ = [
    "NotificationStore",
    "SubscriberRegistry",
    "NotificationsAPIClient",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
]

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class NotificationType(str, Enum):
    """Kinds of in-app notification."""
    BOOKING = "booking"
    MESSAGE = "message"
    REVIEW = "review"
    SYSTEM = "system"


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class FeedModel(BaseModel):
    """Records are stored and broadcast with camelCase keys (isRead, userId)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class NotificationCreate(FeedModel):
    """Schema for creating a notification locally."""
    type: NotificationType
    title: str
    message: str
    action: Optional[str] = None
    data: Optional[Any] = None
    avatar: Optional[Any] = None
    user_id: Optional[str] = None

    @field_validator("user_id", mode="before")
    @classmethod
    def coerce_user_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class Notification(NotificationCreate):
    """A notification record as held in the canonical list."""
    id: str
    time: str
    is_read: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @property
    def display_time(self) -> str:
        return format_display_time(self.time)


NotificationList = TypeAdapter(list[Notification])


class RemoteNotification(BaseModel):
    """One record of the remote `GET /api/notifications/` payload."""
    id: int | str
    type: NotificationType = NotificationType.SYSTEM
    title: str = "Notification"
    message: str = ""
    created_at: str
    read_at: Optional[str] = None
    data: Optional[Any] = None

    @field_validator("type", "title", "message", mode="before")
    @classmethod
    def empty_to_default(cls, v: Any, info) -> Any:
        # Remote sends null or "" for unset columns
        if v is None or v == "":
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("created_at", "read_at", mode="before")
    @classmethod
    def stringify_timestamp(cls, v: Any) -> Any:
        return str(v) if isinstance(v, (int, float)) else v

    def to_notification(self) -> Notification:
        return Notification(
            id=str(self.id),
            type=self.type,
            title=self.title,
            message=self.message,
            time=self.created_at,
            is_read=bool(self.read_at),
            data=self.data or None,
        )


class RemoteNotificationList(BaseModel):
    """Envelope of the remote list endpoint."""
    success: bool = False
    notifications: Optional[list[Any]] = None


class CurrentUser(FeedModel):
    """The signed-in identity as reported by the identity provider."""
    id: str
    token: Optional[str] = Field(default=None, repr=False)
    user_type: Optional[str] = None
    role: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @property
    def is_pet_sitter(self) -> bool:
        return self.user_type == "pet_sitter" or self.role == "pet_sitter"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Canonical sortable instant for locally created records."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat()


def format_display_time(value: str) -> str:
    """
    Render a stored timestamp for display in local time.

    Values that are not ISO-8601 (older cached records, odd server formats)
    are returned unchanged.
    """
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone().strftime("%x, %X")

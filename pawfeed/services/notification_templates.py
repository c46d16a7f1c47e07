"""Builders for the booking and chat notifications the app raises locally."""

from typing import Optional

from pydantic import BaseModel

from pawfeed.schemas.notification import (
    BookingStatus,
    NotificationCreate,
    NotificationType,
)

MESSAGE_PREVIEW_LENGTH = 50


class BookingDetails(BaseModel):
    """Booking fields shared by request and status notifications."""
    sitter_id: str
    sitter_name: str
    pet_owner_id: str
    pet_owner_name: str
    booking_id: str
    date: str
    start_time: str
    end_time: str


class BookingRequest(BookingDetails):
    hourly_rate: float


class BookingStatusChange(BookingDetails):
    status: BookingStatus


class ChatMessage(BaseModel):
    sender_id: str
    sender_name: str
    message: str
    is_booking_related: Optional[bool] = None


def _booking_data(booking: BookingDetails) -> dict:
    return {
        "sitterId": booking.sitter_id,
        "sitterName": booking.sitter_name,
        "petOwnerId": booking.pet_owner_id,
        "petOwnerName": booking.pet_owner_name,
        "bookingId": booking.booking_id,
        "date": booking.date,
        "startTime": booking.start_time,
        "endTime": booking.end_time,
    }


def _format_rate(rate: float) -> str:
    # Whole rates print without ".0"; others keep every digit
    return str(int(rate)) if rate.is_integer() else repr(rate)


def booking_request(booking: BookingRequest) -> NotificationCreate:
    """New booking request, addressed to the sitter."""
    return NotificationCreate(
        type=NotificationType.BOOKING,
        title="New Booking Request",
        message=(
            f"{booking.pet_owner_name} wants to book you for {booking.date} "
            f"from {booking.start_time} to {booking.end_time} "
            f"at ₱{_format_rate(booking.hourly_rate)}/hour"
        ),
        action="View Request",
        data={**_booking_data(booking), "hourlyRate": booking.hourly_rate},
        user_id=booking.sitter_id,
    )


def booking_status(booking: BookingStatusChange) -> NotificationCreate:
    """Confirmation or cancellation, addressed to the pet owner."""
    status = BookingStatus(booking.status)
    when = f"{booking.date} from {booking.start_time} to {booking.end_time}"

    if status == BookingStatus.CONFIRMED:
        message = (
            f"✅ Great news! {booking.sitter_name} has confirmed your booking for {when}. "
            "You can now message them to coordinate details."
        )
        action = "Message"
    else:
        message = (
            f"❌ {booking.sitter_name} has cancelled your booking for {when}. "
            "Sorry for the inconvenience."
        )
        action = "View"

    return NotificationCreate(
        type=NotificationType.BOOKING,
        title=f"Booking {status.value.capitalize()}",
        message=message,
        action=action,
        data={**_booking_data(booking), "status": status.value},
        user_id=booking.pet_owner_id,
    )


def chat_message(message: ChatMessage) -> NotificationCreate:
    """Incoming chat message preview; not addressed to a specific user."""
    preview = message.message[:MESSAGE_PREVIEW_LENGTH]
    if len(message.message) > MESSAGE_PREVIEW_LENGTH:
        preview += "..."

    return NotificationCreate(
        type=NotificationType.MESSAGE,
        title="New Message (Booking Related)" if message.is_booking_related else "New Message",
        message=f"{message.sender_name}: {preview}",
        action="Reply",
        data={
            "senderId": message.sender_id,
            "senderName": message.sender_name,
            "message": message.message,
            "isBookingRelated": message.is_booking_related,
        },
    )

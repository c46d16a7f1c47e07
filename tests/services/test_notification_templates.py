"""Tests for booking and chat notification builders."""

import pytest

from pawfeed.services.notification_templates import (
    BookingRequest,
    BookingStatusChange,
    ChatMessage,
    booking_request,
    booking_status,
    chat_message,
)

BOOKING = {
    "sitter_id": "21",
    "sitter_name": "John Smith",
    "pet_owner_id": "5",
    "pet_owner_name": "Sarah Johnson",
    "booking_id": "123",
    "date": "Friday",
    "start_time": "2:00 PM",
    "end_time": "6:00 PM",
}


class TestBookingRequest:
    def test_builds_sitter_notification(self):
        payload = booking_request(BookingRequest(**BOOKING, hourly_rate=25))

        assert payload.type == "booking"
        assert payload.title == "New Booking Request"
        assert payload.message == (
            "Sarah Johnson wants to book you for Friday from 2:00 PM to 6:00 PM at ₱25/hour"
        )
        assert payload.action == "View Request"
        assert payload.user_id == "21"
        assert payload.data["bookingId"] == "123"
        assert payload.data["hourlyRate"] == 25

    def test_fractional_rate(self):
        payload = booking_request(BookingRequest(**BOOKING, hourly_rate=12.5))
        assert payload.message.endswith("at ₱12.5/hour")

    def test_rate_keeps_every_digit(self):
        payload = booking_request(BookingRequest(**BOOKING, hourly_rate=1234.567))
        assert payload.message.endswith("at ₱1234.567/hour")

    def test_whole_float_rate_has_no_decimal(self):
        payload = booking_request(BookingRequest(**BOOKING, hourly_rate=300.0))
        assert payload.message.endswith("at ₱300/hour")


class TestBookingStatus:
    def test_confirmed(self):
        payload = booking_status(BookingStatusChange(**BOOKING, status="confirmed"))

        assert payload.title == "Booking Confirmed"
        assert payload.action == "Message"
        assert payload.message == (
            "✅ Great news! John Smith has confirmed your booking for Friday from 2:00 PM "
            "to 6:00 PM. You can now message them to coordinate details."
        )
        assert payload.user_id == "5"
        assert payload.data["status"] == "confirmed"

    def test_cancelled(self):
        payload = booking_status(BookingStatusChange(**BOOKING, status="cancelled"))

        assert payload.title == "Booking Cancelled"
        assert payload.action == "View"
        assert payload.message == (
            "❌ John Smith has cancelled your booking for Friday from 2:00 PM "
            "to 6:00 PM. Sorry for the inconvenience."
        )
        assert payload.data["status"] == "cancelled"

    def test_rejects_unknown_status(self):
        with pytest.raises(ValueError):
            BookingStatusChange(**BOOKING, status="pending")


class TestChatMessage:
    def test_short_message(self):
        payload = chat_message(ChatMessage(sender_id="9", sender_name="Mike", message="On my way"))

        assert payload.type == "message"
        assert payload.title == "New Message"
        assert payload.message == "Mike: On my way"
        assert payload.action == "Reply"
        assert payload.user_id is None

    def test_long_message_is_truncated(self):
        text = "x" * 60
        payload = chat_message(ChatMessage(sender_id="9", sender_name="Mike", message=text))

        assert payload.message == "Mike: " + "x" * 50 + "..."
        assert payload.data["message"] == text

    def test_exactly_fifty_characters_not_truncated(self):
        text = "y" * 50
        payload = chat_message(ChatMessage(sender_id="9", sender_name="Mike", message=text))
        assert payload.message == "Mike: " + text

    def test_booking_related_title(self):
        payload = chat_message(
            ChatMessage(sender_id="9", sender_name="Mike", message="hi", is_booking_related=True)
        )
        assert payload.title == "New Message (Booking Related)"

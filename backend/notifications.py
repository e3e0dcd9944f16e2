# booking-backend/notifications.py

"""Simulated customer notifications. Nothing is sent; messages are only logged."""

import logging

from schemas import Booking

logger = logging.getLogger(__name__)


def _when(booking: Booking) -> str:
    return booking.datetime.strftime("%A %d %B %Y, %H:%M UTC")


def send_calendar_invite(booking: Booking) -> str:
    message = (
        "Calendar Invite Sent:\n"
        f"  To: {booking.customer_email}\n"
        "  Subject: Appointment Confirmation\n"
        f"  Details: {booking.reason}\n"
        f"  Time: {_when(booking)}"
    )
    logger.info(message)
    return message


def send_status_notification(booking: Booking) -> str:
    status = booking.status.value
    message = (
        "Email Notification Sent:\n"
        f"  To: {booking.customer_email}\n"
        f"  Subject: Appointment {status.capitalize()}\n"
        f"  Message: Your appointment on {_when(booking)} has been {status}."
    )
    logger.info(message)
    return message

# booking-backend/schemas.py

"""Pydantic models shared by the slot catalog, the ledger and the API.

Python attributes are snake_case; the JSON form (API payloads and the
bookings file) uses camelCase aliases, e.g. ``slotId`` and ``createdAt``.
"""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BookingStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"

    @property
    def holds_slot(self) -> bool:
        """Pending and approved bookings keep their slot; denied ones release it."""
        return self is not BookingStatus.DENIED


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Slot(CamelModel):
    """A bookable interval, identified by its start time."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    datetime: dt.datetime


class SlotAvailability(CamelModel):
    id: str
    datetime: dt.datetime
    available: bool


class Booking(CamelModel):
    """A customer's request against a single slot."""

    id: str
    slot_id: str
    datetime: dt.datetime  # snapshot of the slot time when the booking was made
    customer_name: str
    customer_email: str
    reason: str
    status: BookingStatus = BookingStatus.PENDING
    created_at: dt.datetime

    def holds_slot(self, slot_id: str) -> bool:
        return self.slot_id == slot_id and self.status.holds_slot

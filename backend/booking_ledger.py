# booking-backend/booking_ledger.py

"""The booking ledger: the only writer of booking records.

At most one pending or approved booking may reference a given slot. All
mutations run under one lock, so the read-check-write in ``create_booking``
cannot interleave with another request for the same slot. Expected
failures (unknown slot, taken slot, unknown booking, storage write errors)
come back as ``BookingResult`` values rather than exceptions.
"""

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional

from booking_store import BookingStore, StorageUnavailable
from schemas import Booking, BookingStatus, SlotAvailability
from slot_generator import SlotCatalog, utcnow

logger = logging.getLogger(__name__)


class BookingError(str, Enum):
    INVALID_SLOT = "Invalid time slot"
    SLOT_ALREADY_BOOKED = "Time slot is already booked"
    BOOKING_NOT_FOUND = "Booking not found"
    STORAGE_UNAVAILABLE = "Booking storage unavailable"


@dataclass(frozen=True)
class BookingResult:
    booking: Optional[Booking] = None
    error: Optional[BookingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, booking: Booking) -> "BookingResult":
        return cls(booking=booking.model_copy())

    @classmethod
    def failure(cls, error: BookingError) -> "BookingResult":
        return cls(error=error)


def new_booking_id(now: datetime) -> str:
    return f"booking_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:9]}"


class BookingLedger:
    def __init__(
        self,
        catalog: SlotCatalog,
        store: BookingStore,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[datetime], str] = new_booking_id,
    ):
        self.catalog = catalog
        self.store = store
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.Lock()

    def _snapshot(self) -> List[Booking]:
        with self._lock:
            return self.store.load()

    def list_availability(self) -> List[SlotAvailability]:
        """Every catalog slot, marked unavailable while a pending or approved booking holds it."""
        held = {b.slot_id for b in self._snapshot() if b.status.holds_slot}
        return [
            SlotAvailability(id=slot.id, datetime=slot.datetime, available=slot.id not in held)
            for slot in self.catalog.slots()
        ]

    def list_bookings(self, status: Optional[BookingStatus] = None) -> List[Booking]:
        """All bookings ordered by appointment time, optionally only one status."""
        bookings = self._snapshot()
        if status is not None:
            bookings = [b for b in bookings if b.status == status]
        # sorted() is stable, so bookings for the same slot keep creation order
        return sorted(bookings, key=lambda b: b.datetime)

    def get_booking(self, booking_id: str) -> BookingResult:
        for booking in self._snapshot():
            if booking.id == booking_id:
                return BookingResult.success(booking)
        return BookingResult.failure(BookingError.BOOKING_NOT_FOUND)

    def status_counts(self) -> Dict[str, int]:
        bookings = self._snapshot()
        counts = {"total": len(bookings)}
        for status in BookingStatus:
            counts[status.value] = sum(1 for b in bookings if b.status == status)
        return counts

    def create_booking(
        self, slot_id: str, customer_name: str, customer_email: str, reason: str
    ) -> BookingResult:
        slot = self.catalog.get(slot_id)
        if slot is None:
            logger.info("Rejected booking for unknown slot %s", slot_id)
            return BookingResult.failure(BookingError.INVALID_SLOT)

        with self._lock:
            bookings = self.store.load()
            if any(b.holds_slot(slot_id) for b in bookings):
                logger.info("Rejected booking for %s: slot already held", slot_id)
                return BookingResult.failure(BookingError.SLOT_ALREADY_BOOKED)

            now = self._clock()
            booking = Booking(
                id=self._id_factory(now),
                slot_id=slot.id,
                datetime=slot.datetime,
                customer_name=customer_name,
                customer_email=customer_email,
                reason=reason,
                status=BookingStatus.PENDING,
                created_at=now,
            )
            try:
                self.store.save(bookings + [booking])
            except StorageUnavailable:
                return BookingResult.failure(BookingError.STORAGE_UNAVAILABLE)

        logger.info("Created booking %s for slot %s", booking.id, slot_id)
        return BookingResult.success(booking)

    def update_status(self, booking_id: str, status: BookingStatus) -> BookingResult:
        """
        Overwrite a booking's status and persist.

        Any booking may be moved to approved or denied, including one that
        already has that status; the write happens either way.
        """
        status = BookingStatus(status)
        if status is BookingStatus.PENDING:
            raise ValueError("bookings can only be moved to approved or denied")

        with self._lock:
            bookings = self.store.load()
            index = next((i for i, b in enumerate(bookings) if b.id == booking_id), None)
            if index is None:
                return BookingResult.failure(BookingError.BOOKING_NOT_FOUND)

            previous = bookings[index].status
            updated = bookings[index].model_copy(update={"status": status})
            bookings[index] = updated
            try:
                self.store.save(bookings)
            except StorageUnavailable:
                return BookingResult.failure(BookingError.STORAGE_UNAVAILABLE)

        if previous is status:
            logger.info("Booking %s re-marked %s", booking_id, status.value)
        else:
            logger.info("Booking %s moved from %s to %s", booking_id, previous.value, status.value)
        return BookingResult.success(updated)

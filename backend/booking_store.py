# booking-backend/booking_store.py

"""Persistence backends for the booking collection.

Every store keeps the whole collection: ``load()`` returns all bookings and
``save()`` replaces them. Stores never raise on read: unreadable storage is
logged and treated as "no bookings yet". Write failures raise
``StorageUnavailable`` so the caller can report them.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Iterable, List, Sequence

from sqlalchemy.exc import SQLAlchemyError

from database import make_engine, make_session_factory
from models import BookingRecord, create_db_tables
from schemas import Booking, BookingStatus, Slot

logger = logging.getLogger(__name__)


class StorageUnavailable(Exception):
    """The booking collection could not be written."""


class BookingStore(ABC):
    name = "abstract"

    @abstractmethod
    def load(self) -> List[Booking]:
        """Return every stored booking."""

    @abstractmethod
    def save(self, bookings: Sequence[Booking]) -> None:
        """Replace the stored collection with ``bookings``."""


class JsonFileStore(BookingStore):
    """
    A single JSON document holding an array of bookings.

    The file is rewritten in full on every save. There is no partial-write
    protection: a crash in the middle of a write can leave a corrupt file,
    which then reads back as an empty collection.
    """

    name = "json"

    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[Booking]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return [Booking.model_validate(item) for item in data]
        except (OSError, ValueError, TypeError) as e:
            # pydantic's ValidationError is a ValueError
            logger.warning("Failed to read bookings from %s: %s", self.path, e)
            return []

    def save(self, bookings: Sequence[Booking]) -> None:
        payload = [b.model_dump(mode="json", by_alias=True) for b in bookings]
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
        except OSError as e:
            logger.error("Failed to write bookings to %s: %s", self.path, e)
            raise StorageUnavailable(str(e)) from e


class MemoryStore(BookingStore):
    """Bookings kept in process memory; lost on restart."""

    name = "memory"

    def __init__(self, bookings: Iterable[Booking] = ()):
        self._bookings: List[Booking] = [b.model_copy() for b in bookings]

    def load(self) -> List[Booking]:
        return [b.model_copy() for b in self._bookings]

    def save(self, bookings: Sequence[Booking]) -> None:
        self._bookings = [b.model_copy() for b in bookings]


class SqlStore(BookingStore):
    """Bookings stored as rows of the ``bookings`` table through SQLAlchemy."""

    name = "sql"

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.engine = make_engine(database_url)
        self.SessionLocal = make_session_factory(self.engine)
        # Create database tables if they don't exist
        create_db_tables(self.engine)

    def load(self) -> List[Booking]:
        db = self.SessionLocal()
        try:
            return [record.to_booking() for record in db.query(BookingRecord).all()]
        except SQLAlchemyError as e:
            logger.warning("Failed to read bookings from %s: %s", self.engine.url, e)
            return []
        finally:
            db.close()

    def save(self, bookings: Sequence[Booking]) -> None:
        # Bookings are never deleted, so merging every row is a full rewrite
        db = self.SessionLocal()
        try:
            for booking in bookings:
                db.merge(BookingRecord.from_booking(booking))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to write bookings to %s: %s", self.engine.url, e)
            raise StorageUnavailable(str(e)) from e
        finally:
            db.close()

    def close(self) -> None:
        self.engine.dispose()


def sample_bookings(slots: Sequence[Slot], now: datetime) -> List[Booking]:
    """A few demo bookings on distinct slots, one per status."""
    samples = [
        ("John Smith", "john@example.com", "Initial consultation", BookingStatus.PENDING),
        ("Sarah Johnson", "sarah@example.com", "Follow-up meeting", BookingStatus.APPROVED),
        ("Mike Brown", "mike@example.com", "Project discussion", BookingStatus.DENIED),
    ]
    # Spread the samples out instead of taking the first three slots of the day
    chosen = list(slots)[2::5][: len(samples)]
    return [
        Booking(
            id=f"booking_sample_{index + 1}",
            slot_id=slot.id,
            datetime=slot.datetime,
            customer_name=name,
            customer_email=email,
            reason=reason,
            status=status,
            created_at=now - timedelta(hours=len(samples) - index),
        )
        for index, (slot, (name, email, reason, status)) in enumerate(zip(chosen, samples))
    ]

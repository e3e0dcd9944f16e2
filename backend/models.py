# booking-backend/models.py

from datetime import timezone

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.engine import Engine

from database import Base
from schemas import Booking, BookingStatus


class BookingRecord(Base):
    __tablename__ = "bookings"  # Name of the database table

    id = Column(String, primary_key=True, index=True)
    # Not a foreign key: slots are generated, never stored
    slot_id = Column(String, index=True, nullable=False)
    datetime_utc = Column(DateTime(timezone=True), index=True, nullable=False)
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default=BookingStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), nullable=False)

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingRecord":
        return cls(
            id=booking.id,
            slot_id=booking.slot_id,
            datetime_utc=booking.datetime,
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            reason=booking.reason,
            status=booking.status.value,
            created_at=booking.created_at,
        )

    def to_booking(self) -> Booking:
        # SQLite hands datetimes back naive; they were stored as UTC
        return Booking(
            id=self.id,
            slot_id=self.slot_id,
            datetime=_as_utc(self.datetime_utc),
            customer_name=self.customer_name,
            customer_email=self.customer_email,
            reason=self.reason,
            status=BookingStatus(self.status),
            created_at=_as_utc(self.created_at),
        )


def _as_utc(value):
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# This function creates the database tables if they don't exist
def create_db_tables(engine: Engine):
    Base.metadata.create_all(bind=engine)

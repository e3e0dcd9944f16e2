# booking-backend/csv_export.py

import csv
import io
from datetime import date
from typing import Iterable

from schemas import Booking

CSV_HEADERS = ["Date", "Time", "Customer Name", "Email", "Reason", "Status", "Booked At"]


def export_filename(today: date) -> str:
    return f"bookings-{today.isoformat()}.csv"


def bookings_to_csv(bookings: Iterable[Booking]) -> str:
    """Render bookings as the operator's CSV export, one row per booking."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for b in bookings:
        writer.writerow([
            b.datetime.strftime("%Y-%m-%d"),
            b.datetime.strftime("%H:%M"),
            b.customer_name,
            b.customer_email,
            b.reason,
            b.status.value,
            b.created_at.strftime("%Y-%m-%d %H:%M"),
        ])
    return buffer.getvalue()

# booking-backend/settings.py

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _get_bool(key: str, default: bool = False) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_list(key: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(key, default).split(",") if item.strip()]


# --- Storage ---
BOOKING_STORAGE = os.getenv("BOOKING_STORAGE", "json")  # json | memory | sql
BOOKINGS_FILE = os.getenv("BOOKINGS_FILE", os.path.join(".", "storage", "bookings.json"))
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./sql_app.db")
SEED_SAMPLE_BOOKINGS = _get_bool("SEED_SAMPLE_BOOKINGS", False)

# --- Slot generation policy ---
# Hours are UTC wall-clock hours.
HORIZON_DAYS = int(os.getenv("HORIZON_DAYS", "7"))
HORIZON_START = os.getenv("HORIZON_START", "today")  # today | week
BUSINESS_START_HOUR = int(os.getenv("BUSINESS_START_HOUR", "9"))
BUSINESS_END_HOUR = int(os.getenv("BUSINESS_END_HOUR", "17"))
SLOT_INTERVAL_MINUTES = int(os.getenv("SLOT_INTERVAL_MINUTES", "30"))
WEEKDAYS_ONLY = _get_bool("WEEKDAYS_ONLY", False)

# --- HTTP ---
CORS_ORIGINS = _get_list("CORS_ORIGINS", "http://localhost:3000,http://localhost:8000")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

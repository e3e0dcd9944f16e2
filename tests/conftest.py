"""Shared fixtures: a fixed clock, an in-memory ledger and an API client."""

from datetime import datetime, timezone

import pytest

# Monday 2026-10-19, before opening hours
FIXED_NOW = datetime(2026, 10, 19, 7, 45, tzinfo=timezone.utc)


def fixed_clock():
    return FIXED_NOW


@pytest.fixture
def catalog():
    from slot_generator import SlotCatalog, SlotPolicy

    return SlotCatalog(SlotPolicy(), clock=fixed_clock)


@pytest.fixture
def store():
    from booking_store import MemoryStore

    return MemoryStore()


@pytest.fixture
def ledger(catalog, store):
    from booking_ledger import BookingLedger

    return BookingLedger(catalog, store, clock=fixed_clock)


@pytest.fixture
def client(ledger):
    """Test client over the in-memory ledger."""
    from fastapi.testclient import TestClient

    from main import create_app

    return TestClient(create_app(ledger=ledger))


@pytest.fixture
def booking_payload(catalog):
    first_slot = catalog.slots()[0]
    return {
        "slotId": first_slot.id,
        "customerName": "Test User",
        "customerEmail": "test@example.com",
        "reason": "Test appointment",
    }

"""Tests for slot generation and the slot catalog."""

from datetime import date, datetime, timedelta, timezone

import pytest

from slot_generator import SlotCatalog, SlotPolicy, generate_slots, slot_id_for

from conftest import FIXED_NOW


class TestGenerateSlots:
    def test_default_policy_yields_112_slots(self):
        slots = generate_slots(FIXED_NOW)

        assert len(slots) == 7 * 16

    def test_deterministic(self):
        first = [(s.id, s.datetime) for s in generate_slots(FIXED_NOW)]
        second = [(s.id, s.datetime) for s in generate_slots(FIXED_NOW)]

        assert first == second

    def test_same_day_later_reading_gives_same_slots(self):
        later = FIXED_NOW + timedelta(hours=10)

        assert generate_slots(later) == generate_slots(FIXED_NOW)

    def test_first_and_last_slot(self):
        slots = generate_slots(FIXED_NOW)

        assert slots[0].id == "slot_2026-10-19_09-00"
        assert slots[0].datetime == datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)
        assert slots[-1].id == "slot_2026-10-25_16-30"

    def test_ordered_and_unique(self):
        slots = generate_slots(FIXED_NOW)
        times = [s.datetime for s in slots]

        assert times == sorted(times)
        assert len({s.id for s in slots}) == len(slots)

    def test_slots_are_utc_and_minute_aligned(self):
        for slot in generate_slots(FIXED_NOW):
            assert slot.datetime.tzinfo == timezone.utc
            assert slot.datetime.second == 0
            assert slot.datetime.microsecond == 0
            assert slot.datetime.minute in (0, 30)

    def test_end_hour_is_exclusive(self):
        hours = {s.datetime.hour for s in generate_slots(FIXED_NOW)}

        assert min(hours) == 9
        assert max(hours) == 16

    def test_naive_reference_treated_as_utc(self):
        naive = FIXED_NOW.replace(tzinfo=None)

        assert generate_slots(naive) == generate_slots(FIXED_NOW)

    def test_week_start_business_week(self):
        # Thursday reference still starts on that week's Monday
        thursday = datetime(2026, 10, 22, 12, 0, tzinfo=timezone.utc)
        policy = SlotPolicy(horizon_start="week", horizon_days=5)

        slots = generate_slots(thursday, policy)

        assert len(slots) == 5 * 16
        assert slots[0].id == "slot_2026-10-19_09-00"
        assert slots[-1].datetime.date() == date(2026, 10, 23)

    def test_weekdays_only_skips_weekend(self):
        slots = generate_slots(FIXED_NOW, SlotPolicy(weekdays_only=True))

        assert len(slots) == 5 * 16
        assert all(s.datetime.weekday() < 5 for s in slots)

    def test_custom_hours_and_interval(self):
        policy = SlotPolicy(horizon_days=1, day_start_hour=10, day_end_hour=12, interval_minutes=45)

        slots = generate_slots(FIXED_NOW, policy)

        assert [s.id for s in slots] == [
            "slot_2026-10-19_10-00",
            "slot_2026-10-19_10-45",
            "slot_2026-10-19_11-30",
        ]

    def test_slot_id_format(self):
        moment = datetime(2026, 1, 5, 14, 30, tzinfo=timezone.utc)

        assert slot_id_for(moment) == "slot_2026-01-05_14-30"


class TestSlotPolicy:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"horizon_days": 0},
            {"horizon_start": "tomorrow"},
            {"day_start_hour": 17, "day_end_hour": 9},
            {"day_end_hour": 25},
            {"interval_minutes": 0},
        ],
    )
    def test_invalid_policy_rejected(self, kwargs):
        with pytest.raises(ValueError):
            SlotPolicy(**kwargs)


class TestSlotCatalog:
    def test_generates_once(self):
        calls = []

        def clock():
            calls.append(1)
            return FIXED_NOW

        catalog = SlotCatalog(clock=clock)
        catalog.slots()
        catalog.slots()
        catalog.get("slot_2026-10-19_09-00")

        assert len(calls) == 1

    def test_horizon_does_not_roll_forward(self):
        readings = iter([FIXED_NOW, FIXED_NOW + timedelta(days=3)])
        catalog = SlotCatalog(clock=lambda: next(readings))

        first = catalog.slots()
        second = catalog.slots()

        assert first == second
        assert catalog.generated_for == date(2026, 10, 19)

    def test_get(self, catalog):
        slot = catalog.get("slot_2026-10-20_13-30")

        assert slot is not None
        assert slot.datetime == datetime(2026, 10, 20, 13, 30, tzinfo=timezone.utc)
        assert catalog.get("slot_2026-11-01_09-00") is None

    def test_len(self, catalog):
        assert len(catalog) == 112

    def test_empty_catalog_is_not_regenerated(self):
        calls = []

        def clock():
            calls.append(1)
            # Saturday; a one-day weekday-only horizon has no slots
            return datetime(2026, 10, 24, 8, 0, tzinfo=timezone.utc)

        catalog = SlotCatalog(SlotPolicy(horizon_days=1, weekdays_only=True), clock=clock)

        assert catalog.slots() == ()
        assert catalog.slots() == ()
        assert len(calls) == 1

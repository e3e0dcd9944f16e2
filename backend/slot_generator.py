# booking-backend/slot_generator.py

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Dict, List, Optional, Tuple

from schemas import Slot

logger = logging.getLogger(__name__)

HORIZON_STARTS = ("today", "week")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SlotPolicy:
    """Which slots are bookable: a day horizon and working hours, all in UTC.

    ``horizon_start="today"`` starts the horizon on the reference date;
    ``"week"`` starts it on the Monday of the reference date's week, so
    ``SlotPolicy(horizon_start="week", horizon_days=5)`` is a business week.
    """

    horizon_days: int = 7
    horizon_start: str = "today"
    day_start_hour: int = 9
    day_end_hour: int = 17  # exclusive
    interval_minutes: int = 30
    weekdays_only: bool = False

    def __post_init__(self):
        if self.horizon_days < 1:
            raise ValueError("horizon_days must be at least 1")
        if self.horizon_start not in HORIZON_STARTS:
            raise ValueError(f"horizon_start must be one of {HORIZON_STARTS}, got {self.horizon_start!r}")
        if not 0 <= self.day_start_hour < self.day_end_hour <= 24:
            raise ValueError("working hours must satisfy 0 <= day_start_hour < day_end_hour <= 24")
        if self.interval_minutes < 1:
            raise ValueError("interval_minutes must be positive")

    def first_day(self, reference: date) -> date:
        if self.horizon_start == "week":
            return reference - timedelta(days=reference.weekday())
        return reference


def slot_id_for(moment: datetime) -> str:
    """Deterministic, sortable id such as ``slot_2026-10-19_09-30``."""
    return f"slot_{moment.strftime('%Y-%m-%d_%H-%M')}"


def generate_slots(reference: datetime, policy: SlotPolicy = SlotPolicy()) -> List[Slot]:
    """
    Generate every bookable slot of the horizon, in chronological order.

    Pure function of the reference instant's UTC date and the policy, so two
    calls with the same arguments produce identical ids and timestamps.
    """
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    first_day = policy.first_day(reference.astimezone(timezone.utc).date())
    step = timedelta(minutes=policy.interval_minutes)

    slots: List[Slot] = []
    for offset in range(policy.horizon_days):
        day = first_day + timedelta(days=offset)
        # Exclude weekends (Monday=0, Sunday=6)
        if policy.weekdays_only and day.weekday() >= 5:
            continue
        current = datetime.combine(day, time(policy.day_start_hour, 0), tzinfo=timezone.utc)
        day_end = datetime.combine(day, time(0, 0), tzinfo=timezone.utc) + timedelta(hours=policy.day_end_hour)
        while current < day_end:
            slots.append(Slot(id=slot_id_for(current), datetime=current))
            current += step
    return slots


class SlotCatalog:
    """
    The process-wide slot catalog.

    Built once from the clock reading at first use and kept for the life of the
    object; the horizon does not roll forward while the process runs.
    """

    def __init__(self, policy: SlotPolicy = SlotPolicy(), clock: Callable[[], datetime] = utcnow):
        self.policy = policy
        self._clock = clock
        self._lock = threading.Lock()
        self._generated_for: Optional[date] = None
        self._slots: Tuple[Slot, ...] = ()
        self._by_id: Dict[str, Slot] = {}

    def _ensure_generated(self) -> None:
        if self._generated_for is not None:
            return
        with self._lock:
            if self._generated_for is not None:
                return
            now = self._clock().astimezone(timezone.utc)
            slots = tuple(generate_slots(now, self.policy))
            self._by_id = {slot.id: slot for slot in slots}
            self._slots = slots
            self._generated_for = now.date()
            if slots:
                logger.info(
                    "Generated %d slots from %s to %s",
                    len(slots), slots[0].datetime.isoformat(), slots[-1].datetime.isoformat(),
                )
            else:
                logger.warning("Slot policy %s produced no slots", self.policy)

    @property
    def generated_for(self) -> Optional[date]:
        self._ensure_generated()
        return self._generated_for

    def slots(self) -> Tuple[Slot, ...]:
        self._ensure_generated()
        return self._slots

    def get(self, slot_id: str) -> Optional[Slot]:
        self._ensure_generated()
        return self._by_id.get(slot_id)

    def __len__(self) -> int:
        return len(self.slots())

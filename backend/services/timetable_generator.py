from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Sequence


logger = logging.getLogger(__name__)


DAYS: tuple[int, ...] = (1, 2, 3, 4, 5, 6)
PERIODS_PER_DAY = 8
PERIOD_MINUTES = 45
DAY_START_MINUTES = 8 * 60


@dataclass(frozen=True)
class AllocationSpec:
    subject_id: Any
    teacher_id: Any
    periods_per_week: int
    preferred_room_id: Any = None


@dataclass(frozen=True)
class PlannedPeriod:
    day_of_week: int
    period_number: int
    start_time: str
    end_time: str
    subject_id: Any
    teacher_id: Any
    room_id: Any


class NotEnoughSlotsError(ValueError):
    pass


def _hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def period_times(period_number: int) -> tuple[str, str]:
    start = DAY_START_MINUTES + (period_number - 1) * PERIOD_MINUTES
    return _hhmm(start), _hhmm(start + PERIOD_MINUTES)


def all_slots() -> list[tuple[int, int]]:
    return [(day, period) for day in DAYS for period in range(1, PERIODS_PER_DAY + 1)]


def generate_periods(
    allocations: Sequence[AllocationSpec],
    *,
    rng: random.Random | None = None,
) -> list[PlannedPeriod]:
    """Randomized greedy fill of the weekly grid.

    Slots are shuffled once and handed out in order, one allocation after
    another. There is no backtracking and no check against other sections.
    """

    slots = all_slots()
    requested = sum(int(a.periods_per_week) for a in allocations)
    if requested > len(slots):
        logger.warning("Generator asked for %s periods but only %s slots exist", requested, len(slots))
        raise NotEnoughSlotsError("Not enough time slots available")

    (rng or random.Random()).shuffle(slots)

    planned: list[PlannedPeriod] = []
    cursor = 0
    for alloc in allocations:
        for _ in range(int(alloc.periods_per_week)):
            day, period = slots[cursor]
            cursor += 1
            start, end = period_times(period)
            planned.append(
                PlannedPeriod(
                    day_of_week=day,
                    period_number=period,
                    start_time=start,
                    end_time=end,
                    subject_id=alloc.subject_id,
                    teacher_id=alloc.teacher_id,
                    room_id=alloc.preferred_room_id,
                )
            )

    planned.sort(key=lambda p: (p.day_of_week, p.period_number))
    return planned

import random

import pytest

from services.timetable_generator import (
    AllocationSpec,
    NotEnoughSlotsError,
    all_slots,
    generate_periods,
    period_times,
)


def test_grid_is_six_days_of_eight_periods():
    slots = all_slots()
    assert len(slots) == 48
    assert slots[0] == (1, 1)
    assert slots[-1] == (6, 8)


def test_period_times():
    assert period_times(1) == ("08:00", "08:45")
    assert period_times(2) == ("08:45", "09:30")
    assert period_times(8) == ("13:15", "14:00")


def test_allocations_fill_distinct_slots():
    allocations = [
        AllocationSpec(subject_id="math", teacher_id="t1", periods_per_week=6),
        AllocationSpec(subject_id="eng", teacher_id="t2", periods_per_week=5, preferred_room_id="r1"),
    ]
    planned = generate_periods(allocations, rng=random.Random(7))

    assert len(planned) == 11
    assert len({(p.day_of_week, p.period_number) for p in planned}) == 11
    assert sum(1 for p in planned if p.subject_id == "math") == 6
    assert all(p.room_id == "r1" for p in planned if p.subject_id == "eng")
    assert planned == sorted(planned, key=lambda p: (p.day_of_week, p.period_number))


def test_same_seed_same_plan():
    allocations = [AllocationSpec(subject_id="math", teacher_id=None, periods_per_week=10)]
    first = generate_periods(allocations, rng=random.Random(42))
    second = generate_periods(allocations, rng=random.Random(42))
    assert first == second


def test_full_grid_is_allowed():
    planned = generate_periods([AllocationSpec(subject_id="s", teacher_id=None, periods_per_week=48)])
    assert len(planned) == 48


def test_too_many_periods():
    with pytest.raises(NotEnoughSlotsError, match="Not enough time slots available"):
        generate_periods(
            [
                AllocationSpec(subject_id="a", teacher_id=None, periods_per_week=40),
                AllocationSpec(subject_id="b", teacher_id=None, periods_per_week=9),
            ]
        )

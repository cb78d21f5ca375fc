import uuid

from conftest import period_payload
from core.tenancy import scope_context
from models.timetable_period import TimetablePeriod
from services.timetable_service import ROOM_CONFLICT, SECTION_CONFLICT, TEACHER_CONFLICT


def test_create_period(north, school):
    period = north.create("/timetable/periods", period_payload(school))
    assert period["branch_id"] == "north"
    assert period["is_break"] is False

    res = north.get(f"/timetable/section/{school['section_a']['id']}")
    assert res.status_code == 200
    days = res.json()["days"]
    assert [d["day_of_week"] for d in days] == [1]
    assert days[0]["periods"][0]["id"] == period["id"]


def test_section_conflict(north, school):
    north.create("/timetable/periods", period_payload(school))

    res = north.post(
        "/timetable/periods",
        json=period_payload(school, teacher_id=school["teacher2"]["id"], room_id=None),
    )
    assert res.status_code == 400
    body = res.json()
    assert body["code"] == "PERIOD_CONFLICT"
    assert body["errors"] == [SECTION_CONFLICT]
    assert body["detail"].startswith("Conflicts detected: ")


def test_teacher_and_room_conflicts_across_sections(north, school):
    north.create("/timetable/periods", period_payload(school))

    res = north.post("/timetable/periods", json=period_payload(school, section_id=school["section_b"]["id"]))
    assert res.status_code == 400
    assert res.json()["errors"] == [TEACHER_CONFLICT, ROOM_CONFLICT]


def test_other_slot_or_year_is_free(north, school):
    north.create("/timetable/periods", period_payload(school))
    north.create("/timetable/periods", period_payload(school, period_number=2, start_time="08:45", end_time="09:30"))

    other_year = north.create(
        "/academic-years", {"name": "2025-2026", "start_date": "2025-04-01", "end_date": "2026-03-31"}
    )
    north.create("/timetable/periods", period_payload(school, academic_year_id=other_year["id"]))


def test_conflict_endpoint_does_not_write(north, school):
    north.create("/timetable/periods", period_payload(school))

    res = north.get(
        "/timetable/conflicts",
        params={
            "day_of_week": 1,
            "period_number": 1,
            "academic_year_id": school["year"]["id"],
            "teacher_id": school["teacher"]["id"],
        },
    )
    assert res.status_code == 200
    assert res.json() == {"has_conflicts": True, "conflicts": [TEACHER_CONFLICT]}

    res = north.get("/timetable/periods")
    assert res.json()["total"] == 1


def test_inappropriate_subject(north, school):
    res = north.post("/timetable/periods", json=period_payload(school, subject_id=school["physics"]["id"]))
    assert res.status_code == 400
    body = res.json()
    assert body["code"] == "INAPPROPRIATE_SUBJECT"
    assert "Physics is not appropriate for Class 5" in body["detail"]


def test_break_skips_grade_check(north, school):
    period = north.create(
        "/timetable/periods",
        period_payload(school, subject_id=school["physics"]["id"], teacher_id=None, room_id=None, is_break=True, break_type="lunch"),
    )
    assert period["is_break"] is True


def test_update_excludes_itself(north, school):
    period = north.create("/timetable/periods", period_payload(school))

    res = north.patch(f"/timetable/periods/{period['id']}", json={"end_time": "08:50"})
    assert res.status_code == 200
    assert res.json()["data"]["end_time"] == "08:50"


def test_update_into_taken_slot(north, school):
    north.create("/timetable/periods", period_payload(school))
    second = north.create(
        "/timetable/periods",
        period_payload(school, period_number=2, start_time="08:45", end_time="09:30", teacher_id=None, room_id=None),
    )

    res = north.patch(f"/timetable/periods/{second['id']}", json={"period_number": 1})
    assert res.status_code == 400
    assert res.json()["errors"] == [SECTION_CONFLICT]


def test_end_before_start_is_rejected(north, school):
    res = north.post("/timetable/periods", json=period_payload(school, start_time="09:00", end_time="08:00"))
    assert res.status_code == 422
    assert res.json()["code"] == "validation_error"


def test_unknown_reference_is_404(north, school):
    res = north.post(
        "/timetable/periods",
        json=period_payload(school, room_id="00000000-0000-0000-0000-000000000000"),
    )
    assert res.status_code == 404
    assert res.json()["code"] == "ROOM_NOT_FOUND"


def test_teacher_timetable_and_workload(north, school):
    north.create("/timetable/periods", period_payload(school))
    north.create(
        "/timetable/periods",
        period_payload(school, day_of_week=3, section_id=school["section_b"]["id"], room_id=None),
    )

    res = north.get(f"/timetable/teacher/{school['teacher']['id']}")
    assert res.status_code == 200
    workload = res.json()["workload"]
    assert workload["total_periods"] == 2
    assert workload["periods_by_day"]["0"] == 1
    assert workload["periods_by_day"]["2"] == 1
    assert sum(workload["periods_by_day"].values()) == 2
    assert workload["subjects"] == ["Mathematics"]
    assert workload["classes"] == ["Class 5"]

    rows = north.get("/timetable/teacher-workload").json()
    assert rows[0]["teacher_id"] == school["teacher"]["id"]
    assert rows[0]["teacher_name"] == "Asha Verma"
    assert rows[0]["average_per_day"] == 0.4


def test_room_occupancy_and_availability(north, school):
    period = north.create("/timetable/periods", period_payload(school))

    rows = north.get("/timetable/room-occupancy").json()
    assert rows[0]["occupied_slots"] == 1
    assert rows[0]["total_slots"] == 48
    assert rows[0]["occupancy_rate"] == 2

    params = {"day_of_week": 1, "period_number": 1, "academic_year_id": school["year"]["id"]}
    res = north.get(f"/timetable/rooms/{school['room']['id']}/availability", params=params)
    assert res.json()["available"] is False
    assert res.json()["occupied_by_period_id"] == period["id"]

    res = north.get(f"/timetable/rooms/{school['room']['id']}/availability", params={**params, "period_number": 2})
    assert res.json()["available"] is True


def test_grade_audit(north, school, db):
    # Seed an inappropriate row directly, as legacy data would be.
    with scope_context(branch_id="north"):
        db.add(
            TimetablePeriod(
                section_id=uuid.UUID(school["section_a"]["id"]),
                academic_year_id=uuid.UUID(school["year"]["id"]),
                day_of_week=2,
                period_number=1,
                start_time="08:00",
                end_time="08:45",
                subject_id=uuid.UUID(school["physics"]["id"]),
            )
        )
        db.commit()

    report = north.get("/timetable/audit/grade-appropriateness").json()
    assert report["total_checked"] == 1
    assert report["inappropriate_count"] == 1
    assert report["items"][0]["subject_name"] == "Physics"
    assert report["items"][0]["grade_level"] == 7


def test_generate_preview_and_save(north, school):
    payload = {
        "section_id": school["section_a"]["id"],
        "academic_year_id": school["year"]["id"],
        "allocations": [
            {"subject_id": school["math"]["id"], "teacher_id": school["teacher"]["id"], "periods_per_week": 6},
        ],
    }
    preview = north.post("/timetable/generate", json=payload)
    assert preview.status_code == 200
    assert preview.json()["saved"] is False
    assert len(preview.json()["periods"]) == 6
    assert north.get("/timetable/periods").json()["total"] == 0

    saved = north.post("/timetable/generate", json={**payload, "save": True})
    assert saved.json()["saved"] is True
    assert north.get("/timetable/periods").json()["total"] == 6

    # Saving again replaces instead of adding.
    north.post("/timetable/generate", json={**payload, "save": True})
    assert north.get("/timetable/periods").json()["total"] == 6


def test_generate_not_enough_slots(north, school):
    payload = {
        "section_id": school["section_a"]["id"],
        "academic_year_id": school["year"]["id"],
        "allocations": [
            {"subject_id": school["math"]["id"], "periods_per_week": 30},
            {"subject_id": school["math"]["id"], "periods_per_week": 19},
        ],
    }
    res = north.post("/timetable/generate", json=payload)
    assert res.status_code == 400
    assert res.json()["code"] == "NOT_ENOUGH_TIME_SLOTS"
    assert res.json()["detail"] == "Not enough time slots available"


def test_substitution_workflow(north, school):
    period = north.create("/timetable/periods", period_payload(school))
    sub = north.create(
        "/timetable/substitutions",
        {"period_id": period["id"], "date": "2024-09-02", "substitute_teacher_id": school["teacher2"]["id"]},
    )
    assert sub["status"] == "pending"

    dup = north.post("/timetable/substitutions", json={"period_id": period["id"], "date": "2024-09-02"})
    assert dup.status_code == 400
    assert dup.json()["code"] == "SUBSTITUTION_EXISTS"

    res = north.post(f"/timetable/substitutions/{sub['id']}/approve", json={"approved_by": "principal"})
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "approved"
    assert res.json()["data"]["approved_at"] is not None

    again = north.post(f"/timetable/substitutions/{sub['id']}/approve", json={"approved_by": "principal"})
    assert again.status_code == 400
    assert again.json()["code"] == "SUBSTITUTION_NOT_PENDING"

    listed = north.get("/timetable/substitutions", params={"date": "2024-09-02"}).json()
    assert listed["total"] == 1


def test_busy_substitute_is_rejected(north, school):
    period = north.create("/timetable/periods", period_payload(school))
    north.create(
        "/timetable/periods",
        period_payload(school, section_id=school["section_b"]["id"], teacher_id=school["teacher2"]["id"], room_id=None),
    )

    res = north.post(
        "/timetable/substitutions",
        json={"period_id": period["id"], "date": "2024-09-02", "substitute_teacher_id": school["teacher2"]["id"]},
    )
    assert res.status_code == 400
    assert res.json()["code"] == "SUBSTITUTE_UNAVAILABLE"


def test_sunday_period_counts_in_workload(north, school):
    north.create("/timetable/periods", period_payload(school, day_of_week=7))

    workload = north.get(f"/timetable/teacher/{school['teacher']['id']}").json()["workload"]
    assert workload["total_periods"] == 1
    assert workload["periods_by_day"]["6"] == 1
    assert sum(workload["periods_by_day"].values()) == 1


def test_patch_cannot_end_before_start(north, school):
    period = north.create("/timetable/periods", period_payload(school))

    res = north.patch(f"/timetable/periods/{period['id']}", json={"end_time": "07:00"})
    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_TIME_RANGE"
    assert north.get(f"/timetable/periods/{period['id']}").json()["data"]["end_time"] == "08:45"


def test_bulk_move_into_busy_slot_is_rejected(north, school):
    north.create("/timetable/periods", period_payload(school))
    other = north.create(
        "/timetable/periods",
        period_payload(school, section_id=school["section_b"]["id"], teacher_id=school["teacher2"]["id"], room_id=None),
    )

    res = north.patch("/timetable/periods", json={"ids": [other["id"]], "data": {"teacher_id": school["teacher"]["id"]}})
    assert res.status_code == 400
    assert res.json()["code"] == "PERIOD_CONFLICT"
    assert res.json()["errors"] == [TEACHER_CONFLICT]

    stored = north.get(f"/timetable/periods/{other['id']}").json()["data"]
    assert stored["teacher_id"] == school["teacher2"]["id"]


def test_bulk_update_validates_fields(north, school):
    period = north.create("/timetable/periods", period_payload(school))

    res = north.patch("/timetable/periods", json={"ids": [period["id"]], "data": {"dayOfWeek": 9}})
    assert res.status_code == 422
    assert res.json()["code"] == "validation_error"


def test_bulk_move_checks_rows_against_each_other(north, school):
    first = north.create("/timetable/periods", period_payload(school, teacher_id=None, room_id=None))
    second = north.create(
        "/timetable/periods",
        period_payload(school, section_id=school["section_b"]["id"], teacher_id=None, room_id=None),
    )

    res = north.patch(
        "/timetable/periods",
        json={"ids": [first["id"], second["id"]], "data": {"teacherId": school["teacher2"]["id"]}},
    )
    assert res.status_code == 400
    assert res.json()["errors"] == [TEACHER_CONFLICT]
    assert all(p["teacher_id"] is None for p in north.get("/timetable/periods").json()["data"])

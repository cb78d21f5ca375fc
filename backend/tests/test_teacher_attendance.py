import datetime as dt

from core.tenancy import scope_context
from services.teacher_attendance_service import hours_worked, teacher_attendance_service


def _teacher(north) -> dict:
    staff = north.create("/staff", {"first_name": "Asha", "last_name": "Verma"})
    return north.create("/teachers", {"staff_id": staff["id"]})


def test_hours_worked():
    start = dt.datetime(2024, 9, 2, 8, 0, tzinfo=dt.timezone.utc)
    assert hours_worked(start, start + dt.timedelta(hours=7, minutes=30)) == 7.5
    assert hours_worked(start, None) is None
    # Naive values are read as UTC.
    assert hours_worked(start.replace(tzinfo=None), start + dt.timedelta(hours=1)) == 1.0


def test_check_in_and_out(north):
    teacher = _teacher(north)

    res = north.post("/attendance/teachers/check-in", json={"teacher_id": teacher["id"]})
    assert res.status_code == 201
    record = res.json()["data"]
    assert record["status"] == "present"
    assert record["check_in"] is not None

    again = north.post("/attendance/teachers/check-in", json={"teacher_id": teacher["id"]})
    assert again.status_code == 400
    assert again.json()["code"] == "ALREADY_CHECKED_IN"

    res = north.post("/attendance/teachers/check-out", json={"teacher_id": teacher["id"]})
    assert res.status_code == 200
    assert res.json()["data"]["total_hours"] is not None

    again = north.post("/attendance/teachers/check-out", json={"teacher_id": teacher["id"]})
    assert again.json()["code"] == "ALREADY_CHECKED_OUT"


def test_check_out_without_check_in(north):
    teacher = _teacher(north)

    res = north.post("/attendance/teachers/check-out", json={"teacher_id": teacher["id"]})
    assert res.status_code == 404
    assert res.json()["code"] == "CHECK_IN_NOT_FOUND"


def test_check_in_times_come_from_the_clock(north, db):
    teacher = _teacher(north)
    morning = dt.datetime(2024, 9, 2, 8, 0, tzinfo=dt.timezone.utc)

    with scope_context(branch_id="north"):
        teacher_attendance_service.check_in(db, teacher["id"], now=morning)
        record = teacher_attendance_service.check_out(db, teacher["id"], now=morning + dt.timedelta(hours=8, minutes=15))
    assert record.total_hours == 8.25
    assert record.date == dt.date(2024, 9, 2)


def test_mark_absent_overwrites(north):
    teacher = _teacher(north)
    north.create("/attendance/teachers", {"teacher_id": teacher["id"], "date": "2024-09-02", "status": "late"})

    res = north.post(
        "/attendance/teachers/mark-absent",
        json={"teacher_id": teacher["id"], "date": "2024-09-02", "notes": "Medical leave"},
    )
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "absent"
    assert north.get("/attendance/teachers").json()["total"] == 1

    missing = north.post(
        "/attendance/teachers/mark-absent",
        json={"teacher_id": "00000000-0000-0000-0000-000000000000", "date": "2024-09-02"},
    )
    assert missing.status_code == 404


def test_one_record_per_teacher_per_day(north):
    teacher = _teacher(north)
    north.create("/attendance/teachers", {"teacher_id": teacher["id"], "date": "2024-09-02"})

    dup = north.post("/attendance/teachers", json={"teacher_id": teacher["id"], "date": "2024-09-02"})
    assert dup.status_code == 409
    assert dup.json()["code"] == "TEACHER_ATTENDANCE_CONFLICT"


def test_check_out_before_check_in_is_rejected(north):
    teacher = _teacher(north)

    res = north.post(
        "/attendance/teachers",
        json={
            "teacher_id": teacher["id"],
            "date": "2024-09-02",
            "check_in": "2024-09-02T16:00:00Z",
            "check_out": "2024-09-02T08:00:00Z",
        },
    )
    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_TIME_RANGE"


def test_report(north):
    teacher = _teacher(north)
    north.create(
        "/attendance/teachers",
        {
            "teacher_id": teacher["id"],
            "date": "2024-09-02",
            "check_in": "2024-09-02T08:00:00Z",
            "check_out": "2024-09-02T16:00:00Z",
        },
    )
    north.create(
        "/attendance/teachers",
        {
            "teacher_id": teacher["id"],
            "date": "2024-09-03",
            "status": "late",
            "check_in": "2024-09-03T09:30:00Z",
            "check_out": "2024-09-03T16:30:00Z",
        },
    )
    north.create("/attendance/teachers", {"teacher_id": teacher["id"], "date": "2024-09-04", "status": "absent"})
    north.create("/attendance/teachers", {"teacher_id": teacher["id"], "date": "2024-10-01"})

    res = north.get(
        "/attendance/teachers/report",
        params={"teacher_id": teacher["id"], "start_date": "2024-09-01", "end_date": "2024-09-30"},
    )
    assert res.status_code == 200
    body = res.json()
    assert [r["date"] for r in body["attendance"]] == ["2024-09-02", "2024-09-03", "2024-09-04"]
    assert body["stats"] == {
        "total_days": 3,
        "present": 1,
        "absent": 1,
        "late": 1,
        "half_day": 0,
        "total_hours": 15.0,
        "average_hours": 15.0,
    }

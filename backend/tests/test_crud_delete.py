def test_delete_twice(north):
    grade = north.create("/classes", {"name": "Class 1", "grade_level": 3})

    first = north.delete(f"/classes/{grade['id']}")
    assert first.status_code == 200
    assert first.json()["data"]["id"] == grade["id"]

    second = north.delete(f"/classes/{grade['id']}")
    assert second.status_code == 404
    assert second.json()["code"] == "CLASS_NOT_FOUND"


def test_malformed_id_is_404(north):
    assert north.get("/classes/not-a-uuid").status_code == 404


def test_delete_student_cascades(north):
    student = north.create("/students", {"admission_no": "A-1", "first_name": "Meera", "last_name": "Nair"})
    north.create("/guardians", {"student_id": student["id"], "name": "Lata Nair", "relation": "mother"})
    north.create("/attendance/records", {"student_id": student["id"], "date": "2024-09-02"})
    invoice = north.create("/fees/invoices", {"student_id": student["id"], "period": "2024-09", "amount": 100})
    north.create("/fees/payments", {"invoice_id": invoice["id"], "amount": 50})

    assert north.delete(f"/students/{student['id']}").status_code == 200
    for path in ("/guardians", "/attendance/records", "/fees/invoices", "/fees/payments"):
        assert north.get(path).json()["total"] == 0, path


def test_delete_referenced_class_is_409(north):
    grade = north.create("/classes", {"name": "Class 1"})
    north.create("/sections", {"class_id": grade["id"], "name": "A"})

    res = north.delete(f"/classes/{grade['id']}")
    assert res.status_code == 409
    assert res.json()["code"] == "CLASS_IN_USE"


def test_academic_year_with_exams_cannot_be_deleted(north):
    year = north.create("/academic-years", {"name": "2024-2025", "start_date": "2024-04-01", "end_date": "2025-03-31"})
    north.create("/exams", {"name": "Midterm", "academic_year_id": year["id"]})

    res = north.delete(f"/academic-years/{year['id']}")
    assert res.status_code == 400
    assert res.json()["code"] == "ACADEMIC_YEAR_HAS_EXAMS"


def test_put_and_patch(north):
    staff = north.create("/staff", {"first_name": "Asha", "last_name": "Verma", "department": "Math"})

    res = north.patch(f"/staff/{staff['id']}", json={"designation": "HOD"})
    assert res.json()["data"]["designation"] == "HOD"
    assert res.json()["data"]["department"] == "Math"

    res = north.put(f"/staff/{staff['id']}", json={"first_name": "Asha", "last_name": "Iyer"})
    assert res.status_code == 200
    assert res.json()["data"]["last_name"] == "Iyer"
    assert res.json()["data"]["department"] is None


def test_bulk_update_and_delete(north):
    a = north.create("/timetable/subjects", {"code": "ENG", "name": "English"})
    b = north.create("/timetable/subjects", {"code": "HIN", "name": "Hindi"})

    res = north.patch("/timetable/subjects", json={"ids": [a["id"], b["id"]], "data": {"isElective": "true"}})
    assert sorted(res.json()["data"]) == sorted([a["id"], b["id"]])
    assert all(s["is_elective"] for s in north.get("/timetable/subjects").json()["data"])

    bad = north.patch("/timetable/subjects", json={"ids": [a["id"]], "data": {"credits": "lots"}})
    assert bad.status_code == 400
    assert bad.json()["code"] == "INVALID_VALUE"

    res = north.delete("/timetable/subjects", params={"ids": f"{a['id']},{b['id']}"})
    assert len(res.json()["data"]) == 2
    assert north.get("/timetable/subjects").json()["total"] == 0


def test_second_attendance_mark_same_day_is_409(north):
    student = north.create("/students", {"admission_no": "A-2", "first_name": "Ravi", "last_name": "Das"})
    north.create("/attendance/records", {"student_id": student["id"], "date": "2024-09-02", "status": "present"})

    res = north.post("/attendance/records", json={"student_id": student["id"], "date": "2024-09-02", "status": "late"})
    assert res.status_code == 409
    assert res.json()["code"] == "ATTENDANCE_RECORD_CONFLICT"

import json


def _exam_and_student(north, max_marks=100):
    exam = north.create("/exams", {"name": "Midterm", "max_marks": max_marks})
    student = north.create("/students", {"admission_no": "M-1", "first_name": "Meera", "last_name": "Nair"})
    return exam, student


def test_mark_within_bounds(north):
    exam, student = _exam_and_student(north)
    subject = north.create("/timetable/subjects", {"code": "MATH", "name": "Mathematics"})

    mark = north.create(
        "/exams/marks",
        {"exam_id": exam["id"], "student_id": student["id"], "subject_id": subject["id"], "raw_marks": 95, "grade": "A+"},
    )
    assert mark["raw_marks"] == 95
    assert mark["branch_id"] == "north"

    res = north.get("/exams/marks", params={"filter": json.dumps({"examId": exam["id"]})})
    assert res.json()["total"] == 1

    dup = north.post(
        "/exams/marks",
        json={"exam_id": exam["id"], "student_id": student["id"], "subject_id": subject["id"], "raw_marks": 80},
    )
    assert dup.status_code == 409
    assert dup.json()["code"] == "MARK_CONFLICT"


def test_mark_above_max_is_rejected(north):
    exam, student = _exam_and_student(north, max_marks=50)

    res = north.post("/exams/marks", json={"exam_id": exam["id"], "student_id": student["id"], "raw_marks": 51})
    assert res.status_code == 400
    assert res.json()["code"] == "MARKS_OUT_OF_RANGE"

    mark = north.create("/exams/marks", {"exam_id": exam["id"], "student_id": student["id"], "raw_marks": 50})
    res = north.patch(f"/exams/marks/{mark['id']}", json={"raw_marks": 75})
    assert res.status_code == 400
    assert res.json()["code"] == "MARKS_OUT_OF_RANGE"

    bulk = north.patch("/exams/marks", json={"ids": [mark["id"]], "data": {"rawMarks": 75}})
    assert bulk.status_code == 400
    assert north.get(f"/exams/marks/{mark['id']}").json()["data"]["raw_marks"] == 50


def test_negative_mark_is_422(north):
    exam, student = _exam_and_student(north)

    res = north.post("/exams/marks", json={"exam_id": exam["id"], "student_id": student["id"], "raw_marks": -1})
    assert res.status_code == 422


def test_exam_without_max_has_no_upper_bound(north):
    exam, student = _exam_and_student(north, max_marks=None)

    mark = north.create("/exams/marks", {"exam_id": exam["id"], "student_id": student["id"], "raw_marks": 640})
    assert mark["raw_marks"] == 640


def test_marks_follow_their_student_and_exam(north):
    exam, student = _exam_and_student(north)
    north.create("/exams/marks", {"exam_id": exam["id"], "student_id": student["id"], "raw_marks": 70})

    assert north.delete(f"/students/{student['id']}").status_code == 200
    assert north.get("/exams/marks").json()["total"] == 0


def test_other_branch_exam_looks_missing(north, south):
    exam, _ = _exam_and_student(north)
    student = south.create("/students", {"admission_no": "S-1", "first_name": "Kabir", "last_name": "Rao"})

    res = south.post("/exams/marks", json={"exam_id": exam["id"], "student_id": student["id"], "raw_marks": 10})
    assert res.status_code == 404
    assert res.json()["code"] == "EXAM_NOT_FOUND"

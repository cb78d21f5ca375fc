import datetime as dt


def _application(**extra) -> dict:
    return {"applicant_first_name": "Ira", "applicant_last_name": "Das", "grade_applied": "Class 1", **extra}


def test_numbers_are_sequential_per_year(north):
    year = dt.date.today().year
    first = north.create("/admissions/applications", _application())
    second = north.create("/admissions/applications", _application(applicant_first_name="Kabir"))
    assert first["application_no"] == f"APP{year}0001"
    assert second["application_no"] == f"APP{year}0002"


def test_numbers_are_per_branch(north, south):
    year = dt.date.today().year
    north.create("/admissions/applications", _application())
    assert south.create("/admissions/applications", _application())["application_no"] == f"APP{year}0001"


def test_explicit_number_and_duplicate(north):
    north.create("/admissions/applications", _application(application_no="LEGACY-1"))
    dup = north.post("/admissions/applications", json=_application(application_no="LEGACY-1"))
    assert dup.status_code == 409
    assert dup.json()["code"] == "APPLICATION_CONFLICT"


def test_review_stamps_reviewed_at(north):
    app = north.create("/admissions/applications", _application())
    assert app["reviewed_at"] is None

    res = north.patch(f"/admissions/applications/{app['id']}", json={"status": "UNDER_REVIEW"})
    assert res.json()["data"]["reviewed_at"] is None

    res = north.patch(f"/admissions/applications/{app['id']}", json={"status": "APPROVED"})
    assert res.json()["data"]["status"] == "APPROVED"
    assert res.json()["data"]["reviewed_at"] is not None


def test_search_by_name(north):
    north.create("/admissions/applications", _application())
    north.create("/admissions/applications", _application(applicant_first_name="Kabir", applicant_last_name="Rao"))
    res = north.get("/admissions/applications", params={"q": "kabir"})
    assert res.json()["total"] == 1

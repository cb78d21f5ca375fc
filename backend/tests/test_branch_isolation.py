import json

import pytest

from core.errors import BranchScopeViolation
from core.tenancy import scope_context
from models.school_class import SchoolClass


def _student(admission_no: str, first: str, last: str, **extra) -> dict:
    return {"admission_no": admission_no, "first_name": first, "last_name": last, **extra}


def test_rows_are_stamped_with_request_branch(north):
    student = north.create("/students", _student("A-1", "Meera", "Nair"))
    assert student["branch_id"] == "north"


def test_request_body_cannot_pick_branch(north):
    res = north.post("/students", json=_student("A-1", "Meera", "Nair", branch_id="south"))
    assert res.status_code == 201
    assert res.json()["data"]["branch_id"] == "north"


def test_other_branch_sees_404(north, south):
    student = north.create("/students", _student("A-1", "Meera", "Nair"))

    assert south.get(f"/students/{student['id']}").status_code == 404
    assert south.patch(f"/students/{student['id']}", json={"first_name": "X"}).status_code == 404
    assert south.put(f"/students/{student['id']}", json=_student("A-1", "X", "Y")).status_code == 404
    assert south.delete(f"/students/{student['id']}").status_code == 404
    assert south.get("/students").json() == {"data": [], "total": 0}
    own = north.get(f"/students/{student['id']}")
    assert own.status_code == 200
    assert own.json()["data"]["first_name"] == "Meera"


def test_same_admission_no_in_two_branches(north, south):
    north.create("/students", _student("A-1", "Meera", "Nair"))
    south.create("/students", _student("A-1", "Kabir", "Rao"))

    dup = north.post("/students", json=_student("A-1", "Ira", "Das"))
    assert dup.status_code == 409
    assert dup.json()["code"] == "STUDENT_CONFLICT"


def test_cross_branch_reference_looks_missing(north, south):
    grade = north.create("/classes", {"name": "Class 1", "grade_level": 3})

    res = south.post("/sections", json={"class_id": grade["id"], "name": "A"})
    assert res.status_code == 404
    assert res.json()["code"] == "SCHOOL_CLASS_NOT_FOUND"


def test_list_filters_sort_and_search(north):
    north.create("/students", _student("A-1", "Meera", "Nair"))
    north.create("/students", _student("A-2", "Kabir", "Rao", status="inactive"))
    north.create("/students", _student("A-3", "Anika", "Rao"))

    res = north.get("/students", params={"sort": "-first_name", "filter": json.dumps({"lastName": "Rao"})})
    assert res.json()["total"] == 2
    assert [s["first_name"] for s in res.json()["data"]] == ["Kabir", "Anika"]

    res = north.get("/students", params={"filter": json.dumps({"status_in": ["active"]}), "sort": "admission_no"})
    assert [s["admission_no"] for s in res.json()["data"]] == ["A-1", "A-3"]

    res = north.get("/students", params={"q": "mee"})
    assert [s["first_name"] for s in res.json()["data"]] == ["Meera"]

    res = north.get("/students", params={"filter": "{broken", "perPage": 2, "page": 2, "sort": "admission_no"})
    assert res.json()["total"] == 3
    assert [s["admission_no"] for s in res.json()["data"]] == ["A-3"]

    # Unknown sort fields fall back to the default order instead of failing.
    assert north.get("/students", params={"sort": "nope"}).status_code == 200


def test_get_many_by_ids(north, south):
    a = north.create("/students", _student("A-1", "Meera", "Nair"))
    b = north.create("/students", _student("A-2", "Kabir", "Rao"))
    foreign = south.create("/students", _student("S-1", "Ira", "Das"))

    res = north.get("/students", params={"ids": ",".join([a["id"], b["id"], foreign["id"], "not-a-uuid"])})
    assert {s["id"] for s in res.json()["data"]} == {a["id"], b["id"]}


def test_uncoercible_filter_matches_nothing(north):
    north.create("/students", _student("A-1", "Meera", "Nair"))
    res = north.get("/students", params={"filter": json.dumps({"section_id": "nope"})})
    assert res.json() == {"data": [], "total": 0}


def test_flush_rejects_foreign_branch(db):
    with scope_context(branch_id="north"):
        db.add(SchoolClass(name="Class 1", branch_id="south"))
        with pytest.raises(BranchScopeViolation):
            db.flush()
        db.rollback()


def test_flush_rejects_branch_change(db):
    with scope_context(branch_id="north"):
        grade = SchoolClass(name="Class 1")
        db.add(grade)
        db.commit()
        assert grade.branch_id == "north"

        grade.branch_id = "south"
        with pytest.raises(BranchScopeViolation):
            db.flush()
        db.rollback()


def test_default_branch_applies_without_header(client, monkeypatch):
    from conftest import API
    from core.config import settings

    monkeypatch.setattr(settings, "default_branch_id", "main")
    res = client.post(API + "/classes", json={"name": "Class 2"})
    assert res.status_code == 201
    assert res.json()["data"]["branch_id"] == "main"


def test_require_branch(client, monkeypatch):
    from conftest import API
    from core.config import settings

    monkeypatch.setattr(settings, "require_branch", True)
    res = client.get(API + "/classes")
    assert res.status_code == 400
    assert res.json()["code"] == "BRANCH_REQUIRED"
    # Branches themselves are not branch-scoped.
    assert client.get(API + "/branches").status_code == 200

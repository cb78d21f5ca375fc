from __future__ import annotations

import os

# Settings are read at import time; point them at an in-memory database first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["AUTO_CREATE_SCHEMA"] = "false"
os.environ.pop("DEFAULT_BRANCH_ID", None)
os.environ.pop("REQUIRE_BRANCH", None)

import pytest
from fastapi.testclient import TestClient

import models  # noqa: F401
from core.database import ENGINE, SessionLocal
from main import app
from models.base import Base


API = "/api/v1"


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=ENGINE)
    yield
    Base.metadata.drop_all(bind=ENGINE)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


class BranchClient:
    """TestClient wrapper that sends one branch header on every call."""

    def __init__(self, client: TestClient, branch_id: str | None):
        self.client = client
        self.branch_id = branch_id

    def _headers(self, extra: dict | None = None) -> dict:
        headers = {"X-Branch-Id": self.branch_id} if self.branch_id else {}
        headers.update(extra or {})
        return headers

    def get(self, path: str, **kwargs):
        return self.client.get(API + path, headers=self._headers(kwargs.pop("headers", None)), **kwargs)

    def post(self, path: str, **kwargs):
        return self.client.post(API + path, headers=self._headers(kwargs.pop("headers", None)), **kwargs)

    def put(self, path: str, **kwargs):
        return self.client.put(API + path, headers=self._headers(kwargs.pop("headers", None)), **kwargs)

    def patch(self, path: str, **kwargs):
        return self.client.patch(API + path, headers=self._headers(kwargs.pop("headers", None)), **kwargs)

    def delete(self, path: str, **kwargs):
        return self.client.delete(API + path, headers=self._headers(kwargs.pop("headers", None)), **kwargs)

    def create(self, path: str, payload: dict) -> dict:
        res = self.post(path, json=payload)
        assert res.status_code == 201, res.text
        return res.json()["data"]


@pytest.fixture
def north(client) -> BranchClient:
    client.post(API + "/branches", json={"id": "north", "code": "N", "name": "North Campus"})
    return BranchClient(client, "north")


@pytest.fixture
def south(client) -> BranchClient:
    client.post(API + "/branches", json={"id": "south", "code": "S", "name": "South Campus"})
    return BranchClient(client, "south")


@pytest.fixture
def school(north: BranchClient) -> dict:
    """A small timetable-ready school in branch `north`."""

    year = north.create("/academic-years", {"name": "2024-2025", "start_date": "2024-04-01", "end_date": "2025-03-31"})
    grade7 = north.create("/classes", {"name": "Class 5", "grade_level": 7})
    section_a = north.create("/sections", {"class_id": grade7["id"], "name": "A", "capacity": 40})
    section_b = north.create("/sections", {"class_id": grade7["id"], "name": "B", "capacity": 40})
    math = north.create("/timetable/subjects", {"code": "MATH", "name": "Mathematics"})
    physics = north.create("/timetable/subjects", {"code": "PHY", "name": "Physics"})
    staff = north.create("/staff", {"first_name": "Asha", "last_name": "Verma", "email": "asha@example.org"})
    teacher = north.create("/teachers", {"staff_id": staff["id"], "subjects": "Mathematics"})
    staff2 = north.create("/staff", {"first_name": "Rohit", "last_name": "Mehta"})
    teacher2 = north.create("/teachers", {"staff_id": staff2["id"]})
    room = north.create("/timetable/rooms", {"code": "R101", "name": "Room 101", "capacity": 40})
    return {
        "year": year,
        "class": grade7,
        "section_a": section_a,
        "section_b": section_b,
        "math": math,
        "physics": physics,
        "teacher": teacher,
        "teacher2": teacher2,
        "room": room,
    }


def period_payload(school: dict, **overrides) -> dict:
    payload = {
        "section_id": school["section_a"]["id"],
        "day_of_week": 1,
        "period_number": 1,
        "start_time": "08:00",
        "end_time": "08:45",
        "subject_id": school["math"]["id"],
        "teacher_id": school["teacher"]["id"],
        "room_id": school["room"]["id"],
        "academic_year_id": school["year"]["id"],
    }
    payload.update(overrides)
    return payload

from __future__ import annotations

from models.attendance_record import AttendanceRecord
from models.enrollment import Enrollment
from models.guardian import Guardian
from models.section import Section
from models.staff import Staff
from models.student import Student
from models.teacher import Teacher
from services.crud import CrudService


class StudentService(CrudService):
    model = Student
    resource = "STUDENT"
    search_fields = ("first_name", "last_name", "admission_no")
    default_sort = "last_name,first_name"
    references = {"section_id": Section}


class GuardianService(CrudService):
    model = Guardian
    resource = "GUARDIAN"
    search_fields = ("name", "email", "phone")
    default_sort = "name"
    references = {"student_id": Student}


class EnrollmentService(CrudService):
    model = Enrollment
    resource = "ENROLLMENT"
    default_sort = "-start_date"
    references = {"student_id": Student, "section_id": Section}


class StaffService(CrudService):
    model = Staff
    resource = "STAFF"
    search_fields = ("first_name", "last_name", "email", "designation")
    default_sort = "last_name,first_name"


class TeacherService(CrudService):
    model = Teacher
    resource = "TEACHER"
    search_fields = ("subjects", "qualifications")
    references = {"staff_id": Staff}


class AttendanceService(CrudService):
    model = AttendanceRecord
    resource = "ATTENDANCE_RECORD"
    search_fields = ("reason", "marked_by")
    default_sort = "-date"
    references = {"student_id": Student, "section_id": Section}


student_service = StudentService()
guardian_service = GuardianService()
enrollment_service = EnrollmentService()
staff_service = StaffService()
teacher_service = TeacherService()
attendance_service = AttendanceService()

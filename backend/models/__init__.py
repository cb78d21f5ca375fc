from models.base import Base
from models.branch import Branch
from models.academic_year import AcademicYear
from models.school_class import SchoolClass
from models.section import Section
from models.student import Student
from models.guardian import Guardian
from models.enrollment import Enrollment
from models.staff import Staff
from models.teacher import Teacher
from models.subject import Subject
from models.room import Room
from models.time_slot import TimeSlot
from models.timetable_period import TimetablePeriod
from models.substitution import Substitution
from models.fee_structure import FeeComponent, FeeStructure
from models.fee_schedule import FeeSchedule
from models.invoice import Invoice
from models.payment import Payment
from models.template import Template
from models.campaign import Campaign
from models.message import Message
from models.ticket import Ticket, TicketMessage
from models.attendance_record import AttendanceRecord
from models.exam import Exam
from models.application import Application
from models.mark import Mark
from models.teacher_attendance import TeacherAttendance

__all__ = [
	"Base",
	"Branch",
	"AcademicYear",
	"SchoolClass",
	"Section",
	"Student",
	"Guardian",
	"Enrollment",
	"Staff",
	"Teacher",
	"Subject",
	"Room",
	"TimeSlot",
	"TimetablePeriod",
	"Substitution",
	"FeeStructure",
	"FeeComponent",
	"FeeSchedule",
	"Invoice",
	"Payment",
	"Template",
	"Campaign",
	"Message",
	"Ticket",
	"TicketMessage",
	"AttendanceRecord",
	"Exam",
	"Application",
	"Mark",
	"TeacherAttendance",
]

from academic_reporting.auth.models import User
from academic_reporting.core.models.audit_log import AuditLog
from academic_reporting.core.models.class_course import ClassCourse
from academic_reporting.core.models.class_model import SchoolClass
from academic_reporting.core.models.course import Course
from academic_reporting.core.models.enrollment import Enrollment
from academic_reporting.core.models.faculty import Faculty
from academic_reporting.core.models.lecturer_class import LecturerClass
from academic_reporting.core.models.lecturer_course import LecturerCourse
from academic_reporting.core.models.lecturer_prl import LecturerPRL
from academic_reporting.core.models.principal_lecturer_faculty import PrincipalLecturerFaculty
from academic_reporting.core.models.rating import LecturerPRLRating, Rating
from academic_reporting.core.models.report import Report
from academic_reporting.core.models.student_attendance import StudentAttendance
from academic_reporting.core.models.student_class import StudentClass
from academic_reporting.core.models.summary_report import SummaryReport
from academic_reporting.core.models.venue import Venue

__all__ = [
    "AuditLog",
    "ClassCourse",
    "Course",
    "Enrollment",
    "Faculty",
    "LecturerClass",
    "LecturerCourse",
    "LecturerPRL",
    "LecturerPRLRating",
    "PrincipalLecturerFaculty",
    "Rating",
    "Report",
    "SchoolClass",
    "StudentAttendance",
    "StudentClass",
    "SummaryReport",
    "User",
    "Venue",
]

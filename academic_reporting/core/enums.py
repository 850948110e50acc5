from enum import Enum


class UserRole(str, Enum):
    PROGRAM_LEADER = "PL"
    PRINCIPAL_LECTURER = "PRL"
    LECTURER = "Lecturer"
    STUDENT = "Student"


class SummaryReportType(str, Enum):
    STUDENT_REGISTRATION = "student_registration"
    COURSE_COMPLETION = "course_completion"
    LECTURER_WORKLOAD = "lecturer_workload"

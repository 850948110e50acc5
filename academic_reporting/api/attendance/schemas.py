from datetime import date as date_type
from typing import Any, List, Optional

from pydantic import BaseModel


class AttendanceItem(BaseModel):
    student_id: Optional[int] = None
    # JSON boolean only, validated in the service
    attended: Any = None


class AttendanceSubmission(BaseModel):
    report_id: Optional[int] = None
    attendance: Optional[List[AttendanceItem]] = None


class ClassStudent(BaseModel):
    id: int
    full_name: str
    email: str


class AttendanceRecord(BaseModel):
    student_id: int
    student_name: str
    attended: bool


class StudentAttendanceDetail(BaseModel):
    report_id: int
    date: date_type
    course_name: str
    attended: Optional[bool] = None


class CourseProgress(BaseModel):
    course_id: int
    course_name: str
    course_code: Optional[str] = None
    total_classes: int
    attended_classes: int
    attendance_percentage: str

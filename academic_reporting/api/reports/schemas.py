from datetime import date as date_type
from datetime import datetime, time
from typing import Optional

from pydantic import BaseModel, Field


class LecturerReportCreate(BaseModel):
    """Report submitted by the lecturer who delivered the lecture."""

    class_id: Optional[int] = None
    course_id: Optional[int] = None
    venue_id: Optional[int] = None
    week_of_reporting: Optional[int] = None
    date_of_lecture: Optional[date_type] = None
    scheduled_lecture_time: Optional[time] = None
    actual_students_present: Optional[int] = None
    total_registered_students: Optional[int] = None
    topic_taught: Optional[str] = None
    learning_outcomes: Optional[str] = None
    recommendations: Optional[str] = None


class PRLReportCreate(LecturerReportCreate):
    """Report recorded by a PRL on behalf of a lecturer."""

    lecturer_id: Optional[int] = None
    prl_feedback: Optional[str] = None


class ReportResponse(BaseModel):
    id: int
    lecturer_id: int
    lecturer_name: str
    class_id: int
    class_name: str
    course_id: int
    course_name: str
    faculty_name: Optional[str] = None
    venue_id: int
    venue_name: str
    week_of_reporting: int
    date_of_lecture: date_type
    scheduled_lecture_time: time
    actual_students_present: int
    total_registered_students: int
    topic_taught: str
    learning_outcomes: str
    recommendations: Optional[str] = None
    prl_feedback: Optional[str] = None
    created_at: datetime


class ReportCreated(BaseModel):
    message: str
    report_id: int


class ClassReportItem(BaseModel):
    id: int
    date: date_type = Field(..., description="Date of the lecture")
    course_name: str
    class_name: str
    topic_taught: str
    actual_students_present: int
    total_registered_students: int


class StudentReportItem(BaseModel):
    id: int
    date: date_type
    course_name: str
    lecturer_name: str

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class StudentRatingRequest(BaseModel):
    course_name: Optional[str] = None
    lecturer_name: Optional[str] = None
    rating: Optional[int] = None
    comments: Optional[str] = None


class PRLRatingRequest(BaseModel):
    lecturer_id: Optional[int] = None
    rating: Optional[int] = None
    comments: Optional[str] = None


class LecturerRatingItem(BaseModel):
    id: int
    rating_value: int
    rating_date: datetime
    comments: Optional[str] = None
    course_name: str
    class_name: str
    student_name: Optional[str] = None


class FacultyRatingItem(LecturerRatingItem):
    lecturer_name: str


class StreamRatingItem(BaseModel):
    lecturer_id: int
    lecturer_name: str
    rating: int
    comments: Optional[str] = None
    created_at: datetime

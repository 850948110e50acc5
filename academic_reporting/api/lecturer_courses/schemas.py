from typing import Optional

from pydantic import BaseModel


class LecturerCourseRequest(BaseModel):
    lecturer_id: Optional[int] = None
    course_id: Optional[int] = None


class LecturerCourseResponse(BaseModel):
    lecturer_id: int
    course_id: int
    lecturer_name: str
    course_name: str
    faculty_name: Optional[str] = None

from typing import List, Optional

from pydantic import BaseModel, Field

from academic_reporting.api.faculties.schemas import FacultyResponse


class FacultySelectRequest(BaseModel):
    faculty_id: Optional[int] = None


class FacultySelected(BaseModel):
    message: str
    faculty: FacultyResponse


class StreamLecturer(BaseModel):
    id: int
    full_name: str
    email: str
    course_name: str
    faculty_name: str


class FacultyClass(BaseModel):
    id: int
    class_name: str
    course_ids: List[int] = Field(default_factory=list)
    course_names: List[str] = Field(default_factory=list)


class FacultyCourse(BaseModel):
    id: int
    name: str
    total_registered_students: int

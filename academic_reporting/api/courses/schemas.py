from typing import Optional

from pydantic import BaseModel, Field


class CourseRequest(BaseModel):
    name: Optional[str] = None
    faculty_id: Optional[int] = None
    code: Optional[str] = None


class CourseResponse(BaseModel):
    id: int
    name: str
    faculty_id: int
    code: Optional[str] = None
    total_registered_students: int = 0
    faculty_name: Optional[str] = Field(None, serialization_alias="facultyName")

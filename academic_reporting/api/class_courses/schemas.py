from typing import Optional

from pydantic import BaseModel


class ClassCourseRequest(BaseModel):
    class_id: Optional[int] = None
    course_id: Optional[int] = None


class ClassCourseResponse(BaseModel):
    class_id: int
    course_id: int
    message: str

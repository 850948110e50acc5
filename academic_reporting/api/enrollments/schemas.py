from typing import Optional

from pydantic import BaseModel


class ClassEnrollRequest(BaseModel):
    faculty_name: Optional[str] = None
    class_name: Optional[str] = None


class CourseEnrollRequest(BaseModel):
    course_name: Optional[str] = None


class EnrolledClass(BaseModel):
    class_id: int
    class_name: str
    faculty_name: Optional[str] = None


class ClassEnrolled(EnrolledClass):
    message: str


class CourseEnrolled(BaseModel):
    message: str
    course_id: int
    course_name: str
    total_registered_students: int


class ClassOption(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class CourseOption(BaseModel):
    id: int
    name: str
    code: Optional[str] = None
    total_registered_students: int = 0

    class Config:
        from_attributes = True

from typing import List, Optional

from pydantic import BaseModel, Field


class LecturerClassRequest(BaseModel):
    lecturer_id: Optional[int] = None
    class_id: Optional[int] = None


class LecturerClassResponse(BaseModel):
    lecturer_id: int
    class_id: int
    lecturer_name: str
    class_name: str
    course_ids: List[int] = Field(default_factory=list)
    course_names: List[str] = Field(default_factory=list)

from typing import List, Optional

from pydantic import BaseModel, Field


class ClassCreate(BaseModel):
    name: Optional[str] = None


class ClassResponse(BaseModel):
    id: int
    name: str
    course_ids: List[int] = Field(default_factory=list)
    course_names: List[str] = Field(default_factory=list)

from typing import Optional

from pydantic import BaseModel


class FacultyRequest(BaseModel):
    name: Optional[str] = None


class FacultyResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True

from typing import Optional

from pydantic import BaseModel, Field


class VenueCreate(BaseModel):
    name: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=0)


class VenueResponse(BaseModel):
    id: int
    name: str
    capacity: Optional[int] = None

    class Config:
        from_attributes = True

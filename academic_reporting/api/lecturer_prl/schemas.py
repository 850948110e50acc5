from typing import Optional

from pydantic import BaseModel


class PRLSelectRequest(BaseModel):
    prl_id: Optional[int] = None


class PRLSummary(BaseModel):
    id: int
    full_name: str
    email: str

    class Config:
        from_attributes = True


class PRLSelected(BaseModel):
    message: str
    prl: PRLSummary

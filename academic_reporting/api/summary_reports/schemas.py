from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SummaryReportCreate(BaseModel):
    type: Optional[str] = None


class SummaryReportResponse(BaseModel):
    id: int
    type: str
    file_path: str
    generated_at: datetime

    class Config:
        from_attributes = True

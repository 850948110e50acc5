from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from academic_reporting.db.session import Base


class SummaryReport(Base):
    """Generated PL summary workbook. ``file_path`` is the public URL path under /reports."""

    __tablename__ = "pl_reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(50), nullable=False)
    file_path = Column(String(255), nullable=False)
    generated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

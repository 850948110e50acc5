from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer

from academic_reporting.db.session import Base


class Enrollment(Base):
    """Student enrolled in a course. Required before the student may rate or view course reports."""

    __tablename__ = "enrollments"

    student_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), primary_key=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="RESTRICT"), primary_key=True)
    enrolled_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

from sqlalchemy import Column, ForeignKey, Integer, String

from academic_reporting.db.session import Base


class Course(Base):
    """Course offered by a faculty. ``total_registered_students`` is bumped on every enrollment."""

    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    code = Column(String(10), nullable=True)
    faculty_id = Column(Integer, ForeignKey("faculties.id", ondelete="RESTRICT"), nullable=False, index=True)
    total_registered_students = Column(Integer, nullable=False, default=0)

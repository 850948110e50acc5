"""
Lecture report: one delivered lecture of a course to a class.
Invariants (checked by the services before insert): class is linked to the course,
lecturer is linked to the class, 1 <= week <= 52, actual <= total.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Text, Time

from academic_reporting.db.session import Base


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lecturer_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="RESTRICT"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="RESTRICT"), nullable=False, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id", ondelete="RESTRICT"), nullable=False)
    week_of_reporting = Column(Integer, nullable=False)
    date_of_lecture = Column(Date, nullable=False)
    scheduled_lecture_time = Column(Time, nullable=False)
    actual_students_present = Column(Integer, nullable=False)
    total_registered_students = Column(Integer, nullable=False)
    topic_taught = Column(Text, nullable=False)
    learning_outcomes = Column(Text, nullable=False)
    recommendations = Column(Text, nullable=True)
    prl_feedback = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

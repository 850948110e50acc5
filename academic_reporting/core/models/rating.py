from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, UniqueConstraint

from academic_reporting.db.session import Base


class Rating(Base):
    """Student rating of a lecturer for a course. Once per (student, lecturer, course)."""

    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("student_id", "lecturer_id", "course_id", name="uq_ratings_student_lecturer_course"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    lecturer_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="RESTRICT"), nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="RESTRICT"), nullable=False)
    rating = Column(Integer, nullable=False)
    comments = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)


class LecturerPRLRating(Base):
    """PRL rating of a lecturer in their stream. Re-rating overwrites."""

    __tablename__ = "lecturer_prl_ratings"
    __table_args__ = (
        UniqueConstraint("lecturer_id", "prl_id", name="uq_lecturer_prl_ratings_lecturer_prl"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    lecturer_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    prl_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comments = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

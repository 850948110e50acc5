"""Lecturer–course assignment, made by a PL."""

from sqlalchemy import Column, ForeignKey, Integer

from academic_reporting.db.session import Base


class LecturerCourse(Base):
    __tablename__ = "lecturer_courses"

    lecturer_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), primary_key=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="RESTRICT"), primary_key=True)

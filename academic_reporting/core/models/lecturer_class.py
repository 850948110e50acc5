"""Lecturer–class assignment, made by a PRL for a class inside the PRL's faculty."""

from sqlalchemy import Column, ForeignKey, Integer

from academic_reporting.db.session import Base


class LecturerClass(Base):
    __tablename__ = "lecturer_classes"

    lecturer_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), primary_key=True)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="RESTRICT"), primary_key=True)

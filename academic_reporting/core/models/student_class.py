from sqlalchemy import Column, ForeignKey, Integer

from academic_reporting.db.session import Base


class StudentClass(Base):
    """Class membership of a student. A student belongs to one class, joined through one faculty."""

    __tablename__ = "student_classes"

    student_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), primary_key=True)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="RESTRICT"), nullable=False, index=True)
    faculty_id = Column(Integer, ForeignKey("faculties.id", ondelete="RESTRICT"), nullable=True)

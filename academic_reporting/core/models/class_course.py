"""Class–course mapping. Which courses are taught in which class."""

from sqlalchemy import Column, ForeignKey, Integer

from academic_reporting.db.session import Base


class ClassCourse(Base):
    __tablename__ = "class_courses"

    class_id = Column(Integer, ForeignKey("classes.id", ondelete="RESTRICT"), primary_key=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="RESTRICT"), primary_key=True)

from sqlalchemy import Column, Integer, String

from academic_reporting.db.session import Base


class SchoolClass(Base):
    """A class (cohort of students), e.g. "BSCIT Y1". Linked to courses via class_courses."""

    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)

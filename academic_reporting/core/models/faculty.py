"""Faculty (stream). Courses belong to exactly one faculty."""

from sqlalchemy import Column, Integer, String

from academic_reporting.db.session import Base


class Faculty(Base):
    __tablename__ = "faculties"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)

from sqlalchemy import Column, ForeignKey, Integer

from academic_reporting.db.session import Base


class PrincipalLecturerFaculty(Base):
    """The faculty a PRL manages. One row per PRL (prl_id is the primary key)."""

    __tablename__ = "principal_lecturer_faculties"

    prl_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), primary_key=True)
    faculty_id = Column(Integer, ForeignKey("faculties.id", ondelete="RESTRICT"), nullable=False, index=True)

from sqlalchemy import Column, ForeignKey, Integer

from academic_reporting.db.session import Base


class LecturerPRL(Base):
    """The PRL a lecturer reports to. At most one per lecturer."""

    __tablename__ = "lecturer_prl"

    lecturer_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), primary_key=True)
    prl_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from academic_reporting.db.session import Base


class User(Base):
    """Any account on the platform. ``role`` is one of PL, PRL, Lecturer, Student."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    # Administrative overwrite only; there is no role history
    role = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

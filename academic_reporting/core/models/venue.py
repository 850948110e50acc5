from sqlalchemy import Column, Integer, String

from academic_reporting.db.session import Base


class Venue(Base):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=True)

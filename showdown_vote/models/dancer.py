"""
Dancer model - name resolution table for couples
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from showdown_vote.db.base import Base


class Dancer(Base):
    """Dancer model"""
    __tablename__ = "dancers"
    __sticky_fields__ = ("name",)

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Dancer(id={self.id}, name={self.name})>"

"""
Couple model - a lead/follow pair competing as one side of a showdown
"""

from sqlalchemy import Column, String, DateTime, Index
from sqlalchemy.sql import func
from showdown_vote.db.base import Base


class Couple(Base):
    """Couple model - display names are denormalized from upstream"""
    __tablename__ = "couples"
    # A later partial snapshot must never erase a known value
    __sticky_fields__ = ("contest_id", "lead_id", "follow_id", "lead_name", "follow_name")

    id = Column(String(64), primary_key=True)
    contest_id = Column(String(64), nullable=True)
    lead_id = Column(String(64), nullable=True)
    follow_id = Column(String(64), nullable=True)
    lead_name = Column(String(255), nullable=True)
    follow_name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('idx_couples_contest_id', 'contest_id'),
    )

    def __repr__(self):
        return f"<Couple(id={self.id}, lead_name={self.lead_name}, follow_name={self.follow_name})>"

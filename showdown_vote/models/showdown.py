"""
Showdown model - a single RED vs BLUE matchup inside a contest
"""

from sqlalchemy import Column, String, Integer, DateTime, Index
from sqlalchemy.sql import func
from showdown_vote.db.base import Base


class Showdown(Base):
    """Showdown model - one row per upstream showdown id"""
    __tablename__ = "showdowns"
    __sticky_fields__ = ("contest_id",)

    id = Column(String(64), primary_key=True)
    contest_id = Column(String(64), nullable=True)
    name = Column(String(255), nullable=True)
    status = Column(String(64), nullable=True)
    round = Column(String(128), nullable=True)
    match_number = Column(Integer, nullable=True)
    vote_open_time = Column(DateTime(timezone=True), nullable=True)
    vote_close_time = Column(DateTime(timezone=True), nullable=True)
    red_couple_id = Column(String(64), nullable=True)
    blue_couple_id = Column(String(64), nullable=True)
    red_audience_votes = Column(Integer, nullable=True)
    blue_audience_votes = Column(Integer, nullable=True)
    winner = Column(String(8), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('idx_showdowns_contest_id', 'contest_id'),
    )

    def __repr__(self):
        return f"<Showdown(id={self.id}, contest_id={self.contest_id}, status={self.status})>"

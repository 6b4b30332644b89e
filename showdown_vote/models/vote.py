"""
Vote model - at most one row per (showdown, user)
"""

from sqlalchemy import Column, String, DateTime, Integer, Uuid, UniqueConstraint
from sqlalchemy.sql import func
from showdown_vote.db.base import Base


class Vote(Base):
    """Vote model - the unique constraint is the duplicate-vote guard"""
    __tablename__ = "votes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    showdown_id = Column(String(64), nullable=False)
    user_id = Column(Uuid, nullable=False)
    choice = Column(String(8), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Constraints
    __table_args__ = (
        UniqueConstraint('showdown_id', 'user_id', name='uq_vote_showdown_user'),
    )

    def __repr__(self):
        return f"<Vote(showdown_id={self.showdown_id}, user_id={self.user_id}, choice={self.choice})>"

"""
Singleton row tracking the process-wide active contest
"""

from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.sql import func
from showdown_vote.db.base import Base

APP_STATE_ID = 1


class AppState(Base):
    """App state model - always exactly one row with id=1"""
    __tablename__ = "app_state"

    id = Column(Integer, primary_key=True, default=APP_STATE_ID)
    active_contest_id = Column(String(64), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<AppState(active_contest_id={self.active_contest_id})>"

"""
Contest model mirroring the upstream contest record
"""

from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.sql import func
from showdown_vote.db.base import Base


class Contest(Base):
    """Contest model - one row per upstream contest id"""
    __tablename__ = "contests"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=True)
    status = Column(String(64), nullable=True)
    current_round = Column(String(128), nullable=True)
    active_showdown_id = Column(String(64), nullable=True)
    judging_model = Column(String(64), nullable=True)
    judge_panel_size = Column(Integer, nullable=True)
    event_id = Column(String(64), nullable=True)
    results_visibility = Column(String(32), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Contest(id={self.id}, name={self.name}, status={self.status})>"

    @property
    def results_public(self) -> bool:
        return self.results_visibility == "PUBLIC"

    def to_dict(self):
        """Convert contest to dictionary for API responses"""
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "currentRound": self.current_round,
            "activeShowdownId": self.active_showdown_id,
            "judgingModel": self.judging_model,
            "judgePanelSize": self.judge_panel_size,
            "eventId": self.event_id,
            "resultsVisibility": self.results_visibility,
        }

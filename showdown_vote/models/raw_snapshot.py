"""
Raw snapshot model - append-only archive of relay payloads
"""

from sqlalchemy import Column, String, Integer, DateTime, JSON, Index
from showdown_vote.db.base import Base


class RawSnapshot(Base):
    """Raw snapshot model - rows are written once and never updated"""
    __tablename__ = "raw_snapshots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    contest_id = Column(String(64), nullable=True)
    received_at = Column(DateTime(timezone=True), nullable=False)
    payload = Column(JSON, nullable=False)

    __table_args__ = (
        Index('idx_raw_snapshots_contest_received', 'contest_id', 'received_at'),
    )

    def __repr__(self):
        return f"<RawSnapshot(id={self.id}, contest_id={self.contest_id}, received_at={self.received_at})>"

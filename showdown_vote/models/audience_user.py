"""
Audience user model - self-registered voters
"""

from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.sql import func
from showdown_vote.db.base import Base
import uuid


class AudienceUser(Base):
    """Audience user model - email is the registration identity"""
    __tablename__ = "audience_users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    email = Column(String(254), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<AudienceUser(id={self.id}, email={self.email})>"

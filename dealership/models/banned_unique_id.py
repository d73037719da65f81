# dealership/models/banned_unique_id.py
"""Unique IDs blocked from placing new orders (moderation)."""

from sqlalchemy import Column, Integer, String, DateTime
from dealership.database import Base


class BannedUniqueId(Base):
    __tablename__ = "banned_unique_ids"

    id = Column(Integer, primary_key=True, autoincrement=True)
    unique_id = Column(String(36), unique=True, nullable=False, index=True)
    reason = Column(String(255))
    banned_by = Column(String(100))
    banned_at = Column(DateTime, index=True)

    def __repr__(self):
        return f"<BannedUniqueId {self.unique_id} by={self.banned_by}>"

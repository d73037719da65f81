# dealership/models/activity_log.py
"""
Activity log: append-only history of admin mutations shown in the admin console.
`details` holds the caller-built diff: {"Field label": {"old": ..., "new": ...}}.
Rows are never updated or deleted.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON
from dealership.database import Base


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    admin_id = Column(Integer)
    admin_username = Column(String(255), index=True)
    admin_unique_id = Column(String(255))
    admin_ip = Column(String(45))
    action = Column(String(50), nullable=False)          # Création | Modification | Suppression
    resource_type = Column(String(50), nullable=False)   # vehicles | orders | users | ...
    resource_name = Column(String(500))
    description = Column(Text)
    details = Column(JSON)
    created_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<ActivityLog {self.id} {self.action} {self.resource_type}:{self.resource_name}>"

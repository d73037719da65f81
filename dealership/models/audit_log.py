# dealership/models/audit_log.py
"""Audit log: request-level ledger (create/update/delete per resource), append-only."""

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON
from dealership.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    admin_id = Column(Integer)
    admin_username = Column(String(255), index=True)
    action = Column(String(50), nullable=False)          # create | update | delete
    resource_type = Column(String(50), nullable=False)
    resource_id = Column(Integer)
    description = Column(Text)
    changes = Column(JSON)
    ip_address = Column(String(45))
    user_agent = Column(Text)
    created_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog {self.id} {self.action} {self.resource_type}#{self.resource_id}>"

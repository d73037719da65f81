# dealership/models/admin_user.py
"""
Admin console accounts.
`permissions` is the nested category → action → bool map described in dealership/permissions.py.
`access_key` is stored and compared as-is (see DESIGN.md).
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from dealership.database import Base


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    access_key = Column(String(255), nullable=False)
    unique_id = Column(String(36), unique=True)
    permissions = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<AdminUser {self.id} {self.username}>"

# dealership/models/announcement.py
"""Site-wide banner. Singleton: every update deletes all rows and inserts one."""

from sqlalchemy import Column, Integer, DateTime, Text, Boolean
from dealership.database import Base


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text)
    is_active = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<Announcement {self.id} active={self.is_active}>"

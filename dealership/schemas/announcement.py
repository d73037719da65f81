# dealership/schemas/announcement.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class AnnouncementIn(BaseModel):
    content: Optional[str] = None
    is_active: bool = False


class AnnouncementOut(BaseModel):
    id: int
    content: Optional[str]
    is_active: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True

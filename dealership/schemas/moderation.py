# dealership/schemas/moderation.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class BanRequest(BaseModel):
    unique_id: Optional[str] = Field(None, alias="uniqueId")
    reason: Optional[str] = None

    class Config:
        populate_by_name = True


class BannedIdOut(BaseModel):
    id: int
    unique_id: str
    reason: Optional[str]
    banned_by: Optional[str]
    banned_at: Optional[datetime]

    class Config:
        from_attributes = True

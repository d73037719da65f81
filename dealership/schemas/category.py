# dealership/schemas/category.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class CategoryIn(BaseModel):
    name: Optional[str] = None
    is_active: Optional[bool] = None


class CategoryOut(BaseModel):
    id: int
    name: str
    is_active: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class ParticularityIn(BaseModel):
    name: Optional[str] = None


class ParticularityOut(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime]

    class Config:
        from_attributes = True

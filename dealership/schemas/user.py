# dealership/schemas/user.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class LoginRequest(BaseModel):
    username: Optional[str] = None
    access_key: Optional[str] = Field(None, alias="accessKey")

    class Config:
        populate_by_name = True


class SessionUser(BaseModel):
    id: int
    username: str
    unique_id: Optional[str] = None
    permissions: dict


class LoginResponse(BaseModel):
    token: str
    user: SessionUser


class UserCreate(BaseModel):
    username: Optional[str] = None
    access_key: Optional[str] = None
    unique_id: Optional[str] = None
    permissions: Optional[dict] = None


class UserUpdate(BaseModel):
    username: Optional[str] = None
    access_key: Optional[str] = None
    unique_id: Optional[str] = None
    permissions: Optional[dict] = None


class UserOut(BaseModel):
    id: int
    username: str
    unique_id: Optional[str]
    permissions: dict
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True

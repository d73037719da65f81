# dealership/schemas/activity_log.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class ActivityLogOut(BaseModel):
    id: int
    admin_id: Optional[int]
    admin_username: Optional[str]
    admin_unique_id: Optional[str]
    admin_ip: Optional[str]
    action: str
    resource_type: str
    resource_name: Optional[str]
    description: Optional[str]
    details: Optional[dict]
    created_at: datetime

    class Config:
        from_attributes = True


class ActivityPagination(BaseModel):
    page: int
    pageSize: int
    total: int
    totalPages: int
    hasMore: bool


class ActivityLogPage(BaseModel):
    logs: list[ActivityLogOut]
    pagination: ActivityPagination


class AuditLogOut(BaseModel):
    id: int
    admin_id: Optional[int]
    admin_username: Optional[str]
    action: str
    resource_type: str
    resource_id: Optional[int]
    description: Optional[str]
    changes: Optional[dict]
    ip_address: Optional[str]
    user_agent: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class AuditPagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class AuditLogPage(BaseModel):
    logs: list[AuditLogOut]
    pagination: AuditPagination

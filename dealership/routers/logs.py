# dealership/routers/logs.py
"""Activity and audit history for the admin console."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from dealership.database import get_db
from dealership.middleware.auth import AdminPrincipal
from dealership.middleware.permissions import require_permission
from dealership.schemas.activity_log import ActivityLogOut, ActivityLogPage, AuditLogPage
from dealership.services.activity_log import get_activity_page, get_recent_activity
from dealership.services.audit_service import search_audit_logs

router = APIRouter()

MAX_PAGE_SIZE = 100


@router.get("/activity-logs", response_model=list[ActivityLogOut], summary="Latest activity")
def recent_activity(db: Session = Depends(get_db),
                    admin: AdminPrincipal = Depends(require_permission("moderation", "view_logs"))):
    return get_recent_activity(db)


@router.get("/activity-logs/paginated", response_model=ActivityLogPage, summary="Activity, page by page")
def paginated_activity(page: int = 1, page_size: int = Query(25, alias="pageSize"),
                       db: Session = Depends(get_db),
                       admin: AdminPrincipal = Depends(require_permission("moderation", "view_logs"))):
    if page < 1:
        raise HTTPException(status_code=400, detail="Le numéro de page doit être supérieur à 0")
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise HTTPException(status_code=400, detail="Le nombre d'éléments par page doit être entre 1 et 100")
    return get_activity_page(db, page, page_size)


@router.get("/audit-logs", response_model=AuditLogPage, summary="Search the audit trail")
def audit_logs(page: int = 1, limit: int = 50, search: Optional[str] = None,
               search_type: Optional[str] = Query(None, alias="searchType"),
               db: Session = Depends(get_db),
               admin: AdminPrincipal = Depends(require_permission("moderation", "view_logs"))):
    page = max(1, page)
    limit = min(MAX_PAGE_SIZE, max(1, limit))
    return search_audit_logs(db, page, limit, search, search_type)

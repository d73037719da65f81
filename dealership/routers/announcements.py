# dealership/routers/announcements.py
"""Site banner shown on the storefront."""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from dealership.config import settings
from dealership.database import get_db
from dealership.middleware.auth import AdminPrincipal
from dealership.middleware.permissions import require_permission
from dealership.middleware.rate_limit import limiter
from dealership.schemas.announcement import AnnouncementIn, AnnouncementOut
from dealership.services import announcement_service

router = APIRouter()


@router.get("/announcements", response_model=Optional[AnnouncementOut], summary="Active announcement")
def get_announcement(db: Session = Depends(get_db)):
    return announcement_service.get_active_announcement(db)


@router.put("/announcements", response_model=Optional[AnnouncementOut], summary="Replace the announcement")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def update_announcement(request: Request, body: AnnouncementIn, db: Session = Depends(get_db),
                        admin: AdminPrincipal = Depends(require_permission("announcements", "update"))):
    return announcement_service.update_announcement(db, body, admin)

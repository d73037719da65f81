# dealership/routers/moderation.py
"""Unique ID ban list."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from dealership.config import settings
from dealership.database import get_db
from dealership.middleware.auth import AdminPrincipal
from dealership.middleware.permissions import require_permission
from dealership.middleware.rate_limit import limiter
from dealership.schemas.moderation import BanRequest, BannedIdOut
from dealership.services import moderation_service

router = APIRouter()


@router.get("/moderation/banned-ids", response_model=list[BannedIdOut], summary="List banned unique IDs")
def list_banned_ids(db: Session = Depends(get_db),
                    admin: AdminPrincipal = Depends(require_permission("moderation", "view"))):
    return moderation_service.list_banned_ids(db)


@router.post("/moderation/ban-id", response_model=BannedIdOut, status_code=201, summary="Ban a unique ID")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def ban_unique_id(request: Request, body: BanRequest, db: Session = Depends(get_db),
                  admin: AdminPrincipal = Depends(require_permission("moderation", "ban_uniqueids"))):
    return moderation_service.ban_unique_id(db, body, admin)


@router.delete("/moderation/ban-id", summary="Lift a ban")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def unban_unique_id(request: Request, body: BanRequest, db: Session = Depends(get_db),
                    admin: AdminPrincipal = Depends(require_permission("moderation", "ban_uniqueids"))):
    return moderation_service.unban_unique_id(db, body, admin)

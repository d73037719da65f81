# dealership/routers/categories.py
"""Category and particularity management. Mutations reuse the vehicles permissions."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from dealership.config import settings
from dealership.database import get_db
from dealership.middleware.auth import AdminPrincipal
from dealership.middleware.permissions import require_permission
from dealership.middleware.rate_limit import limiter
from dealership.schemas.category import CategoryIn, CategoryOut, ParticularityIn, ParticularityOut
from dealership.services import category_service

router = APIRouter()


# ── Categories ───────────────────────────────────────────────────────────────

@router.post("/categories", response_model=CategoryOut, status_code=201, summary="Create a category")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def create_category(request: Request, body: CategoryIn, db: Session = Depends(get_db),
                    admin: AdminPrincipal = Depends(require_permission("vehicles", "create"))):
    return category_service.create_category(db, body, admin)


@router.put("/categories/{category_id}", response_model=CategoryOut, summary="Rename / toggle a category")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def update_category(request: Request, category_id: int, body: CategoryIn, db: Session = Depends(get_db),
                    admin: AdminPrincipal = Depends(require_permission("vehicles", "update"))):
    return category_service.update_category(db, category_id, body, admin)


@router.delete("/categories/{category_id}", summary="Delete a category")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def delete_category(request: Request, category_id: int, db: Session = Depends(get_db),
                    admin: AdminPrincipal = Depends(require_permission("vehicles", "delete"))):
    return category_service.delete_category(db, category_id, admin)


# ── Particularities ──────────────────────────────────────────────────────────

@router.get("/particularities", response_model=list[ParticularityOut], summary="List particularities")
def list_particularities(db: Session = Depends(get_db)):
    return category_service.list_particularities(db)


@router.post("/particularities", response_model=ParticularityOut, status_code=201,
             summary="Create a particularity")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def create_particularity(request: Request, body: ParticularityIn, db: Session = Depends(get_db),
                         admin: AdminPrincipal = Depends(require_permission("vehicles", "create"))):
    return category_service.create_particularity(db, body, admin)


@router.put("/particularities/{particularity_id}", response_model=ParticularityOut,
            summary="Rename a particularity")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def update_particularity(request: Request, particularity_id: int, body: ParticularityIn,
                         db: Session = Depends(get_db),
                         admin: AdminPrincipal = Depends(require_permission("vehicles", "update"))):
    return category_service.update_particularity(db, particularity_id, body, admin)


@router.delete("/particularities/{particularity_id}", summary="Delete a particularity")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def delete_particularity(request: Request, particularity_id: int, db: Session = Depends(get_db),
                         admin: AdminPrincipal = Depends(require_permission("vehicles", "delete"))):
    return category_service.delete_particularity(db, particularity_id, admin)

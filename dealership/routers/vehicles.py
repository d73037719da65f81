# dealership/routers/vehicles.py
"""Public catalog + vehicle CRUD (admin)."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from dealership.config import settings
from dealership.database import get_db
from dealership.middleware.auth import AdminPrincipal, get_optional_admin
from dealership.middleware.permissions import require_permission
from dealership.middleware.rate_limit import limiter
from dealership.schemas.category import CategoryOut
from dealership.schemas.vehicle import VehicleDeleted, VehicleIn, VehicleOut, VehiclePage
from dealership.services import category_service, vehicle_service

router = APIRouter()

CATALOG_CACHE_CONTROL = "public, max-age=300"


@router.get("/vehicles", response_model=VehiclePage, summary="Browse the catalog")
@limiter.limit(settings.PUBLIC_RATE_LIMIT)
def list_vehicles(
    request: Request,
    response: Response,
    search: Optional[str] = None,
    category: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    page: int = 1,
    limit: int = vehicle_service.DEFAULT_PAGE_SIZE,
    db: Session = Depends(get_db),
):
    response.headers["Cache-Control"] = CATALOG_CACHE_CONTROL
    return vehicle_service.list_vehicles(db, search, category, sort_by, sort_order, page, limit)


# Fixed paths must be declared before /vehicles/{vehicle_id}
@router.get("/vehicles/categories", summary="Category list (names for visitors, rows for admins)")
def list_categories(db: Session = Depends(get_db),
                    admin: Optional[AdminPrincipal] = Depends(get_optional_admin)):
    if admin is None:
        return category_service.list_active_category_names(db)
    return [CategoryOut.model_validate(c) for c in category_service.list_categories(db)]


@router.get("/vehicles/max-pages", summary="Highest catalog page per category")
def max_pages(db: Session = Depends(get_db)):
    return vehicle_service.get_category_max_pages(db)


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Vehicle details")
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    return vehicle_service.get_vehicle(db, vehicle_id)


@router.post("/vehicles", response_model=VehicleOut, status_code=201, summary="Add a vehicle")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def create_vehicle(request: Request, body: VehicleIn, db: Session = Depends(get_db),
                   admin: AdminPrincipal = Depends(require_permission("vehicles", "create"))):
    return vehicle_service.create_vehicle(db, body, admin)


@router.put("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Edit a vehicle")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def update_vehicle(request: Request, vehicle_id: int, body: VehicleIn, db: Session = Depends(get_db),
                   admin: AdminPrincipal = Depends(require_permission("vehicles", "update"))):
    return vehicle_service.update_vehicle(db, vehicle_id, body, admin)


@router.delete("/vehicles/{vehicle_id}", response_model=VehicleDeleted, summary="Remove a vehicle")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def delete_vehicle(request: Request, vehicle_id: int, db: Session = Depends(get_db),
                   admin: AdminPrincipal = Depends(require_permission("vehicles", "delete"))):
    return vehicle_service.delete_vehicle(db, vehicle_id, admin)

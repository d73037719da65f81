# dealership/services/vehicle_service.py
"""
Vehicle catalog: public search/listing and admin CRUD.
Every admin mutation is followed by an activity entry carrying a field diff.
"""

from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from dealership.models.category import Category
from dealership.models.vehicle import Vehicle
from dealership.schemas.vehicle import VehicleIn
from dealership.services.activity_log import (
    CREATE, UPDATE, DELETE, log_activity, diff_fields, creation_details, deletion_details,
)
from dealership.utils.validators import blank_to_none
from dealership.utils.logger import get_logger

logger = get_logger(__name__)

SORTABLE_FIELDS = {"name", "price", "category", "trunk_weight", "seats", "particularity"}
_TEXT_FIELDS = {"name", "category", "particularity"}
MAX_PAGE_SIZE = 1000
DEFAULT_PAGE_SIZE = 20

NOT_FOUND_MESSAGE = "❌ Véhicule introuvable"
MISSING_FIELDS_MESSAGE = (
    "⚠️ Tous les champs du véhicule sont obligatoires "
    "(nom, catégorie, prix, capacité coffre, image, places)"
)

# Diff labels, in display order
FIELD_LABELS = {
    "name": "Nom du véhicule",
    "category": "Catégorie",
    "price": "Prix",
    "trunk_weight": "Capacité coffre",
    "seats": "Places",
    "image_url": "Image",
    "particularity": "Particularité",
    "page_catalog": "Page du catalogue",
    "manufacturer": "Marque (GTA)",
    "realname": "Nom réel (IRL)",
}

FIELD_FORMATTERS = {
    "price": lambda v: f"{v}$",
    "trunk_weight": lambda v: f"{v}kg",
    "particularity": lambda v: v or "Aucune",
    "page_catalog": lambda v: f"Page {v}" if v is not None else "Aucune",
    "manufacturer": lambda v: v or "Aucune",
    "realname": lambda v: v or "Aucune",
}


def vehicle_fields(vehicle: Vehicle) -> dict:
    return {key: getattr(vehicle, key) for key in FIELD_LABELS}


def _clean_payload(body: VehicleIn) -> dict:
    """Validate required fields and normalise optional ones."""
    if (not body.name or not body.category or not body.price
            or body.trunk_weight is None or not body.image_url or body.seats is None):
        raise HTTPException(status_code=400, detail=MISSING_FIELDS_MESSAGE)
    return {
        "name": body.name.strip(),
        "category": body.category.strip(),
        "price": body.price,
        "trunk_weight": body.trunk_weight,
        "image_url": body.image_url.strip(),
        "seats": body.seats,
        "particularity": blank_to_none(body.particularity),
        "page_catalog": body.page_catalog or None,
        "manufacturer": blank_to_none(body.manufacturer),
        "realname": blank_to_none(body.realname),
    }


def list_vehicles(db: Session, search: Optional[str] = None, category: Optional[str] = None,
                  sort_by: Optional[str] = None, sort_order: Optional[str] = None,
                  page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> dict:
    """Public catalog listing. Vehicles in inactive categories are hidden."""
    page = max(1, page)
    limit = min(MAX_PAGE_SIZE, limit if limit and limit > 0 else DEFAULT_PAGE_SIZE)

    q = db.query(Vehicle).join(Category, Vehicle.category == Category.name).filter(Category.is_active.is_(True))

    term = (search or "").strip().lower()
    if term:
        pattern = f"%{term}%"
        q = q.filter(or_(
            func.lower(Vehicle.name).like(pattern),
            func.lower(func.coalesce(Vehicle.manufacturer, "")).like(pattern),
            func.lower(func.coalesce(Vehicle.realname, "")).like(pattern),
        ))

    if category and category != "all":
        q = q.filter(Vehicle.category == category)

    total = q.with_entities(func.count(Vehicle.id)).scalar() or 0

    if sort_by in SORTABLE_FIELDS:
        column = getattr(Vehicle, sort_by)
        if sort_by in _TEXT_FIELDS:
            column = func.lower(func.coalesce(column, ""))
        ordering = column.desc() if (sort_order or "").upper() == "DESC" else column.asc()
        q = q.order_by(ordering, Vehicle.id)
    else:
        q = q.order_by(Vehicle.category, Vehicle.name, Vehicle.id)

    vehicles = q.offset((page - 1) * limit).limit(limit).all()
    logger.debug(f"[CATALOG] search={term!r} category={category} page={page} → {len(vehicles)}/{total}")
    return {"vehicles": vehicles, "total": total}


def get_vehicle(db: Session, vehicle_id: int) -> Vehicle:
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if not vehicle:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return vehicle


def create_vehicle(db: Session, body: VehicleIn, admin) -> Vehicle:
    values = _clean_payload(body)
    now = datetime.utcnow()
    vehicle = Vehicle(**values, created_at=now, updated_at=now)
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)

    log_activity(
        db, admin, CREATE, "vehicles", vehicle.name,
        f"[Ajout d'un véhicule] {vehicle.name}",
        creation_details(values, FIELD_LABELS, FIELD_FORMATTERS),
        resource_id=vehicle.id,
    )
    return vehicle


def update_vehicle(db: Session, vehicle_id: int, body: VehicleIn, admin) -> Vehicle:
    values = _clean_payload(body)
    vehicle = get_vehicle(db, vehicle_id)
    before = vehicle_fields(vehicle)

    for key, value in values.items():
        setattr(vehicle, key, value)
    vehicle.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(vehicle)

    changes = diff_fields(before, values, FIELD_LABELS, FIELD_FORMATTERS)
    log_activity(
        db, admin, UPDATE, "vehicles", vehicle.name,
        f"[Modification d'un véhicule] {vehicle.name}",
        changes or None,
        resource_id=vehicle.id,
    )
    return vehicle


def delete_vehicle(db: Session, vehicle_id: int, admin) -> dict:
    vehicle = get_vehicle(db, vehicle_id)
    snapshot = {c.name: getattr(vehicle, c.name) for c in Vehicle.__table__.columns}
    db.delete(vehicle)
    db.commit()

    log_activity(
        db, admin, DELETE, "vehicles", snapshot["name"],
        f"[Suppression d'un véhicule] {snapshot['name']}",
        deletion_details(snapshot, FIELD_LABELS, FIELD_FORMATTERS),
        resource_id=snapshot["id"],
    )
    return {"message": "✅ Véhicule supprimé avec succès", "vehicle": snapshot}


def get_category_max_pages(db: Session) -> dict:
    """Highest catalog page per category, for the printed-catalog navigation."""
    rows = (
        db.query(Vehicle.category, func.max(Vehicle.page_catalog))
        .filter(Vehicle.page_catalog.isnot(None))
        .group_by(Vehicle.category)
        .order_by(Vehicle.category)
        .all()
    )
    return {category: max_page for category, max_page in rows}

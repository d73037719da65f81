# dealership/services/category_service.py
"""
Vehicle categories and particularities.
Vehicles reference both by name, so renames are cascaded onto the vehicles table.
"""

from datetime import datetime

from fastapi import HTTPException
from sqlalchemy.orm import Session

from dealership.models.category import Category
from dealership.models.particularity import Particularity
from dealership.models.vehicle import Vehicle
from dealership.schemas.category import CategoryIn, ParticularityIn
from dealership.services.activity_log import CREATE, UPDATE, DELETE, log_activity, DELETED, NOT_AVAILABLE
from dealership.utils.validators import blank_to_none
from dealership.utils.logger import get_logger

logger = get_logger(__name__)

NAME_REQUIRED_MESSAGE = "⚠️ Nom requis"


def _status_label(active: bool) -> str:
    return "Actif" if active else "Inactif"


# ── Categories ───────────────────────────────────────────────────────────────

def list_active_category_names(db: Session) -> list[str]:
    rows = db.query(Category.name).filter(Category.is_active.is_(True)).order_by(Category.name).all()
    return [name for (name,) in rows]


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name).all()


def _get_category(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="❌ Catégorie introuvable")
    return category


def _ensure_category_name_free(db: Session, name: str, exclude_id: int = None):
    q = db.query(Category.id).filter(Category.name == name)
    if exclude_id is not None:
        q = q.filter(Category.id != exclude_id)
    if q.first():
        raise HTTPException(status_code=409, detail="❌ Cette catégorie existe déjà")


def create_category(db: Session, body: CategoryIn, admin) -> Category:
    name = blank_to_none(body.name)
    if not name:
        raise HTTPException(status_code=400, detail=NAME_REQUIRED_MESSAGE)
    _ensure_category_name_free(db, name)

    now = datetime.utcnow()
    category = Category(
        name=name,
        is_active=True if body.is_active is None else body.is_active,
        created_at=now,
        updated_at=now,
    )
    db.add(category)
    db.commit()
    db.refresh(category)

    log_activity(db, admin, CREATE, "categories", name, f"[Catégorie] Création de {name}",
                 {"Nom": {"old": NOT_AVAILABLE, "new": name}}, resource_id=category.id)
    return category


def update_category(db: Session, category_id: int, body: CategoryIn, admin) -> Category:
    category = _get_category(db, category_id)
    old_name, old_active = category.name, category.is_active

    new_name = blank_to_none(body.name) or old_name
    new_active = old_active if body.is_active is None else body.is_active
    if new_name != old_name:
        _ensure_category_name_free(db, new_name, exclude_id=category.id)

    category.name = new_name
    category.is_active = new_active
    category.updated_at = datetime.utcnow()
    if new_name != old_name:
        moved = (
            db.query(Vehicle)
            .filter(Vehicle.category == old_name)
            .update({Vehicle.category: new_name}, synchronize_session=False)
        )
        logger.info(f"[CATEGORY] Renamed {old_name!r} → {new_name!r} ({moved} vehicles moved)")
    db.commit()
    db.refresh(category)

    changes = {}
    if new_name != old_name:
        changes["Nom"] = {"old": old_name, "new": new_name}
    if new_active != old_active:
        changes["Status"] = {"old": _status_label(old_active), "new": _status_label(new_active)}

    log_activity(db, admin, UPDATE, "categories", new_name, f"[Catégorie] Mise à jour de {new_name}",
                 changes or None, resource_id=category.id)
    return category


def delete_category(db: Session, category_id: int, admin) -> dict:
    category = _get_category(db, category_id)
    name, cid = category.name, category.id
    db.delete(category)
    db.commit()

    log_activity(db, admin, DELETE, "categories", name, f"[Catégorie] Suppression de {name}",
                 {"Nom": {"old": name, "new": DELETED}}, resource_id=cid)
    return {"message": "✅ Catégorie supprimée"}


# ── Particularities ──────────────────────────────────────────────────────────

def list_particularities(db: Session) -> list[Particularity]:
    return db.query(Particularity).order_by(Particularity.name).all()


def _get_particularity(db: Session, particularity_id: int) -> Particularity:
    particularity = db.query(Particularity).filter(Particularity.id == particularity_id).first()
    if not particularity:
        raise HTTPException(status_code=404, detail="❌ Particularité introuvable")
    return particularity


def _ensure_particularity_name_free(db: Session, name: str, exclude_id: int = None):
    q = db.query(Particularity.id).filter(Particularity.name == name)
    if exclude_id is not None:
        q = q.filter(Particularity.id != exclude_id)
    if q.first():
        raise HTTPException(status_code=409, detail="❌ Cette particularité existe déjà")


def create_particularity(db: Session, body: ParticularityIn, admin) -> Particularity:
    name = blank_to_none(body.name)
    if not name:
        raise HTTPException(status_code=400, detail=NAME_REQUIRED_MESSAGE)
    _ensure_particularity_name_free(db, name)

    particularity = Particularity(name=name, created_at=datetime.utcnow())
    db.add(particularity)
    db.commit()
    db.refresh(particularity)

    log_activity(db, admin, CREATE, "particularities", name, f"[Particularité] Création de {name}",
                 {"Nom": {"old": NOT_AVAILABLE, "new": name}}, resource_id=particularity.id)
    return particularity


def update_particularity(db: Session, particularity_id: int, body: ParticularityIn, admin) -> Particularity:
    name = blank_to_none(body.name)
    if not name:
        raise HTTPException(status_code=400, detail=NAME_REQUIRED_MESSAGE)

    particularity = _get_particularity(db, particularity_id)
    old_name = particularity.name
    if name == old_name:
        return particularity
    _ensure_particularity_name_free(db, name, exclude_id=particularity.id)

    particularity.name = name
    db.query(Vehicle).filter(Vehicle.particularity == old_name).update(
        {Vehicle.particularity: name}, synchronize_session=False
    )
    db.commit()
    db.refresh(particularity)

    log_activity(db, admin, UPDATE, "particularities", name, f"[Particularité] Mise à jour de {name}",
                 {"Nom": {"old": old_name, "new": name}}, resource_id=particularity.id)
    return particularity


def delete_particularity(db: Session, particularity_id: int, admin) -> dict:
    particularity = _get_particularity(db, particularity_id)
    name, pid = particularity.name, particularity.id
    db.delete(particularity)
    db.commit()

    log_activity(db, admin, DELETE, "particularities", name, f"[Particularité] Suppression de {name}",
                 {"Nom": {"old": name, "new": DELETED}}, resource_id=pid)
    return {"message": "✅ Particularité supprimée"}

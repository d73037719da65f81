# dealership/services/user_service.py
"""
Admin user management + login.
At least one admin must remain: delete is refused when the table would be emptied
(count-then-delete, not atomic).
"""

from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from dealership.models.admin_user import AdminUser
from dealership.middleware.auth import verify_access_key
from dealership.permissions import default_permissions, format_permissions_readable, normalize_permissions
from dealership.schemas.user import UserCreate, UserUpdate
from dealership.services.activity_log import CREATE, UPDATE, DELETE, DELETED, NOT_AVAILABLE, log_activity
from dealership.utils.validators import is_digits
from dealership.utils.logger import get_logger

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20

NOT_FOUND_MESSAGE = "❌ Utilisateur non trouvé - Vérifiez que l'ID de l'utilisateur existe"
USERNAME_TAKEN_MESSAGE = "❌ Ce pseudonyme est déjà utilisé. Veuillez choisir un autre pseudonyme"
UNIQUE_ID_TAKEN_MESSAGE = "❌ Cet ID unique est déjà utilisé. Veuillez choisir un autre ID"
UNIQUE_ID_DIGITS_MESSAGE = "⚠️ L'ID unique ne doit contenir que des chiffres"
LAST_ADMIN_MESSAGE = (
    "❌ Impossible de supprimer le dernier administrateur. Il doit rester au minimum un compte admin"
)


def user_view(user: AdminUser) -> dict:
    """Public shape of an admin user: normalized permissions, never the access key."""
    return {
        "id": user.id,
        "username": user.username,
        "unique_id": user.unique_id,
        "permissions": normalize_permissions(user.permissions),
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


# ── Login ────────────────────────────────────────────────────────────────────

def authenticate(db: Session, username: Optional[str], access_key: Optional[str]) -> AdminUser:
    if not username or not access_key:
        raise HTTPException(status_code=400, detail="⚠️ Veuillez entrer un pseudonyme et une clé d'accès")

    user = db.query(AdminUser).filter(AdminUser.username == username).first()
    if not user or not verify_access_key(access_key, user.access_key):
        logger.warning(f"[AUTH] Failed login for username={username!r}")
        raise HTTPException(status_code=403, detail="❌ Pseudonyme ou clé d'accès incorrect")

    logger.info(f"[AUTH] {user.username} logged in")
    return user


# ── Queries ──────────────────────────────────────────────────────────────────

def list_users(db: Session, page: int = 1, limit: int = DEFAULT_PAGE_SIZE,
               search: Optional[str] = None) -> list[AdminUser]:
    page = max(1, page)
    limit = min(MAX_PAGE_SIZE, limit if limit and limit > 0 else DEFAULT_PAGE_SIZE)
    q = db.query(AdminUser)
    search = (search or "").strip()
    if search:
        q = q.filter(AdminUser.username.ilike(f"%{search}%"))
    return (
        q.order_by(AdminUser.created_at.desc(), AdminUser.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )


def get_user(db: Session, user_id: int) -> AdminUser:
    user = db.query(AdminUser).filter(AdminUser.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return user


def _ensure_unique(db: Session, username: Optional[str], unique_id: Optional[str], exclude_id: int = None):
    if username:
        q = db.query(AdminUser.id).filter(AdminUser.username == username)
        if exclude_id is not None:
            q = q.filter(AdminUser.id != exclude_id)
        if q.first():
            raise HTTPException(status_code=409, detail=USERNAME_TAKEN_MESSAGE)
    if unique_id:
        q = db.query(AdminUser.id).filter(AdminUser.unique_id == unique_id)
        if exclude_id is not None:
            q = q.filter(AdminUser.id != exclude_id)
        if q.first():
            raise HTTPException(status_code=409, detail=UNIQUE_ID_TAKEN_MESSAGE)


# ── Mutations ────────────────────────────────────────────────────────────────

def create_user(db: Session, body: UserCreate, admin) -> AdminUser:
    username = (body.username or "").strip()
    if not username or not body.access_key:
        raise HTTPException(status_code=400, detail="⚠️ Le pseudonyme et la clé d'accès sont obligatoires")

    unique_id = (body.unique_id or "").strip() or None
    if unique_id and not is_digits(unique_id):
        raise HTTPException(status_code=400, detail=UNIQUE_ID_DIGITS_MESSAGE)

    _ensure_unique(db, username, unique_id)

    now = datetime.utcnow()
    user = AdminUser(
        username=username,
        access_key=body.access_key,
        unique_id=unique_id,
        permissions=body.permissions if body.permissions is not None else default_permissions(),
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    log_activity(
        db, admin, CREATE, "users", username, f"[Utilisateur créé] {username}",
        {
            "Pseudonyme": {"old": NOT_AVAILABLE, "new": username},
            "ID Unique": {"old": NOT_AVAILABLE, "new": unique_id or NOT_AVAILABLE},
            "Permissions": {"old": NOT_AVAILABLE, "new": format_permissions_readable(user.permissions)},
        },
        resource_id=user.id,
    )
    return user


def update_user(db: Session, user_id: int, body: UserUpdate, admin) -> AdminUser:
    user = get_user(db, user_id)

    fields_set = body.model_fields_set
    if not fields_set & {"username", "access_key", "unique_id", "permissions"}:
        raise HTTPException(status_code=400, detail="⚠️ Veuillez modifier au moins un champ")

    username = (body.username or "").strip() or None
    unique_id = (body.unique_id or "").strip() or None
    if unique_id and not is_digits(unique_id):
        raise HTTPException(status_code=400, detail=UNIQUE_ID_DIGITS_MESSAGE)

    _ensure_unique(db, username, unique_id, exclude_id=user.id)

    changes = {}
    if username and username != user.username:
        changes["Nom d'utilisateur"] = {"old": user.username, "new": username}
        user.username = username
    if body.access_key:
        changes["Clé d'accès"] = {"old": "Masquée", "new": "Masquée"}
        user.access_key = body.access_key
    if unique_id and unique_id != user.unique_id:
        changes["ID Unique"] = {"old": user.unique_id or NOT_AVAILABLE, "new": unique_id}
        user.unique_id = unique_id
    if body.permissions is not None:
        old_readable = format_permissions_readable(user.permissions)
        new_readable = format_permissions_readable(body.permissions)
        if old_readable != new_readable:
            changes["Permissions"] = {"old": old_readable, "new": new_readable}
        user.permissions = body.permissions

    user.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(user)

    log_activity(
        db, admin, UPDATE, "users", user.username, f"[Modification d'un utilisateur] {user.username}",
        changes or None, resource_id=user.id,
    )
    return user


def delete_user(db: Session, user_id: int, admin) -> dict:
    user = get_user(db, user_id)
    count = db.query(func.count(AdminUser.id)).scalar() or 0
    if count <= 1:
        raise HTTPException(status_code=400, detail=LAST_ADMIN_MESSAGE)

    username, uid = user.username, user.id
    db.delete(user)
    db.commit()

    log_activity(
        db, admin, DELETE, "users", username, f"[Suppression d'un utilisateur] {username}",
        {
            "Nom d'utilisateur": {"old": username, "new": DELETED},
            "ID": {"old": uid, "new": DELETED},
        },
        resource_id=uid,
    )
    return {"message": "✅ Utilisateur supprimé avec succès", "username": username}

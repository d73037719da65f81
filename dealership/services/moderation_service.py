# dealership/services/moderation_service.py
"""Ban list for customer unique IDs. A banned ID cannot place new orders."""

from datetime import datetime

from fastapi import HTTPException
from sqlalchemy.orm import Session

from dealership.models.banned_unique_id import BannedUniqueId
from dealership.schemas.moderation import BanRequest
from dealership.services.activity_log import CREATE, UPDATE, DELETE, DELETED, NOT_AVAILABLE, log_activity
from dealership.utils.validators import is_digits, blank_to_none
from dealership.utils.logger import get_logger

logger = get_logger(__name__)


def _validated_unique_id(body: BanRequest) -> str:
    if not body.unique_id or not body.unique_id.strip():
        raise HTTPException(status_code=400, detail="⚠️ ID unique requis")
    if not is_digits(body.unique_id):
        raise HTTPException(status_code=400, detail="⚠️ L'ID unique ne doit contenir que des chiffres")
    return body.unique_id.strip()


def list_banned_ids(db: Session) -> list[BannedUniqueId]:
    return db.query(BannedUniqueId).order_by(BannedUniqueId.banned_at.desc(), BannedUniqueId.id.desc()).all()


def ban_unique_id(db: Session, body: BanRequest, admin) -> BannedUniqueId:
    """Upsert: banning an already banned ID refreshes reason, author and date."""
    unique_id = _validated_unique_id(body)
    reason = blank_to_none(body.reason)

    ban = db.query(BannedUniqueId).filter(BannedUniqueId.unique_id == unique_id).first()
    old_reason = ban.reason if ban else None
    action = UPDATE if ban else CREATE
    if not ban:
        ban = BannedUniqueId(unique_id=unique_id)
        db.add(ban)
    ban.reason = reason
    ban.banned_by = admin.username if admin else "admin"
    ban.banned_at = datetime.utcnow()
    db.commit()
    db.refresh(ban)

    logger.warning(f"[MODERATION] Unique ID {unique_id} banned by {ban.banned_by} (reason={reason})")
    log_activity(
        db, admin, action, "moderation", unique_id, f"[Bannissement] ID {unique_id}",
        {
            "ID Unique": {"old": unique_id if action == UPDATE else NOT_AVAILABLE, "new": unique_id},
            "Raison": {"old": old_reason or NOT_AVAILABLE, "new": reason or NOT_AVAILABLE},
        },
        resource_id=ban.id,
    )
    return ban


def unban_unique_id(db: Session, body: BanRequest, admin) -> dict:
    unique_id = _validated_unique_id(body)
    ban = db.query(BannedUniqueId).filter(BannedUniqueId.unique_id == unique_id).first()
    if not ban:
        raise HTTPException(status_code=404, detail="❌ ID unique non trouvé dans la liste des bannissements")

    ban_id, reason = ban.id, ban.reason
    db.delete(ban)
    db.commit()

    logger.info(f"[MODERATION] Unique ID {unique_id} unbanned by {admin.username if admin else 'admin'}")
    log_activity(
        db, admin, DELETE, "moderation", unique_id, f"[Débannissement] ID {unique_id}",
        {
            "ID Unique": {"old": unique_id, "new": DELETED},
            "Raison": {"old": reason or NOT_AVAILABLE, "new": DELETED},
        },
        resource_id=ban_id,
    )
    return {"message": "✅ ID unique débanni avec succès"}

# dealership/services/activity_log.py
"""
Activity + audit logging for admin mutations.

Called by every service after its mutation has been committed.
Writes one activity_logs row (human-readable diff for the admin console) and
one audit_logs row (request-level ledger). Never raises: a failed log entry
is logged and dropped, the mutation it describes stands.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from dealership.models.activity_log import ActivityLog
from dealership.models.admin_user import AdminUser
from dealership.services.audit_service import record_audit_event
from dealership.utils.logger import get_logger

logger = get_logger(__name__)

CREATE = "Création"
UPDATE = "Modification"
DELETE = "Suppression"

DELETED = "Supprimé"
NOT_AVAILABLE = "N/A"

RESOURCE_LABELS = {
    "vehicles": "🚗 Véhicules",
    "categories": "🏷️ Catégories",
    "particularities": "✨ Particularités",
    "orders": "📦 Commandes",
    "users": "👥 Utilisateurs",
    "moderation": "⛔ Modération",
    "announcements": "📢 Annonces",
    "activity_logs": "📝 Logs d'activité",
}

ACTION_LABELS = {
    CREATE: "✅ Création",
    UPDATE: "✏️ Modification",
    DELETE: "❌ Suppression",
}


def translate_resource(resource: str) -> str:
    return RESOURCE_LABELS.get(resource, resource)


def translate_action(action: str) -> str:
    return ACTION_LABELS.get(action, action)


# ── Diff helpers ─────────────────────────────────────────────────────────────

def _fmt(formatters: dict, key: str, value):
    fn = formatters.get(key)
    return fn(value) if fn else value


def diff_fields(old: dict, new: dict, labels: dict, formatters: Optional[dict] = None) -> dict:
    """
    Field-by-field diff between two plain dicts.
    Returns {label: {"old": ..., "new": ...}} for changed keys only, in `labels` order.
    """
    formatters = formatters or {}
    changes = {}
    for key, label in labels.items():
        if old.get(key) != new.get(key):
            changes[label] = {
                "old": _fmt(formatters, key, old.get(key)),
                "new": _fmt(formatters, key, new.get(key)),
            }
    return changes


def creation_details(values: dict, labels: dict, formatters: Optional[dict] = None) -> dict:
    formatters = formatters or {}
    return {label: {"old": NOT_AVAILABLE, "new": _fmt(formatters, key, values.get(key))}
            for key, label in labels.items()}


def deletion_details(values: dict, labels: dict, formatters: Optional[dict] = None) -> dict:
    formatters = formatters or {}
    return {label: {"old": _fmt(formatters, key, values.get(key)), "new": DELETED}
            for key, label in labels.items()}


# ── Writing ──────────────────────────────────────────────────────────────────

def _actor_unique_id(db: Session, principal) -> Optional[str]:
    if principal is None:
        return None
    if principal.unique_id:
        return principal.unique_id
    row = db.query(AdminUser.unique_id).filter(AdminUser.id == principal.id).first()
    return row[0] if row else None


def log_activity(db: Session, principal, action: str, resource_type: str,
                 resource_name: Optional[str], description: str,
                 details: Optional[dict] = None, resource_id: Optional[int] = None):
    """Append one activity row and its audit counterpart. Swallows every error."""
    try:
        db.add(ActivityLog(
            admin_id=principal.id if principal else None,
            admin_username=principal.username if principal else None,
            admin_unique_id=_actor_unique_id(db, principal),
            admin_ip=principal.ip if principal else None,
            action=action,
            resource_type=resource_type,
            resource_name=resource_name,
            description=description,
            details=details or None,
            created_at=datetime.utcnow(),
        ))
        db.commit()
        logger.info(
            f"[ACTIVITY] {action.upper()} - {resource_type}: {resource_name or 'N/A'} "
            f"by {principal.username if principal else 'anonymous'} [IP: {principal.ip if principal else None}]"
        )
    except Exception as e:
        db.rollback()
        logger.error(f"[ACTIVITY] Failed to record {action} on {resource_type}: {e}", exc_info=True)

    record_audit_event(db, principal, action, resource_type, resource_id, resource_name, details)


# ── Reading ──────────────────────────────────────────────────────────────────

def get_recent_activity(db: Session, limit: int = 1000) -> list[ActivityLog]:
    return db.query(ActivityLog).order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc()).limit(limit).all()


def get_activity_page(db: Session, page: int = 1, page_size: int = 25) -> dict:
    total = db.query(func.count(ActivityLog.id)).scalar() or 0
    logs = (
        db.query(ActivityLog)
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    total_pages = -(-total // page_size)
    return {
        "logs": logs,
        "pagination": {
            "page": page,
            "pageSize": page_size,
            "total": total,
            "totalPages": total_pages,
            "hasMore": page < total_pages,
        },
    }

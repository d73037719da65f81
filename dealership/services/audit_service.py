# dealership/services/audit_service.py
"""
Request-level audit ledger (audit_logs).
Written alongside every activity entry; searchable by admin username or by
any value inside the recorded changes (e.g. a customer's unique ID).
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, cast, func
from sqlalchemy.orm import Session

from dealership.models.audit_log import AuditLog
from dealership.utils.logger import get_logger

logger = get_logger(__name__)

VERBS = {
    "Création": "create",
    "Modification": "update",
    "Suppression": "delete",
}

_VERB_PAST = {"create": "créé", "update": "modifié", "delete": "supprimé"}

_RESOURCE_NOUNS = {
    "vehicles": "véhicule",
    "categories": "catégorie",
    "particularities": "particularité",
    "users": "utilisateur",
    "orders": "commande",
    "moderation": "ID banni",
    "announcements": "annonce",
}


def build_description(action: str, resource_type: str, resource_name: Optional[str]) -> str:
    """e.g. ("create", "vehicles", "Adder") → "Véhicule créé 'Adder'"."""
    noun = _RESOURCE_NOUNS.get(resource_type, resource_type)
    verb = _VERB_PAST.get(action, action)
    name = f" '{resource_name}'" if resource_name else ""
    return f"{noun[:1].upper()}{noun[1:]} {verb}{name}"


def record_audit_event(db: Session, principal, action: str, resource_type: str,
                       resource_id: Optional[int], resource_name: Optional[str],
                       changes: Optional[dict]):
    """Append one audit_logs row. Errors are logged and swallowed."""
    verb = VERBS.get(action, action)
    try:
        db.add(AuditLog(
            admin_id=principal.id if principal else None,
            admin_username=principal.username if principal else None,
            action=verb,
            resource_type=resource_type,
            resource_id=resource_id,
            description=build_description(verb, resource_type, resource_name),
            changes=changes or None,
            ip_address=(principal.ip if principal else None) or "Unknown",
            user_agent=(principal.user_agent if principal else None) or "Unknown",
            created_at=datetime.utcnow(),
        ))
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"[AUDIT] Failed to record {verb} on {resource_type}: {e}", exc_info=True)


def search_audit_logs(db: Session, page: int = 1, limit: int = 50,
                      search: Optional[str] = None, search_type: Optional[str] = None) -> dict:
    q = db.query(AuditLog)
    if search and search_type:
        pattern = f"%{search[:100]}%"
        if search_type == "username":
            q = q.filter(AuditLog.admin_username.ilike(pattern))
        elif search_type == "uniqueId":
            q = q.filter(cast(AuditLog.changes, String).ilike(pattern))

    total = q.with_entities(func.count(AuditLog.id)).scalar() or 0
    logs = (
        q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "logs": logs,
        "pagination": {"page": page, "limit": limit, "total": total, "pages": -(-total // limit)},
    }

# dealership/services/announcement_service.py
"""Site banner. Only one row ever exists: each update deletes everything and reinserts."""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from dealership.models.announcement import Announcement
from dealership.schemas.announcement import AnnouncementIn
from dealership.services.activity_log import CREATE, UPDATE, DELETE, DELETED, NOT_AVAILABLE, log_activity


def _display(active: Optional[bool]) -> str:
    return "Sur le site" if active else "Masquée"


def get_active_announcement(db: Session) -> Optional[Announcement]:
    return (
        db.query(Announcement)
        .filter(Announcement.is_active.is_(True))
        .order_by(Announcement.created_at.desc())
        .first()
    )


def update_announcement(db: Session, body: AnnouncementIn, admin) -> Optional[Announcement]:
    """
    Replace the announcement. Blank content removes it (returns None).
    Logged as Création, Modification or Suppression depending on the previous row.
    """
    old = db.query(Announcement).order_by(Announcement.id).first()
    old_content = old.content if old else None
    old_active = old.is_active if old else None

    db.query(Announcement).delete(synchronize_session=False)

    content = (body.content or "").strip()
    if not content:
        db.commit()
        if old is not None:
            log_activity(
                db, admin, DELETE, "announcements", "Annonce", "[Annonces] Annonce supprimée",
                {
                    "Contenu": {"old": old_content, "new": DELETED},
                    "Affichage": {"old": _display(old_active), "new": DELETED},
                },
            )
        return None

    now = datetime.utcnow()
    announcement = Announcement(content=content, is_active=body.is_active, created_at=now, updated_at=now)
    db.add(announcement)
    db.commit()
    db.refresh(announcement)

    changes = {}
    if old is None or old_content != content:
        changes["Contenu"] = {"old": old_content or NOT_AVAILABLE, "new": content}
    if old is None or old_active != body.is_active:
        changes["Affichage"] = {"old": _display(old_active), "new": _display(body.is_active)}

    log_activity(
        db, admin, UPDATE if old is not None else CREATE, "announcements", "Annonce",
        f"[Annonces] Annonce {'modifiée' if old is not None else 'postée'}",
        changes or None, resource_id=announcement.id,
    )
    return announcement

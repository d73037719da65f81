# dealership/services/order_service.py
"""
Orders: public checkout + admin status transitions.

Checkout flow:
  - validate customer fields (names, phone, digits-only unique ID)
  - refuse banned unique IDs (403) and unique IDs with a pending order (409)
  - insert order + snapshot line items

Status machine:
  pending → delivered   (orders.validate)
  pending → cancelled   (orders.cancel, reason required)
  delivered / cancelled are terminal; nothing returns to pending.

Both uniqueness checks are read-then-write at the application layer (no
constraint, no lock); two simultaneous checkouts can both pass.
"""

from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from dealership.models.banned_unique_id import BannedUniqueId
from dealership.models.order import Order, OrderItem, ORDER_STATUSES
from dealership.permissions import check_permission
from dealership.schemas.order import OrderCreate, OrderStatusUpdate
from dealership.services.activity_log import UPDATE, DELETE, DELETED, log_activity
from dealership.services.webhook_service import cancellation_reason_text
from dealership.utils.validators import clean_phone, is_digits, is_valid_name, is_valid_phone
from dealership.utils.logger import get_logger

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20

# Target status → permission action
TRANSITION_PERMISSIONS = {
    "delivered": "validate",
    "cancelled": "cancel",
}

NOT_FOUND_MESSAGE = "❌ Commande introuvable - Cette commande n'existe pas ou a été supprimée"
PENDING_EXISTS_MESSAGE = (
    "❌ Cet ID unique a déjà une commande en attente. Veuillez attendre la livraison "
    "ou l'annulation de la commande précédente"
)
BANNED_MESSAGE = (
    "❌ Commande refusée - Votre accès aux commandes a été bloqué. Veuillez contacter le support"
)


# ── Snapshots / summaries ────────────────────────────────────────────────────

def item_snapshot(item: OrderItem) -> dict:
    return {c.name: getattr(item, c.name) for c in OrderItem.__table__.columns}


def order_snapshot(order: Order) -> dict:
    """Plain-dict copy of an order and its items, safe to use after the session closes."""
    data = {c.name: getattr(order, c.name) for c in Order.__table__.columns}
    data["items"] = [item_snapshot(item) for item in order.items]
    return data


def vehicles_summary(items) -> tuple[str, str]:
    """('3 véhicules', 'Adder (2x), Zentorno (1x)') for activity details."""
    count = sum(item["quantity"] or 0 for item in items)
    listing = ", ".join(f"{item['vehicle_name']} ({item['quantity']}x)" for item in items)
    return f"{count} véhicule{'s' if count > 1 else ''}", listing


def _amount(value) -> str:
    return f"{value}$" if value else "N/A"


def cart_total(items) -> int:
    return sum((item.vehicle_price or 0) * (item.quantity or 0) for item in items)


# ── Checkout ─────────────────────────────────────────────────────────────────

def validate_checkout(body: OrderCreate) -> dict:
    """Return cleaned checkout values or raise 400."""
    first_name = (body.first_name or "").strip()
    last_name = (body.last_name or "").strip()
    phone = (body.phone or "").strip()
    unique_id = (body.unique_id or "").strip()
    if not first_name or not last_name or not phone or not body.items or not unique_id:
        raise HTTPException(status_code=400, detail="Tous les champs sont requis")

    for item in body.items:
        if (item.vehicle_id is None or not item.vehicle_name or not item.vehicle_category
                or item.vehicle_price is None or item.quantity < 1):
            raise HTTPException(status_code=400, detail="⚠️ Un article du panier est invalide")

    if not is_valid_name(first_name) or not is_valid_name(last_name):
        raise HTTPException(status_code=400, detail="Le nom et prénom ne doivent contenir que des lettres")

    if not is_valid_phone(phone):
        raise HTTPException(status_code=400, detail="Numéro de téléphone invalide")

    if not is_digits(unique_id):
        raise HTTPException(status_code=400, detail="⚠️ L'ID unique ne doit contenir que des chiffres")

    return {
        "first_name": first_name,
        "last_name": last_name,
        "phone": clean_phone(phone),
        "unique_id": unique_id,
        "total_price": body.total_price if body.total_price is not None else cart_total(body.items),
    }


def is_banned(db: Session, unique_id: str) -> bool:
    return db.query(BannedUniqueId.id).filter(BannedUniqueId.unique_id == unique_id).first() is not None


def has_pending_order(db: Session, unique_id: str) -> bool:
    return db.query(Order.id).filter(Order.unique_id == unique_id, Order.status == "pending").first() is not None


def create_order(db: Session, body: OrderCreate, client_ip: Optional[str] = None) -> Order:
    values = validate_checkout(body)
    unique_id = values["unique_id"]

    if is_banned(db, unique_id):
        logger.warning(f"[ORDER] Checkout refused for banned unique ID {unique_id} (ip={client_ip})")
        raise HTTPException(status_code=403, detail=BANNED_MESSAGE)

    if has_pending_order(db, unique_id):
        raise HTTPException(status_code=409, detail=PENDING_EXISTS_MESSAGE)

    now = datetime.utcnow()
    order = Order(**values, status="pending", client_ip=client_ip or "unknown", created_at=now, updated_at=now)
    for item in body.items:
        order.items.append(OrderItem(
            vehicle_id=item.vehicle_id,
            vehicle_name=item.vehicle_name,
            vehicle_category=item.vehicle_category,
            vehicle_price=item.vehicle_price,
            vehicle_image_url=item.vehicle_image_url,
            quantity=item.quantity,
            created_at=now,
        ))
    db.add(order)
    db.commit()
    db.refresh(order)

    logger.info(f"[ORDER] #{order.id} created for unique ID {unique_id}: "
                f"{len(order.items)} line(s), total {order.total_price}$")
    return order


# ── Admin queries ────────────────────────────────────────────────────────────

def list_orders(db: Session, status: Optional[str] = None, page: int = 1,
                limit: int = DEFAULT_PAGE_SIZE) -> list[Order]:
    page = max(1, page)
    limit = min(MAX_PAGE_SIZE, limit if limit and limit > 0 else DEFAULT_PAGE_SIZE)

    q = db.query(Order)
    if status and status != "all":
        q = q.filter(Order.status == status[:50])
    return (
        q.order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )


def get_order(db: Session, order_id: int) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return order


# ── Status transitions ───────────────────────────────────────────────────────

def update_order_status(db: Session, order_id: int, body: OrderStatusUpdate, admin) -> Order:
    """
    Move a pending order to delivered or cancelled.
    The permission for the requested transition is checked before the order is read.
    """
    new_status = body.status
    if new_status not in ORDER_STATUSES:
        raise HTTPException(
            status_code=400,
            detail="⚠️ Le statut fourni est invalide. Veuillez choisir: en attente, livrée ou annulée",
        )
    if new_status == "pending":
        raise HTTPException(status_code=400, detail="⚠️ Une commande ne peut pas être remise en attente")

    check_permission(admin, "orders", TRANSITION_PERMISSIONS[new_status])

    reason = (body.cancellation_reason or "").strip() or None
    if new_status == "cancelled" and not reason:
        raise HTTPException(status_code=400, detail="⚠️ Veuillez indiquer une raison d'annulation")

    order = get_order(db, order_id)
    old_status = order.status
    if old_status != "pending":
        raise HTTPException(
            status_code=409,
            detail=f"❌ Cette commande a déjà été traitée (statut: {old_status})",
        )

    now = datetime.utcnow()
    order.status = new_status
    order.validated_by = admin.username
    order.validated_at = now
    order.updated_at = now
    if new_status == "cancelled":
        order.cancellation_reason = reason
    db.commit()
    db.refresh(order)

    items = [item_snapshot(i) for i in order.items]
    count_label, listing = vehicles_summary(items)
    client = f"{order.first_name} {order.last_name}"
    details = {
        "Ancien statut": {"old": old_status, "new": new_status},
        "Client": {"old": client, "new": client},
        "ID Unique": {"old": order.unique_id, "new": order.unique_id},
    }
    if new_status == "cancelled":
        details["Raison d'annulation"] = {"old": "N/A", "new": cancellation_reason_text(reason)}
    details["Montant total"] = {"old": _amount(order.total_price), "new": _amount(order.total_price)}
    details["Véhicules"] = {"old": count_label, "new": count_label}
    details["Détails véhicules"] = {"old": listing, "new": listing}

    label = "[Commande livrée]" if new_status == "delivered" else "[Commande annulée]"
    log_activity(db, admin, UPDATE, "orders", f"Commande #{order.id}", f"{label} #{order.id}",
                 details, resource_id=order.id)

    logger.info(f"[ORDER] #{order.id} {old_status} → {new_status} by {admin.username}")
    return order


def delete_order(db: Session, order_id: int, admin) -> dict:
    order = get_order(db, order_id)
    snapshot = order_snapshot(order)
    db.delete(order)
    db.commit()

    count_label, listing = vehicles_summary(snapshot["items"])
    details = {
        "Client": {"old": f"{snapshot['first_name']} {snapshot['last_name']}", "new": DELETED},
        "ID Unique": {"old": snapshot["unique_id"], "new": DELETED},
        "Téléphone": {"old": snapshot["phone"], "new": DELETED},
        "Montant total": {"old": _amount(snapshot["total_price"]), "new": DELETED},
        "Statut": {"old": snapshot["status"], "new": DELETED},
        "Véhicules": {"old": count_label, "new": DELETED},
        "Détails véhicules": {"old": listing, "new": DELETED},
    }
    log_activity(db, admin, DELETE, "orders", f"Commande #{snapshot['id']}",
                 f"[Suppression d'une commande] #{snapshot['id']}", details, resource_id=snapshot["id"])
    return {"message": "✅ Commande supprimée avec succès"}

# dealership/services/webhook_service.py
"""
Outbound order notifications.

Two independent integrations, each enabled by its URL in settings:
  - WEBHOOK_URL          → generic JSON payload
  - DISCORD_WEBHOOK_URL  → Discord embed payload

Routers schedule notify_order_event() as a background task with a plain-dict
snapshot of the order, so it runs after the response is sent.
Best effort: bounded timeout, no retry, failures are logged and dropped.
"""

from datetime import datetime, timezone
from typing import Optional

import httpx

from dealership.config import settings
from dealership.utils.logger import get_logger

logger = get_logger(__name__)

NEW_ORDER = "new_order"
ORDER_DELIVERED = "order_delivered"
ORDER_CANCELLED = "order_cancelled"

CANCELLATION_REASONS = {
    "customer_cancelled": "Commande annulée par le client",
    "delivery_issue": "Souci de livraison",
    "inappropriate_behavior": "Comportement du client inapproprié",
}

_TITLES = {
    NEW_ORDER: "🎉 NOUVELLE COMMANDE REÇUE 🎉",
    ORDER_DELIVERED: "✅ Commande livrée ✅",
    ORDER_CANCELLED: "❌ Commande annulée ❌",
}

_DISCORD_CONTENT = {
    NEW_ORDER: "🎉 **NOUVELLE COMMANDE REÇUE** 🎉",
    ORDER_DELIVERED: "✅ **COMMANDE LIVRÉE** ✅",
    ORDER_CANCELLED: "❌ **COMMANDE ANNULÉE** ❌",
}

_DISCORD_DESCRIPTIONS = {
    NEW_ORDER: "Une nouvelle réservation a été enregistrée avec succès!",
    ORDER_DELIVERED: "La commande a été livrée avec succès!",
    ORDER_CANCELLED: "La commande a été annulée",
}

_DISCORD_COLORS = {
    NEW_ORDER: 16766976,       # gold
    ORDER_DELIVERED: 65280,    # green
    ORDER_CANCELLED: 16711680, # red
}

_FRENCH_DAYS = ["lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"]
_FRENCH_MONTHS = ["janvier", "février", "mars", "avril", "mai", "juin", "juillet",
                  "août", "septembre", "octobre", "novembre", "décembre"]


def cancellation_reason_text(reason: Optional[str]) -> Optional[str]:
    if not reason:
        return None
    return CANCELLATION_REASONS.get(reason, reason)


def format_amount(value: int) -> str:
    """1250000 → '1 250 000$'."""
    return f"{value:,}$".replace(",", " ")


def format_french_datetime(moment: datetime) -> str:
    """e.g. 'samedi 17 octobre 2026 à 14:05'."""
    return (f"{_FRENCH_DAYS[moment.weekday()]} {moment.day} {_FRENCH_MONTHS[moment.month - 1]} "
            f"{moment.year} à {moment.strftime('%H:%M')}")


def _iso(value) -> Optional[str]:
    return value.isoformat() if isinstance(value, datetime) else value


def build_generic_payload(event: str, order: dict, processed_by: Optional[str] = None,
                          now: Optional[datetime] = None) -> dict:
    now = now or datetime.now(timezone.utc)
    data = {
        "uniqueId": order["unique_id"],
        "id": order["id"],
        "firstName": order["first_name"],
        "lastName": order["last_name"],
        "phone": order["phone"],
        "totalPrice": order["total_price"],
        "status": order["status"],
        "createdAt": _iso(order.get("created_at")),
        "items": [
            {
                "vehicleName": item["vehicle_name"],
                "vehicleCategory": item["vehicle_category"],
                "vehiclePrice": item["vehicle_price"],
                "quantity": item["quantity"],
            }
            for item in order.get("items", [])
        ],
    }
    if event != NEW_ORDER:
        data["validatedBy"] = f"{processed_by or 'Système'} ({format_french_datetime(now)})"
    if event == ORDER_CANCELLED and order.get("cancellation_reason"):
        data["cancellationReason"] = cancellation_reason_text(order["cancellation_reason"])

    return {"type": event, "title": _TITLES[event], "order": data}


def _items_block(items: list[dict]) -> str:
    lines = []
    for item in items:
        subtotal = item["vehicle_price"] * item["quantity"]
        lines.append(
            f"• **{item['vehicle_name']}**\n"
            f"  📁 Catégorie: {item['vehicle_category']}\n"
            f"  🔢 Quantité: {item['quantity']}x\n"
            f"  💵 Prix unitaire: {format_amount(item['vehicle_price'])}\n"
            f"  ✅ Sous-total: **{format_amount(subtotal)}**\n"
        )
    return "\n".join(lines) or "Aucun"


def _separator(title: str) -> dict:
    return {"name": f"━━━━━━━━━━━━ {title} ━━━━━━━━━━━━", "value": " ", "inline": False}


def build_discord_payload(event: str, order: dict, processed_by: Optional[str] = None,
                          now: Optional[datetime] = None) -> dict:
    now = now or datetime.now(timezone.utc)
    items = order.get("items", [])
    vehicle_count = sum(item["quantity"] for item in items)

    fields = [
        _separator("INFORMATIONS CLIENT"),
        {"name": "👤 Nom complet", "value": f"{order['first_name']} {order['last_name']}", "inline": False},
        {"name": "📞 Téléphone", "value": f"`{order['phone']}`", "inline": False},
        {"name": "🔑 ID Unique", "value": f"`{order['unique_id']}`", "inline": False},
        _separator("VÉHICULES"),
        {
            "name": f"🚗 {vehicle_count} Véhicule{'s' if vehicle_count > 1 else ''}",
            "value": _items_block(items),
            "inline": False,
        },
        _separator("RÉCAPITULATIF"),
        {"name": "💰 Total", "value": f"**{format_amount(order['total_price'])}**", "inline": False},
    ]
    if event == NEW_ORDER:
        fields.append({"name": "📅 Date", "value": format_french_datetime(now), "inline": False})
    else:
        fields.append({
            "name": "📅 Traité par",
            "value": f"{processed_by or 'Système'} le {format_french_datetime(now)}",
            "inline": False,
        })
    if event == ORDER_CANCELLED and order.get("cancellation_reason"):
        fields.append({
            "name": "📝 Raison",
            "value": cancellation_reason_text(order["cancellation_reason"]),
            "inline": False,
        })

    return {
        "content": _DISCORD_CONTENT[event],
        "embeds": [{
            "title": f"📦 Commande #{order['id']}",
            "description": _DISCORD_DESCRIPTIONS[event],
            "color": _DISCORD_COLORS[event],
            "fields": fields,
            "footer": {"text": f"{settings.STORE_NAME} - Système de Gestion des Commandes"},
            "timestamp": now.isoformat(),
        }],
    }


async def _post(client: httpx.AsyncClient, label: str, url: str, payload: dict, order_id) -> bool:
    try:
        response = await client.post(url, json=payload)
        if response.status_code >= 400:
            logger.warning(f"[WEBHOOK] {label} returned HTTP {response.status_code} for order {order_id}")
            return False
        logger.info(f"[WEBHOOK] {label} sent for order {order_id} ({payload.get('type', 'discord')})")
        return True
    except httpx.HTTPError as e:
        logger.error(f"[WEBHOOK] {label} failed for order {order_id}: {e}")
        return False


async def notify_order_event(event: str, order: dict, processed_by: Optional[str] = None) -> dict:
    """
    Post the order event to every configured webhook.
    Returns {"generic": bool|None, "discord": bool|None} (None = not configured).
    """
    results = {"generic": None, "discord": None}
    if not settings.WEBHOOK_URL and not settings.DISCORD_WEBHOOK_URL:
        return results

    now = datetime.now(timezone.utc)
    try:
        async with httpx.AsyncClient(timeout=settings.WEBHOOK_TIMEOUT_SECONDS) as client:
            if settings.WEBHOOK_URL:
                results["generic"] = await _post(
                    client, "generic", settings.WEBHOOK_URL,
                    build_generic_payload(event, order, processed_by, now), order["id"],
                )
            if settings.DISCORD_WEBHOOK_URL:
                results["discord"] = await _post(
                    client, "discord", settings.DISCORD_WEBHOOK_URL,
                    build_discord_payload(event, order, processed_by, now), order["id"],
                )
    except Exception as e:
        logger.error(f"[WEBHOOK] Notification for order {order.get('id')} aborted: {e}", exc_info=True)
    return results

# dealership/permissions.py
"""
Admin permission map: resource category → action → bool.

No hierarchy, no wildcards: every action is toggled on its own.
The map is stored as JSON on admin_users.permissions and re-read on every
authenticated request, so a revoked permission takes effect immediately.
"""

import copy

from fastapi import HTTPException, status

PERMISSION_SCHEMA: dict[str, tuple[str, ...]] = {
    "vehicles": ("view", "create", "update", "delete"),
    "orders": ("view", "validate", "cancel", "delete"),
    "users": ("view", "create", "update", "delete"),
    "moderation": ("view", "ban_uniqueids", "view_logs"),
    "announcements": ("view", "create", "update", "delete"),
}

ACTION_LABELS = {
    "view": "Voir",
    "create": "Créer",
    "update": "Modifier",
    "delete": "Supprimer",
    "validate": "Valider",
    "cancel": "Annuler",
    "ban_uniqueids": "Bannir",
    "view_logs": "Voir les logs",
}

CATEGORY_LABELS = {
    "vehicles": "🚗 Véhicules",
    "orders": "📦 Commandes",
    "users": "👥 Utilisateurs",
    "moderation": "⛔ Modération",
    "announcements": "📢 Annonces",
}

FULL_PERMISSIONS = {cat: {a: True for a in actions} for cat, actions in PERMISSION_SCHEMA.items()}

DEFAULT_PERMISSIONS = {cat: {a: False for a in actions} for cat, actions in PERMISSION_SCHEMA.items()}
DEFAULT_PERMISSIONS["vehicles"]["view"] = True
DEFAULT_PERMISSIONS["orders"]["view"] = True

AUTH_REQUIRED_MESSAGE = "❌ Authentification requise - Veuillez vous connecter"
NO_PERMISSIONS_MESSAGE = "🔒 Permission refusée - Contactez votre administrateur"


def default_permissions() -> dict:
    return copy.deepcopy(DEFAULT_PERMISSIONS)


def normalize_permissions(raw) -> dict:
    """Return a complete map with strict booleans; unknown keys are dropped."""
    raw = raw if isinstance(raw, dict) else {}
    result = {}
    for category, actions in PERMISSION_SCHEMA.items():
        given = raw.get(category)
        given = given if isinstance(given, dict) else {}
        result[category] = {action: given.get(action) is True for action in actions}
    return result


def has_any_permission(perms) -> bool:
    normalized = normalize_permissions(perms)
    return any(flag for actions in normalized.values() for flag in actions.values())


def format_permissions_readable(perms) -> str:
    """One line per category with at least one granted action, e.g. '🚗 Véhicules: Voir, Créer'."""
    if not perms:
        return "Aucune permission"

    normalized = normalize_permissions(perms)
    lines = []
    for category, actions in normalized.items():
        granted = [ACTION_LABELS.get(a, a) for a, flag in actions.items() if flag]
        if granted:
            lines.append(f"{CATEGORY_LABELS[category]}: {', '.join(granted)}")
    return "\n".join(lines) if lines else "Aucune permission"


def denied_message(category: str, action: str) -> str:
    action_label = ACTION_LABELS.get(action, action).lower()
    category_label = CATEGORY_LABELS.get(category, category)
    return f"🔒 Permission refusée - Vous n'avez pas la permission de {action_label} ({category_label})"


def check_permission(principal, category: str, action: str):
    """
    Raise unless `principal` holds category.action.

    401 when there is no principal, 403 with a generic message when the
    category is missing entirely, 403 naming the action otherwise.
    Uses the permissions exactly as stored (not normalized).
    """
    if principal is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=AUTH_REQUIRED_MESSAGE)

    perms = principal.permissions if isinstance(principal.permissions, dict) else {}
    category_perms = perms.get(category)
    if not isinstance(category_perms, dict):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=NO_PERMISSIONS_MESSAGE)

    if category_perms.get(action) is not True:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=denied_message(category, action))

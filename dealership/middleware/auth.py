"""JWT authentication for the admin console."""

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from dealership.config import settings
from dealership.database import get_db
from dealership.models.admin_user import AdminUser
from dealership.utils.logger import get_logger

logger = get_logger(__name__)

INVALID_SESSION_MESSAGE = "❌ Session expirée ou invalide"


@dataclass
class AdminPrincipal:
    """The authenticated admin, passed explicitly to every gated handler."""
    id: int
    username: str
    unique_id: Optional[str] = None
    permissions: dict = field(default_factory=dict)
    ip: Optional[str] = None
    user_agent: Optional[str] = None


def verify_access_key(given: str, stored: str) -> bool:
    """Plaintext comparison (keys are not hashed), done in constant time."""
    return secrets.compare_digest(given.encode("utf-8"), (stored or "").encode("utf-8"))


def create_access_token(user: AdminUser) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "userId": user.id,
        "username": user.username,
        "permissions": user.permissions or {},
        "authenticated": True,
        "exp": expire,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=INVALID_SESSION_MESSAGE)
    if payload.get("authenticated") is not True or not isinstance(payload.get("userId"), int):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=INVALID_SESSION_MESSAGE)
    return payload


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def extract_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[len("Bearer "):].strip() or None
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


def get_current_admin(request: Request, db: Session = Depends(get_db)) -> AdminPrincipal:
    """
    Verify the session token, then re-read the user so that a deleted
    account is rejected even with an unexpired token.
    """
    token = extract_token(request)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="❌ Authentification requise")

    payload = decode_token(token)
    user = db.query(AdminUser).filter(AdminUser.id == payload["userId"]).first()
    if not user:
        logger.warning(f"[AUTH] Token for deleted user id={payload['userId']} rejected")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="❌ Votre compte n'existe plus")

    return AdminPrincipal(
        id=user.id,
        username=user.username,
        unique_id=user.unique_id,
        permissions=user.permissions if isinstance(user.permissions, dict) else {},
        ip=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


def get_optional_admin(request: Request, db: Session = Depends(get_db)) -> Optional[AdminPrincipal]:
    """Like get_current_admin, but anonymous or invalid sessions yield None."""
    if not extract_token(request):
        return None
    try:
        return get_current_admin(request, db)
    except HTTPException:
        return None

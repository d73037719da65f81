# dealership/routers/auth.py
"""Admin console session: login, current profile, logout."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from dealership.config import settings
from dealership.database import get_db
from dealership.middleware.auth import AdminPrincipal, create_access_token, get_current_admin
from dealership.middleware.rate_limit import limiter
from dealership.permissions import has_any_permission, normalize_permissions
from dealership.schemas.user import LoginRequest, LoginResponse, SessionUser
from dealership.services.user_service import authenticate

router = APIRouter()


@router.post("/auth/login", response_model=LoginResponse, summary="Admin login")
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def login(request: Request, response: Response, body: LoginRequest, db: Session = Depends(get_db)):
    """Returns the session token and also sets it as an httpOnly cookie."""
    user = authenticate(db, body.username, body.access_key)
    token = create_access_token(user)
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
    )
    return {
        "token": token,
        "user": {
            "id": user.id,
            "username": user.username,
            "unique_id": user.unique_id,
            "permissions": normalize_permissions(user.permissions),
        },
    }


@router.get("/auth/me", response_model=SessionUser, summary="Current admin profile")
def me(admin: AdminPrincipal = Depends(get_current_admin)):
    permissions = normalize_permissions(admin.permissions)
    if not has_any_permission(permissions):
        raise HTTPException(
            status_code=403,
            detail="❌ Votre accès a été révoqué. Vous n'avez plus de permissions",
        )
    return {
        "id": admin.id,
        "username": admin.username,
        "unique_id": admin.unique_id,
        "permissions": permissions,
    }


@router.post("/auth/logout", summary="Clear the session cookie")
def logout(response: Response):
    response.delete_cookie(settings.AUTH_COOKIE_NAME, httponly=True, samesite="strict")
    return {"message": "✅ Déconnexion réussie"}

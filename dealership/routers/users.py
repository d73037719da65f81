# dealership/routers/users.py
"""Admin accounts. Responses never include the access key."""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from dealership.config import settings
from dealership.database import get_db
from dealership.middleware.auth import AdminPrincipal
from dealership.middleware.permissions import require_permission
from dealership.middleware.rate_limit import limiter
from dealership.schemas.user import UserCreate, UserOut, UserUpdate
from dealership.services import user_service

router = APIRouter()


@router.get("/users", response_model=list[UserOut], summary="List admin users")
def list_users(page: int = 1, limit: int = user_service.DEFAULT_PAGE_SIZE, search: Optional[str] = None,
               db: Session = Depends(get_db),
               admin: AdminPrincipal = Depends(require_permission("users", "view"))):
    return [user_service.user_view(u) for u in user_service.list_users(db, page, limit, search)]


@router.get("/users/{user_id}", response_model=UserOut, summary="Admin user details")
def get_user(user_id: int, db: Session = Depends(get_db),
             admin: AdminPrincipal = Depends(require_permission("users", "view"))):
    return user_service.user_view(user_service.get_user(db, user_id))


@router.post("/users", response_model=UserOut, status_code=201, summary="Create an admin user")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def create_user(request: Request, body: UserCreate, db: Session = Depends(get_db),
                admin: AdminPrincipal = Depends(require_permission("users", "create"))):
    return user_service.user_view(user_service.create_user(db, body, admin))


@router.put("/users/{user_id}", response_model=UserOut, summary="Update an admin user")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def update_user(request: Request, user_id: int, body: UserUpdate, db: Session = Depends(get_db),
                admin: AdminPrincipal = Depends(require_permission("users", "update"))):
    return user_service.user_view(user_service.update_user(db, user_id, body, admin))


@router.delete("/users/{user_id}", summary="Delete an admin user")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def delete_user(request: Request, user_id: int, db: Session = Depends(get_db),
                admin: AdminPrincipal = Depends(require_permission("users", "delete"))):
    return user_service.delete_user(db, user_id, admin)

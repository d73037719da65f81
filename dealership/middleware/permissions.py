"""Route-level permission dependencies."""

from fastapi import Depends

from dealership.middleware.auth import AdminPrincipal, get_current_admin
from dealership.permissions import check_permission


def require_permission(category: str, action: str):
    """
    Dependency factory: resolves the current admin and checks category.action
    before the endpoint body runs.

        @router.post("/vehicles")
        def create(..., admin: AdminPrincipal = Depends(require_permission("vehicles", "create"))):
    """
    def dependency(admin: AdminPrincipal = Depends(get_current_admin)) -> AdminPrincipal:
        check_permission(admin, category, action)
        return admin

    dependency.__name__ = f"require_{category}_{action}"
    return dependency

# app/core/rbac.py

from fastapi import Depends, HTTPException, status
from app.api.deps import get_current_profile
from app.models.user import UserProfile
from app.models.enums import ProfileRole

def AllowRoles(*allowed_roles):
    """
    Flexible RBAC:
    - Accepts ProfileRole values or raw strings ("male-warden", "male_warden")
    - Case-insensitive
    - Admin bypasses everything
    """

    def normalize(role) -> str:
        if isinstance(role, ProfileRole):
            role = role.value
        return str(role).lower().strip().replace("_", "-")

    normalized_allowed = {normalize(r) for r in allowed_roles}

    async def role_checker(current_user: UserProfile = Depends(get_current_profile)):
        user_role = normalize(current_user.role)

        # Admin bypass
        if user_role == ProfileRole.Admin.value:
            return current_user

        if user_role not in normalized_allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied for role '{user_role}'"
            )

        return current_user

    return role_checker

from fastapi import Request, HTTPException

from shop_auth.config import Settings
from shop_auth.services.otp_service import OtpManager
from shop_auth.storage.users import UserRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_users(request: Request) -> UserRepository:
    return request.app.state.users


def get_otp_manager(request: Request) -> OtpManager:
    return request.app.state.otp_manager


def get_current_user(request: Request) -> dict:
    """Extract current user from request state (set by JWT middleware)."""
    user = getattr(request.state, "current_user", None)
    if user is None:
        raise HTTPException(status_code=401, detail="Not authorized to access this route")
    return user


def require_role(*allowed_roles: str):
    """Returns a dependency that checks user role."""
    def checker(request: Request) -> dict:
        user = get_current_user(request)
        if user["role"] not in allowed_roles:
            raise HTTPException(
                status_code=403,
                detail=f"Requires one of roles: {', '.join(allowed_roles)}",
            )
        return user
    return checker

from fastapi import APIRouter, Depends, HTTPException

from shop_auth.config import Settings
from shop_auth.dependencies import get_current_user, get_settings, get_users, require_role
from shop_auth.models.auth import MessageResponse
from shop_auth.models.user import (
    UserUpdate, ProfileResponse, UserUpdatedResponse,
    PublicProfileResponse, UserListResponse, public_user, user_profile,
)
from shop_auth.services import user_service
from shop_auth.storage.users import UserRepository

router = APIRouter(prefix="/api/auth", tags=["Profile"])


@router.get("/me", response_model=ProfileResponse)
async def get_me(user: dict = Depends(get_current_user), cfg: Settings = Depends(get_settings)):
    return ProfileResponse(data=user_profile(user, cfg.public_base_url))


@router.put("/me", response_model=UserUpdatedResponse)
async def update_me(
    body: UserUpdate,
    user: dict = Depends(get_current_user),
    users: UserRepository = Depends(get_users),
    cfg: Settings = Depends(get_settings),
):
    update_data = body.model_dump(exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="Nothing to update")

    try:
        updated = user_service.update_user(users, user["id"], update_data)
    except user_service.UserConflict as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")

    return UserUpdatedResponse(user=user_profile(updated, cfg.public_base_url))


@router.delete("/me", response_model=MessageResponse)
async def delete_me(user: dict = Depends(get_current_user), users: UserRepository = Depends(get_users)):
    if not user_service.delete_user(users, user["id"]):
        raise HTTPException(status_code=404, detail="User not found")
    return MessageResponse(message="User profile deleted successfully")


@router.get("/profile/{user_id}", response_model=PublicProfileResponse)
async def get_profile_by_id(
    user_id: str,
    users: UserRepository = Depends(get_users),
    cfg: Settings = Depends(get_settings),
):
    """Public profile: limited fields only."""
    user = user_service.get_user_by_id(users, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return PublicProfileResponse(data=public_user(user, cfg.public_base_url))


@router.get("/users", response_model=UserListResponse)
async def list_users(
    _admin: dict = Depends(require_role("admin")),
    users: UserRepository = Depends(get_users),
    cfg: Settings = Depends(get_settings),
):
    return UserListResponse(users=[user_profile(u, cfg.public_base_url) for u in user_service.list_users(users)])

from pydantic import BaseModel, Field

from shop_auth.services.user_service import profile_photo_url


class UserPublic(BaseModel):
    id: str
    name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    profile_photo: str


class UserProfile(UserPublic):
    role: str
    phone_verified: bool = False
    created_at: str | None = None


class UserUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    email: str | None = Field(None, min_length=3, max_length=320)
    phone_number: str | None = Field(None, min_length=1, max_length=32)
    password: str | None = Field(None, min_length=1)
    profile_photo: str | None = None


class ProfileResponse(BaseModel):
    success: bool = True
    data: UserProfile


class UserUpdatedResponse(BaseModel):
    success: bool = True
    message: str = "Profile updated successfully"
    user: UserProfile


class PublicProfileResponse(BaseModel):
    success: bool = True
    data: UserPublic


class UserListResponse(BaseModel):
    success: bool = True
    users: list[UserProfile]


def _photo_url(row: dict, base_url: str | None) -> str:
    return profile_photo_url(row.get("profile_photo"), base_url)


def public_user(row: dict, base_url: str | None = None) -> UserPublic:
    return UserPublic(
        id=row["id"],
        name=row.get("name"),
        email=row.get("email"),
        phone_number=row.get("phone_number"),
        profile_photo=_photo_url(row, base_url),
    )


def user_profile(row: dict, base_url: str | None = None) -> UserProfile:
    return UserProfile(
        id=row["id"],
        name=row.get("name"),
        email=row.get("email"),
        phone_number=row.get("phone_number"),
        profile_photo=_photo_url(row, base_url),
        role=row["role"],
        phone_verified=row.get("phone_verified", False),
        created_at=row.get("created_at"),
    )

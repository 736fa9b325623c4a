from pydantic import BaseModel, Field

from shop_auth.models.user import UserPublic


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1)
    name: str | None = Field(None, max_length=200)
    phone_number: str | None = Field(None, max_length=32)
    profile_photo: str | None = None


class LoginRequest(BaseModel):
    # Any one of these identifies the account; '@' means email, otherwise phone
    identifier: str | None = None
    email: str | None = None
    phone_number: str | None = None
    phone: str | None = None
    password: str | None = None

    def resolved_identifier(self) -> str:
        raw = self.identifier or self.email or self.phone_number or self.phone
        return raw.strip() if raw else ""


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    expires_in: int
    user: UserPublic


class SendOtpRequest(BaseModel):
    phone_number: str = Field(..., min_length=1, max_length=32)


class OtpSentResponse(BaseModel):
    success: bool = True
    message: str = "OTP sent"
    delivered: bool
    expires_in: int
    otp: str | None = None


class VerifyOtpRequest(BaseModel):
    phone_number: str = Field(..., min_length=1, max_length=32)
    code: str | int


class MessageResponse(BaseModel):
    success: bool = True
    message: str

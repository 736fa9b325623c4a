import logging
from fastapi import APIRouter, Depends, HTTPException

from shop_auth.config import Settings
from shop_auth.dependencies import get_otp_manager, get_settings, get_users
from shop_auth.models.auth import (
    RegisterRequest, LoginRequest, AuthResponse,
    SendOtpRequest, OtpSentResponse, VerifyOtpRequest, MessageResponse,
)
from shop_auth.models.user import public_user
from shop_auth.services import jwt_service, user_service
from shop_auth.services.otp_service import OtpError, OtpManager
from shop_auth.storage.users import UserRepository

logger = logging.getLogger("shop-auth")

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _auth_response(user: dict, message: str, cfg: Settings) -> AuthResponse:
    token, expires_in = jwt_service.create_access_token(user["id"], user["role"], cfg)
    return AuthResponse(
        message=message,
        token=token,
        expires_in=expires_in,
        user=public_user(user, cfg.public_base_url),
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    req: RegisterRequest,
    users: UserRepository = Depends(get_users),
    cfg: Settings = Depends(get_settings),
):
    """Create an account and return a token for it."""
    if user_service.get_user_by_email(users, req.email):
        raise HTTPException(status_code=409, detail="User already exists")
    if req.phone_number and user_service.get_user_by_phone(users, req.phone_number):
        raise HTTPException(status_code=409, detail="Phone number already registered")

    try:
        user = user_service.create_user(
            users,
            email=req.email,
            password=req.password,
            name=req.name,
            phone_number=req.phone_number,
            profile_photo=req.profile_photo,
        )
    except user_service.UserConflict as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info("Registered user %s", user["id"])
    return _auth_response(user, "User registered successfully", cfg)


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    users: UserRepository = Depends(get_users),
    cfg: Settings = Depends(get_settings),
):
    """Password login by email or phone number."""
    identifier = req.resolved_identifier()
    if not identifier or not req.password:
        raise HTTPException(status_code=400, detail="Please provide an email or phone number and password")

    user = user_service.authenticate(users, identifier, req.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return _auth_response(user, "Login successful", cfg)


@router.post("/admin/login", response_model=AuthResponse)
async def admin_login(
    req: LoginRequest,
    users: UserRepository = Depends(get_users),
    cfg: Settings = Depends(get_settings),
):
    """Same as /login but only admins get a token."""
    identifier = req.resolved_identifier()
    if not identifier or not req.password:
        raise HTTPException(status_code=400, detail="Please provide an email or phone number and password")

    user = user_service.authenticate(users, identifier, req.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if user["role"] != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")

    return _auth_response(user, "Admin login successful", cfg)


# Plain def: a slow SMS send runs in the threadpool instead of the event loop
@router.post("/send-otp", response_model=OtpSentResponse, response_model_exclude_none=True)
def send_otp(req: SendOtpRequest, otp: OtpManager = Depends(get_otp_manager)):
    """Issue an OTP for a phone number. Delivery is best-effort."""
    phone = user_service.normalize_phone(req.phone_number)
    if not phone:
        raise HTTPException(status_code=400, detail="phone_number is required")

    result = otp.request_code(phone)
    return OtpSentResponse(
        message="OTP sent" if result.delivered else "OTP generated",
        delivered=result.delivered,
        expires_in=result.expires_in,
        otp=result.code,
    )


@router.post("/verify-otp", response_model=MessageResponse)
async def verify_otp(
    req: VerifyOtpRequest,
    otp: OtpManager = Depends(get_otp_manager),
    users: UserRepository = Depends(get_users),
):
    """Check an OTP. The code is consumed on success."""
    phone = user_service.normalize_phone(req.phone_number)
    code = str(req.code).strip()
    if not phone or not code:
        raise HTTPException(status_code=400, detail="phone_number and code are required")

    try:
        otp.check_code(phone, code)
    except OtpError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if user_service.set_phone_verified(users, phone):
        logger.info("Phone %s verified", phone)

    return MessageResponse(message="OTP verified")

from fastapi import APIRouter, Depends

from shop_auth.dependencies import get_otp_manager
from shop_auth.models.common import HealthResponse
from shop_auth.services.otp_service import OtpManager

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health(otp: OtpManager = Depends(get_otp_manager)):
    return HealthResponse(status="ok", pending_otps=len(otp.store))

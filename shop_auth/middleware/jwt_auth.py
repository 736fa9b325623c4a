import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shop_auth.services.jwt_service import verify_access_token

logger = logging.getLogger("shop-auth")


def _error(status: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"success": False, "detail": detail})


# Paths that don't require JWT
PUBLIC_PATHS = {
    "/",
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
}

PUBLIC_PREFIXES = [
    "/api/auth/register",
    "/api/auth/login",
    "/api/auth/admin/login",
    "/api/auth/send-otp",
    "/api/auth/verify-otp",
    "/api/auth/profile/",  # public profile by id
]


def extract_token(auth_header: str) -> str | None:
    """Accept "Bearer <token>" as well as a bare token."""
    auth_header = auth_header.strip()
    if not auth_header:
        return None
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return auth_header


class JwtAuthMiddleware(BaseHTTPMiddleware):
    """Resolve JWT token -> user context on protected endpoints."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if path in PUBLIC_PATHS:
            return await call_next(request)

        for prefix in PUBLIC_PREFIXES:
            if path.startswith(prefix):
                return await call_next(request)

        # Require JWT for all other /api/* paths
        if not path.startswith("/api/"):
            return await call_next(request)

        token = extract_token(request.headers.get("Authorization", ""))
        if not token:
            return _error(401, "Not authorized to access this route")

        try:
            payload = verify_access_token(token, request.app.state.settings)
        except ValueError as e:
            logger.debug("Rejected token on %s: %s", path, e)
            return _error(401, "Not authorized to access this route")

        user = request.app.state.users.get(payload["sub"])
        if not user:
            return _error(404, "No user found with this id")

        request.state.current_user = user
        request.state.jwt_payload = payload

        return await call_next(request)

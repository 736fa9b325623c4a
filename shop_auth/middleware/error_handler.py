import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("shop-auth")


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last-resort handler: any exception a route lets escape becomes a JSON 500."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
            return JSONResponse(
                status_code=500,
                content={"success": False, "error": "internal_error", "message": "Server error"},
            )

import logging
from datetime import datetime, timezone, timedelta

import jwt

from shop_auth.config import Settings, settings

logger = logging.getLogger("shop-auth")


def create_access_token(user_id: str, role: str, cfg: Settings | None = None) -> tuple[str, int]:
    """Create a JWT access token. Returns (token, expires_in_seconds)."""
    cfg = cfg or settings
    expires_delta = timedelta(minutes=cfg.jwt_access_token_expire_minutes)
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "role": role,
        "type": "access",
        "exp": now + expires_delta,
        "iat": now,
    }
    token = jwt.encode(payload, cfg.jwt_secret, algorithm=cfg.jwt_algorithm)
    return token, int(expires_delta.total_seconds())


def verify_access_token(token: str, cfg: Settings | None = None) -> dict:
    """Verify and decode an access token. Returns payload dict."""
    cfg = cfg or settings
    try:
        payload = jwt.decode(token, cfg.jwt_secret, algorithms=[cfg.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise ValueError("Token expired")
    except jwt.InvalidTokenError as e:
        raise ValueError(f"Invalid token: {e}")

    if payload.get("type") != "access":
        raise ValueError("Not an access token")
    if not payload.get("sub"):
        raise ValueError("Token has no subject")

    return payload

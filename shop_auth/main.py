import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shop_auth.config import Settings, settings
from shop_auth.middleware.error_handler import ErrorHandlerMiddleware
from shop_auth.middleware.jwt_auth import JwtAuthMiddleware
from shop_auth.providers import build_transport
from shop_auth.routers import health, auth, profile
from shop_auth.scheduler import start_sweeper, stop_sweeper
from shop_auth.services import user_service
from shop_auth.services.otp_service import OtpManager
from shop_auth.storage.otp_store import OtpStore
from shop_auth.storage.users import UserRepository

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("shop-auth")


def build_otp_manager(cfg: Settings) -> OtpManager:
    transport = build_transport(cfg)
    if transport is not None and not transport.is_configured:
        logger.warning("OTP provider %r is not fully configured; codes will only be logged", cfg.otp_provider)
    if cfg.otp_debug_echo:
        logger.warning("OTP debug echo is ON: codes are returned in API responses")
    return OtpManager(
        OtpStore(),
        transport,
        length=cfg.otp_length,
        ttl=timedelta(minutes=cfg.otp_expire_minutes),
        max_attempts=cfg.otp_max_attempts,
        debug_echo=cfg.otp_debug_echo,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg: Settings = app.state.settings
    logger.info("Shop-Auth starting on %s:%s", cfg.host, cfg.port)

    user_service.seed_admin(app.state.users, cfg.admin_email, cfg.admin_password, cfg.admin_phone)

    sweeper = None
    if cfg.otp_sweep_interval_seconds > 0:
        sweeper = start_sweeper(app.state.otp_manager, cfg.otp_sweep_interval_seconds)
    yield
    stop_sweeper(sweeper)
    transport = app.state.otp_manager.transport
    if transport is not None and hasattr(transport, "close"):
        transport.close()
    logger.info("Shop-Auth shutting down")


def create_app(
    cfg: Settings | None = None,
    otp_manager: OtpManager | None = None,
    users: UserRepository | None = None,
) -> FastAPI:
    cfg = cfg or settings

    app = FastAPI(
        title="Shop Auth Service",
        version="0.1.0",
        description="Accounts, JWT auth and phone OTP verification for the shop backend",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.otp_manager = otp_manager or build_otp_manager(cfg)
    app.state.users = users if users is not None else UserRepository()

    # Middleware (order matters: last added = outermost)
    app.add_middleware(JwtAuthMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(profile.router)

    @app.get("/")
    async def root():
        return {"message": "Welcome to the API"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("shop_auth.main:app", host=settings.host, port=settings.port, log_level=settings.log_level)

import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient

from shop_auth.config import Settings
from shop_auth.main import create_app
from shop_auth.providers.base import OtpTransport
from shop_auth.services.otp_service import OtpManager
from shop_auth.storage.otp_store import OtpStore
from shop_auth.storage.users import UserRepository


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeTransport(OtpTransport):
    """Records messages instead of sending them."""

    def __init__(self, configured: bool = True, result: bool = True, error: Exception | None = None):
        self.configured = configured
        self.result = result
        self.error = error
        self.sent: list[tuple[str, str]] = []

    @property
    def channel(self) -> str:
        return "fake"

    @property
    def is_configured(self) -> bool:
        return self.configured

    def send(self, to: str, body: str) -> bool:
        self.sent.append((to, body))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def manager(clock, transport):
    return OtpManager(OtpStore(), transport, clock=clock, debug_echo=True)


@pytest.fixture
def test_settings():
    return Settings(
        otp_provider="console",
        otp_debug_echo=True,
        otp_sweep_interval_seconds=0,
        admin_email="",
        admin_password="",
    )


@pytest.fixture
def users():
    return UserRepository()


@pytest.fixture
def app(test_settings, clock, users):
    otp_manager = OtpManager(OtpStore(), None, clock=clock, max_attempts=3, debug_echo=True)
    return create_app(test_settings, otp_manager=otp_manager, users=users)


@pytest.fixture
def client(app):
    return TestClient(app)

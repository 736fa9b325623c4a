"""
OTP issuance and verification.

An OtpManager owns one OtpStore and, optionally, one transport. Codes are
always recorded before delivery is attempted; delivery is best-effort and a
failed or skipped send only downgrades the result to ``delivered=False``.
"""
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from shop_auth.providers.base import OtpTransport
from shop_auth.storage.otp_store import OtpRecord, OtpStore

logger = logging.getLogger("shop-auth")

DEFAULT_LENGTH = 6
DEFAULT_TTL = timedelta(minutes=5)
DEFAULT_TEMPLATE = "Your verification code is {{code}}. It expires in {{ttl-minutes}} minutes."
MAX_LENGTH = 12


class OtpError(ValueError):
    message = "OTP verification failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class OtpNotFound(OtpError):
    message = "No OTP found for this number"


class OtpExpired(OtpError):
    message = "OTP expired"


class OtpMismatch(OtpError):
    message = "Invalid OTP"

    def __init__(self, message: str | None = None, remaining: int | None = None):
        self.remaining = remaining
        if message is None and remaining is not None:
            message = f"Invalid OTP. {remaining} attempts remaining."
        super().__init__(message)


class OtpAttemptsExceeded(OtpMismatch):
    message = "Too many attempts. Request a new code."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message, remaining=0)


@dataclass
class OtpOptions:
    length: int | None = None
    ttl: timedelta | None = None
    template: str | None = None
    debug_echo: bool | None = None

    def __post_init__(self):
        if self.length is not None and not 1 <= self.length <= MAX_LENGTH:
            raise ValueError(f"OTP length must be between 1 and {MAX_LENGTH}")
        if self.ttl is not None and self.ttl <= timedelta(0):
            raise ValueError("OTP ttl must be positive")
        if self.template is not None and "{{code}}" not in self.template:
            raise ValueError("OTP template must contain a {{code}} placeholder")


@dataclass
class OtpRequestResult:
    delivered: bool
    expires_in: int
    code: str | None = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_code(length: int = DEFAULT_LENGTH) -> str:
    """Random numeric code in [1, 10**length - 1], zero-padded. Never all zeros."""
    value = secrets.randbelow(10 ** length - 1) + 1
    return str(value).zfill(length)


def ttl_minutes(ttl: timedelta) -> int:
    return int(ttl.total_seconds() / 60 + 0.5)


def render_message(template: str, code: str, ttl: timedelta) -> str:
    return template.replace("{{code}}", code).replace("{{ttl-minutes}}", str(ttl_minutes(ttl)))


class OtpManager:
    def __init__(
        self,
        store: OtpStore | None = None,
        transport: OtpTransport | None = None,
        *,
        length: int = DEFAULT_LENGTH,
        ttl: timedelta = DEFAULT_TTL,
        max_attempts: int | None = None,
        debug_echo: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store if store is not None else OtpStore()
        self._transport = transport
        self._defaults = OtpOptions(length=length, ttl=ttl)
        self._max_attempts = max_attempts or None
        self._debug_echo = debug_echo
        self._clock = clock

    @property
    def store(self) -> OtpStore:
        return self._store

    @property
    def transport(self) -> OtpTransport | None:
        return self._transport

    def request_code(self, phone_number: str, options: OtpOptions | None = None) -> OtpRequestResult:
        """Issue a new code for phone_number, replacing any pending one, and try to deliver it."""
        options = options or OtpOptions()
        length = options.length or self._defaults.length
        ttl = options.ttl or self._defaults.ttl

        code = generate_code(length)
        expires_at = self._clock() + ttl
        self._store.put(phone_number, OtpRecord(code=code, expires_at=expires_at))

        body = render_message(options.template or DEFAULT_TEMPLATE, code, ttl)
        delivered = self._deliver(phone_number, body)
        if not delivered:
            logger.info("OTP for %s: %s", phone_number, code)

        echo = self._debug_echo if options.debug_echo is None else options.debug_echo
        return OtpRequestResult(
            delivered=delivered,
            expires_in=int(ttl.total_seconds()),
            code=code if echo else None,
        )

    def check_code(self, phone_number: str, submitted_code) -> None:
        """Consume the pending code for phone_number. Raises an OtpError subclass on failure."""
        submitted = str(submitted_code).strip()

        with self._store.lock:
            record = self._store.get(phone_number)
            if record is None:
                raise OtpNotFound()

            if record.is_expired(self._clock()):
                self._store.delete(phone_number)
                raise OtpExpired()

            if record.code != submitted:
                record.attempts += 1
                if self._max_attempts is None:
                    raise OtpMismatch()
                if record.attempts >= self._max_attempts:
                    self._store.delete(phone_number)
                    logger.warning("OTP for %s locked out after %d attempts", phone_number, record.attempts)
                    raise OtpAttemptsExceeded()
                raise OtpMismatch(remaining=self._max_attempts - record.attempts)

            self._store.delete(phone_number)

    def purge_expired(self) -> int:
        """Drop every record past its expiry. Returns how many were removed."""
        return self._store.purge_expired(self._clock())

    def _deliver(self, phone_number: str, body: str) -> bool:
        transport = self._transport
        if transport is None or not transport.is_configured:
            return False

        try:
            sent = transport.send(phone_number, body)
        except Exception as e:
            logger.error("OTP send via %s failed for %s: %s", transport.channel, phone_number, e)
            return False

        if not sent:
            logger.warning("OTP send via %s reported failure for %s", transport.channel, phone_number)
        return bool(sent)

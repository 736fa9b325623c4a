from abc import ABC, abstractmethod


class TransportUnavailable(Exception):
    """Transport has no (or incomplete) configuration."""


class TransportError(Exception):
    """Transport is configured but the send attempt failed."""


class OtpTransport(ABC):
    """Abstract base class for OTP message transports."""

    @property
    @abstractmethod
    def channel(self) -> str:
        """Transport channel name (sms, ...)."""
        ...

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """True when every credential the transport needs is present."""
        ...

    @abstractmethod
    def send(self, to: str, body: str) -> bool:
        """Deliver body to the phone number. Returns True on success."""
        ...

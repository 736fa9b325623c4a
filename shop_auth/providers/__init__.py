from shop_auth.providers.base import OtpTransport
from shop_auth.providers.twilio import TwilioSmsTransport


def build_transport(settings) -> OtpTransport | None:
    """Pick the OTP transport for the configured provider. None means log-only."""
    if settings.otp_provider == "twilio":
        return TwilioSmsTransport(
            account_sid=settings.twilio_account_sid,
            auth_token=settings.twilio_auth_token,
            from_number=settings.twilio_from_number,
            timeout=settings.twilio_timeout_seconds,
        )
    return None

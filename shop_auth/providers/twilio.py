import logging

import httpx

from shop_auth.providers.base import OtpTransport, TransportError, TransportUnavailable

logger = logging.getLogger("shop-auth")

TWILIO_API_URL = "https://api.twilio.com/2010-04-01"


class TwilioSmsTransport(OtpTransport):
    """SMS transport using the Twilio Messages REST API."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._from_number = from_number
        self._client = client or httpx.Client(timeout=timeout)

    @property
    def channel(self) -> str:
        return "sms"

    @property
    def is_configured(self) -> bool:
        return bool(self._account_sid and self._auth_token and self._from_number)

    def send(self, to: str, body: str) -> bool:
        if not self.is_configured:
            raise TransportUnavailable("Twilio not configured")

        url = f"{TWILIO_API_URL}/Accounts/{self._account_sid}/Messages.json"
        try:
            resp = self._client.post(
                url,
                data={"To": to, "From": self._from_number, "Body": body},
                auth=(self._account_sid, self._auth_token),
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(f"Twilio rejected message: {e.response.status_code} {e.response.text}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Twilio request failed: {e}") from e

        logger.info("SMS sent to %s via Twilio (status=%s)", to, resp.status_code)
        return True

    def close(self) -> None:
        self._client.close()

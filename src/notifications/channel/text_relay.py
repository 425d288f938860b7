"""Text relay adapter — sends alerts through an HTTP WhatsApp/SMS gateway.

The gateway takes the phone number, the text and an API key as query
parameters and answers with a plain-text status page (CallMeBot style).
"""

import requests
import structlog

from notifications.channel.port import AlertChannel, ChannelDeliveryError

logger = structlog.get_logger(__name__)


class TextRelayChannel(AlertChannel):
    message_style = "text"

    def __init__(
        self,
        url: str,
        phone: str,
        api_key: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.phone = phone
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, message: str, subject: str | None = None) -> dict:
        params = {"phone": self.phone, "text": message, "apikey": self.api_key}

        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise ChannelDeliveryError(f"Relay request failed: {exc}", channel="relay") from exc

        logger.debug("Relay accepted alert", status_code=response.status_code, response=response.text[:200])
        return {"message_id": response.headers.get("X-Request-Id"), "status": "sent"}

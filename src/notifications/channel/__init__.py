"""Alert channel adapters — pluggable low-stock notification transports.

``build_channels`` turns ``AlertSettings`` into the explicit
``{channel_name: adapter}`` mapping the dispatcher is constructed with.
Real adapters are used when their credentials are configured; otherwise a
fake adapter stands in so local runs and tests never reach the network.
"""

from enum import Enum

import structlog

from notifications.channel.fake import FakeAlertChannel
from notifications.channel.port import AlertChannel, ChannelDeliveryError
from notifications.channel.smtp_email import SMTPEmailChannel
from notifications.channel.text_relay import TextRelayChannel

logger = structlog.get_logger(__name__)

__all__ = [
    "AlertChannel",
    "AlertChannelType",
    "ChannelDeliveryError",
    "FakeAlertChannel",
    "SMTPEmailChannel",
    "TextRelayChannel",
    "build_channels",
]


class AlertChannelType(Enum):
    EMAIL = "email"
    RELAY = "relay"


def build_channels(settings) -> dict[str, AlertChannel]:
    """Build one adapter per channel type from settings."""
    channels: dict[str, AlertChannel] = {}

    if settings.email_configured:
        channels[AlertChannelType.EMAIL.value] = SMTPEmailChannel(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.EMAIL_USER,
            password=settings.EMAIL_PASS,
            recipient=settings.ALERT_EMAIL,
            use_tls=settings.SMTP_USE_TLS,
            timeout=settings.CHANNEL_TIMEOUT,
        )
    else:
        logger.warning("Email alert credentials missing, using fake email channel")
        channels[AlertChannelType.EMAIL.value] = FakeAlertChannel(
            message_style="email", name=AlertChannelType.EMAIL.value
        )

    if settings.relay_configured:
        channels[AlertChannelType.RELAY.value] = TextRelayChannel(
            url=settings.RELAY_URL,
            phone=settings.ALERT_PHONE,
            api_key=settings.RELAY_API_KEY,
            timeout=settings.CHANNEL_TIMEOUT,
        )
    else:
        logger.warning("Relay alert credentials missing, using fake relay channel")
        channels[AlertChannelType.RELAY.value] = FakeAlertChannel(
            message_style="text", name=AlertChannelType.RELAY.value
        )

    return channels

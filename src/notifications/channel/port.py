"""Alert channel port — abstract interface for outbound low-stock alerts."""

from abc import ABC, abstractmethod


class AlertChannel(ABC):
    """Abstract interface for alert dispatch adapters.

    The dispatcher composes the full message; adapters only deliver it.
    ``message_style`` tells the template which rendering the channel wants:
    "email" (subject plus multi-line body) or "text" (one short line).
    """

    message_style: str = "text"

    @abstractmethod
    def send(self, message: str, subject: str | None = None) -> dict:
        """Deliver one alert.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...


class ChannelDeliveryError(Exception):
    """A single channel failed to deliver an alert.

    Raised by adapters on transport errors. The dispatcher records it against
    the channel and carries on with the others.
    """

    code: str = "channel_delivery_failed"

    def __init__(self, message: str | None = None, channel: str | None = None) -> None:
        if message is None:
            message = "Alert delivery failed."
        self.channel = channel
        super().__init__(message)

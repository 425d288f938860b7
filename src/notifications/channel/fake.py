"""Fake alert adapter — records sent alerts for testing and local runs."""

import threading
from uuid import uuid4

from notifications.channel.port import AlertChannel, ChannelDeliveryError


class FakeAlertChannel(AlertChannel):
    """Adapter that records messages in memory for test assertions."""

    def __init__(self, message_style: str = "text", name: str = "fake"):
        self.message_style = message_style
        self.name = name
        self.sent_messages: list[dict] = []
        self.attempts = 0
        self.should_succeed = True
        self.raise_on_failure = False
        self.failure_reason = "Alert delivery failed"
        self.delay = None
        self._lock = threading.Lock()

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Alert delivery failed",
        raise_on_failure: bool = False,
        delay: threading.Event | None = None,
    ):
        """Configure the fake adapter behavior for testing.

        ``delay`` is an event the adapter waits on before delivering, which
        lets tests hold a delivery in flight.
        """
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.raise_on_failure = raise_on_failure
        self.delay = delay

    def send(self, message: str, subject: str | None = None) -> dict:
        with self._lock:
            self.attempts += 1

        if self.delay is not None:
            self.delay.wait(timeout=5)

        if not self.should_succeed:
            if self.raise_on_failure:
                raise ChannelDeliveryError(self.failure_reason)
            return {
                "message_id": None,
                "status": "failed",
                "error": self.failure_reason,
            }

        message_id = f"{self.name}-{uuid4().hex[:12]}"
        with self._lock:
            self.sent_messages.append(
                {
                    "message_id": message_id,
                    "subject": subject,
                    "message": message,
                }
            )

        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        """Clear sent messages (useful between tests)."""
        with self._lock:
            self.sent_messages.clear()
            self.attempts = 0
        self.should_succeed = True
        self.raise_on_failure = False
        self.failure_reason = "Alert delivery failed"
        self.delay = None

"""Low stock alert dispatcher — fans one alert out to every channel.

The dispatcher is built from an explicit ``DispatcherConfig`` listing its
channels; it holds no module-level transports. ``dispatch`` renders one
message per channel, submits one delivery job per channel to a thread pool
and returns straight away. Each job makes a single attempt. A failed or
raising channel is logged and reported in its own ``DeliveryResult``; it
never affects the other channels or the caller.
"""

import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum

import structlog

from notifications.channel import build_channels
from notifications.channel.port import AlertChannel
from notifications.config import AlertSettings
from notifications.templates import LowStockAlertTemplate

logger = structlog.get_logger(__name__)


class DeliveryStatus(Enum):
    SENT = "sent"
    FAILED = "failed"


@dataclass(frozen=True)
class DeliveryResult:
    channel: str
    status: str
    message_id: str | None = None
    error: str | None = None
    elapsed: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status == DeliveryStatus.SENT.value


@dataclass
class DispatcherConfig:
    channels: dict[str, AlertChannel] = field(default_factory=dict)
    timeout: float = 10.0  # Per attempt; enforced by each transport
    max_workers: int = 4

    @classmethod
    def from_settings(cls, settings: AlertSettings | None = None) -> "DispatcherConfig":
        settings = settings or AlertSettings()
        return cls(
            channels=build_channels(settings),
            timeout=settings.CHANNEL_TIMEOUT,
            max_workers=settings.DISPATCH_WORKERS,
        )


class AlertDispatcher:
    """Delivers low stock alerts through every configured channel."""

    def __init__(self, config: DispatcherConfig):
        self.config = config
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, config.max_workers),
            thread_name_prefix="alert-dispatch",
        )
        self._closed = False

    @property
    def channels(self) -> dict[str, AlertChannel]:
        return self.config.channels

    def dispatch(self, record) -> list[Future]:
        """Schedule one delivery per channel and return their futures.

        The futures resolve to ``DeliveryResult`` and never raise. Callers
        are free to ignore them.
        """
        if self._closed:
            logger.warning("Dispatcher is shut down, alert dropped", stock_record_id=str(record.id))
            return []

        context = LowStockAlertTemplate.context_for(record)
        futures = []

        for name, channel in self.config.channels.items():
            rendered = LowStockAlertTemplate.render(context, style=channel.message_style)
            try:
                futures.append(
                    self._executor.submit(
                        self._deliver,
                        name,
                        channel,
                        rendered["body"],
                        rendered.get("subject"),
                        context,
                    )
                )
            except RuntimeError:
                # Pool shut down between the check above and submit
                logger.warning("Alert not scheduled, dispatcher is shutting down", channel=name, **context)

        logger.info(
            "Low stock alert dispatched",
            channels=list(self.config.channels),
            **context,
        )
        return futures

    def _deliver(self, name, channel, body, subject, context) -> DeliveryResult:
        started = time.monotonic()
        try:
            outcome = channel.send(body, subject=subject) or {}
        except Exception as exc:
            result = DeliveryResult(
                channel=name,
                status=DeliveryStatus.FAILED.value,
                error=str(exc) or exc.__class__.__name__,
                elapsed=time.monotonic() - started,
            )
            logger.error(
                "Alert delivery failed",
                channel=name,
                error=result.error,
                error_type=exc.__class__.__name__,
                **context,
            )
            return result

        if outcome.get("status") == DeliveryStatus.SENT.value:
            result = DeliveryResult(
                channel=name,
                status=DeliveryStatus.SENT.value,
                message_id=outcome.get("message_id"),
                elapsed=time.monotonic() - started,
            )
            logger.info("Alert delivered", channel=name, message_id=result.message_id, **context)
        else:
            result = DeliveryResult(
                channel=name,
                status=DeliveryStatus.FAILED.value,
                error=outcome.get("error", "Unknown dispatch error"),
                elapsed=time.monotonic() - started,
            )
            logger.error("Alert delivery failed", channel=name, error=result.error, **context)

        if result.elapsed > self.config.timeout:
            logger.warning(
                "Alert delivery exceeded channel timeout",
                channel=name,
                elapsed=round(result.elapsed, 3),
                timeout=self.config.timeout,
            )
        return result

    def shutdown(self, wait: bool = True) -> None:
        self._closed = True
        self._executor.shutdown(wait=wait)


def build_dispatcher(settings: AlertSettings | None = None) -> AlertDispatcher:
    """Create a dispatcher wired from environment settings."""
    return AlertDispatcher(DispatcherConfig.from_settings(settings))

"""SMTP email adapter — sends alerts through an authenticated mail server."""

import smtplib
from email.message import EmailMessage
from email.utils import make_msgid

import structlog

from notifications.channel.port import AlertChannel, ChannelDeliveryError

logger = structlog.get_logger(__name__)


class SMTPEmailChannel(AlertChannel):
    """Email adapter over SMTP with STARTTLS and login."""

    message_style = "email"

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        recipient: str,
        sender: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
        smtp_factory=smtplib.SMTP,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.recipient = recipient
        self.sender = sender or username
        self.use_tls = use_tls
        self.timeout = timeout
        self._smtp_factory = smtp_factory

    def _build(self, message: str, subject: str | None) -> EmailMessage:
        email = EmailMessage()
        email["From"] = self.sender
        email["To"] = self.recipient
        email["Subject"] = subject or "Low Stock Alert"
        email["Message-ID"] = make_msgid(domain=self.host)
        email.set_content(message)
        return email

    def send(self, message: str, subject: str | None = None) -> dict:
        email = self._build(message, subject)

        try:
            with self._smtp_factory(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                smtp.login(self.username, self.password)
                refused = smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as exc:
            raise ChannelDeliveryError(f"SMTP delivery failed: {exc}", channel="email") from exc

        if refused:
            return {
                "message_id": email["Message-ID"],
                "status": "failed",
                "error": f"Recipients refused: {', '.join(sorted(refused))}",
            }

        logger.debug("Alert email handed to SMTP server", recipient=self.recipient, host=self.host)
        return {"message_id": email["Message-ID"], "status": "sent"}

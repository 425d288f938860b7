"""Alerting configuration via environment variables.

Every setting can be provided as ``MEDSTOCK_<NAME>`` in the environment or in
a ``.env`` file. A channel whose credentials are missing is replaced by a
fake adapter at wiring time.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class AlertSettings(BaseSettings):
    # Email (SMTP)
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USE_TLS: bool = True
    EMAIL_USER: str = ""
    EMAIL_PASS: str = ""
    ALERT_EMAIL: str = ""

    # Text relay (WhatsApp/SMS gateway over HTTP)
    RELAY_URL: str = "https://api.callmebot.com/whatsapp.php"
    ALERT_PHONE: str = ""
    RELAY_API_KEY: str = ""

    # Dispatch
    CHANNEL_TIMEOUT: float = 10.0
    DISPATCH_WORKERS: int = 4

    # Ledger
    LOCK_TIMEOUT: float = 5.0

    model_config = SettingsConfigDict(
        env_prefix="MEDSTOCK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def email_configured(self) -> bool:
        return bool(self.EMAIL_USER and self.EMAIL_PASS and self.ALERT_EMAIL)

    @property
    def relay_configured(self) -> bool:
        return bool(self.ALERT_PHONE and self.RELAY_API_KEY)

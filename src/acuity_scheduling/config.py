"""Configuration with environment variable support.

All settings can be configured via environment variables with the ACUITY_ prefix.
Example: ACUITY_WEBHOOK_SECRET=... sets the static webhook secret.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .handler import StaticWebhookHandler, WebhookCallback
from .headers import DEFAULT_SIGNATURE_HEADER

DEFAULT_BASE_URL = "https://acuityscheduling.com/api/v1"


class WebhookSettings(BaseSettings):
    """Static webhook configuration.

    Environment variables:
    - ACUITY_WEBHOOK_SECRET: API key Acuity signs static webhooks with
    - ACUITY_SIGNATURE_HEADER: Signature header name
    - ACUITY_VERIFY_SIGNATURES: Set to false to skip verification (local testing)
    - ACUITY_WEBHOOK_PATH: Path the middleware handles
    """

    model_config = SettingsConfigDict(
        env_prefix="ACUITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    webhook_secret: str | None = Field(
        default=None,
        description="API key used to verify static webhook signatures.",
        repr=False,
    )
    signature_header: str = Field(
        default=DEFAULT_SIGNATURE_HEADER,
        description="Header carrying the static webhook signature.",
    )
    verify_signatures: bool = Field(
        default=True,
        description="Verify signatures before decoding. Disable only for local testing.",
    )
    webhook_path: str = Field(
        default="/webhooks/acuity",
        description="Request path handled by the framework middleware.",
    )

    def build_handler(self, callback: WebhookCallback) -> StaticWebhookHandler:
        return StaticWebhookHandler(
            secret=self.webhook_secret,
            callback=callback,
            header_name=self.signature_header,
            verify=self.verify_signatures,
        )


class ClientSettings(BaseSettings):
    """REST client configuration.

    Environment variables:
    - ACUITY_USER_ID: Acuity user ID (Basic auth username)
    - ACUITY_API_KEY: Acuity API key (Basic auth password)
    - ACUITY_BASE_URL: Override the REST base URL
    - ACUITY_TIMEOUT_S: Request timeout in seconds
    """

    model_config = SettingsConfigDict(
        env_prefix="ACUITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    user_id: str | None = None
    api_key: str | None = Field(default=None, repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = Field(default=30.0, gt=0)

"""Application-wide configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from voice.errors import ConfigurationError

DEFAULT_WEBHOOK_PATH = "twilio/cmb5v3a6b0001pofthcngifxq/initiate"
DEFAULT_CALLER_IDENTITY = "sipuser"

REQUIRED_ENV_VARS = (
    "TWILIO_ACCOUNT_ID",
    "TWILIO_API_KEY",
    "TWILIO_API_SECRET",
    "APP_SID",
    "SIP_URI",
)


class Settings(BaseSettings):
    """Centralized environment configuration.

    Loaded once at startup and passed explicitly into the application factory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    log_level: str = Field(default="INFO")

    # Twilio (Voice)
    twilio_account_id: str = Field(description="Account SID the API key belongs to.")
    twilio_api_key: str = Field(description="API key SID used to sign access tokens.")
    twilio_api_secret: SecretStr = Field(description="API key secret used to sign access tokens.")
    app_sid: str = Field(description="TwiML App SID used for outgoing calls.")
    sip_uri: str = Field(description="SIP URI dialed by the voice webhook, e.g. sip:alice@example.com")
    caller_identity: str = Field(
        default=DEFAULT_CALLER_IDENTITY,
        description="Identity claim of issued tokens and callerId of the <Dial>.",
    )
    token_ttl_seconds: int = Field(default=3600, gt=0)

    # HTTP surface
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    webhook_path: str = Field(default=DEFAULT_WEBHOOK_PATH)
    public_base_url: str | None = Field(
        default=None,
        description="Public base URL shown in the startup hint (e.g. https://<ngrok>.ngrok-free.app).",
    )

    # Browser client
    voice_sdk_dir: Path = Field(
        default=Path("node_modules/@twilio/voice-sdk"),
        description="Directory of the Twilio Voice JS SDK, served under /twilio-sdk.",
    )
    registration_fallback_ms: int = Field(
        default=2000,
        ge=0,
        description="Delay before calling is enabled without a ready/registered signal.",
    )

    @field_validator("twilio_account_id", "twilio_api_key", "twilio_api_secret", "app_sid", "sip_uri", mode="before")
    @classmethod
    def not_blank(cls, value):
        if isinstance(value, str):
            value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("webhook_path")
    @classmethod
    def normalize_webhook_path(cls, value: str) -> str:
        value = value.strip().strip("/")
        return value or DEFAULT_WEBHOOK_PATH

    @field_validator("caller_identity")
    @classmethod
    def default_caller_identity(cls, value: str) -> str:
        return value.strip() or DEFAULT_CALLER_IDENTITY

    @property
    def webhook_route(self) -> str:
        return f"/webhooks/{self.webhook_path}"


def load_settings(env_file: str | Path | None = ".env") -> Settings:
    """Read settings from the environment, failing fast on missing values.

    The raised error names the offending variables but never their values.
    """

    try:
        return Settings(_env_file=env_file)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]).upper() for err in exc.errors() if err.get("loc")})
        missing = [name for name in REQUIRED_ENV_VARS if name in fields]
        if missing:
            raise ConfigurationError(
                "Missing required environment variables: "
                + ", ".join(missing)
                + ". Required: "
                + ", ".join(REQUIRED_ENV_VARS)
            ) from None
        raise ConfigurationError("Invalid configuration: " + ", ".join(fields)) from None

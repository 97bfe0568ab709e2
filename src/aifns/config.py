"""Configuration module for aifns using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AifnsSettings(BaseSettings):
    """Main configuration settings for aifns.

    All settings can be overridden via environment variables with the AIFNS_ prefix.
    For example, AIFNS_OLLAMA_HOST will override the ollama_host setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Ollama
    ollama_host: str = "http://localhost:11434"
    model: str = "llama3.1:8b"

    # Conversation loop
    max_turns: int = Field(default=10, ge=1)
    model_timeout: float = Field(default=120.0, gt=0)
    function_timeout: float = Field(default=30.0, gt=0)

    # Built-in functions
    enabled_functions: list[str] = Field(default_factory=list)
    http_timeout: float = Field(default=15.0, gt=0)

    # Twilio (the sms function is only registered when all three are set)
    twilio_account_sid: str | None = None
    twilio_auth_token: str | None = None
    twilio_phone_number: str | None = None

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="AIFNS_")

    @property
    def twilio_configured(self) -> bool:
        """Whether all Twilio credentials are present."""
        return bool(
            self.twilio_account_sid
            and self.twilio_auth_token
            and self.twilio_phone_number
        )

"""Configuration management using Pydantic Settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

REDACTED = "[REDACTED]"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Credential — read once at startup, never echoed back to the client
    fastly_api_key: SecretStr = SecretStr("")

    # Fastly API
    fastly_api_base_url: str = "https://api.fastly.com"
    # Seconds; None means the request waits as long as the server does
    fastly_http_timeout: float | None = None

    # Fastly CLI
    fastly_cli_binary: str = "fastly"
    fastly_cli_token_flag: str = "--token"

    # MCP server
    server_name: str = Field(default="fastly-mcp", validation_alias="FASTLY_MCP_SERVER_NAME")
    server_version: str = Field(default="0.1.0", validation_alias="FASTLY_MCP_SERVER_VERSION")
    log_file: str = Field(default="fastly-mcp-debug.log", validation_alias="FASTLY_MCP_LOG_FILE")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    @property
    def credential(self) -> Credential:
        return Credential(self.fastly_api_key.get_secret_value())


class Credential:
    """The single API secret for the lifetime of the process.

    Only the executors call :meth:`reveal`, and only to write the value into
    an outbound header or subprocess invocation. Everything that flows back
    towards the client or the log goes through :meth:`redact` first.
    """

    __slots__ = ("_value",)

    def __init__(self, value: str = ""):
        self._value = (value or "").strip()

    @property
    def is_configured(self) -> bool:
        return bool(self._value)

    def reveal(self) -> str:
        return self._value

    def redact(self, text: str) -> str:
        """Replace every occurrence of the secret in ``text``."""
        if not self._value or not text:
            return text
        return text.replace(self._value, REDACTED)

    def __repr__(self) -> str:
        return f"Credential(configured={self.is_configured})"

    __str__ = __repr__


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()

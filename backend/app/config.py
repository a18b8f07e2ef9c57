"""Application configuration with environment variable support.

Slack and API credentials use their conventional names (``SLACK_BOT_TOKEN``,
``SLACK_SIGNING_SECRET``, ``API_SECRET_KEY``). Server knobs are prefixed with
``CHANNEL_GROUPER_``. Everything can also come from a ``.env`` file in the
project root.

Examples::

    SLACK_BOT_TOKEN=xoxb-... uv run channel-grouper start
    CHANNEL_GROUPER_PORT=9000 uv run channel-grouper start
    CHANNEL_GROUPER_SAVED_GROUPS_ENABLED=false uv run channel-grouper start
"""

from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root: two levels up from this file (backend/app/config.py -> repo root)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Slack rejects conversations.list page sizes above this
SLACK_MAX_PAGE_SIZE = 1000

VERSION = "1.0.0"


def _env(name: str) -> AliasChoices:
    return AliasChoices(f"CHANNEL_GROUPER_{name.upper()}", name)


class Settings(BaseSettings):
    """Channel Grouper configuration. Every value can be overridden by env vars."""

    model_config = SettingsConfigDict(
        env_file=str(_BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Credentials
    slack_bot_token: str = Field("", validation_alias="SLACK_BOT_TOKEN")
    slack_signing_secret: str = Field("", validation_alias="SLACK_SIGNING_SECRET")
    api_secret_key: str = Field("", validation_alias="API_SECRET_KEY")

    # Server
    host: str = Field("0.0.0.0", validation_alias=_env("host"))
    port: int = Field(3000, validation_alias=AliasChoices("CHANNEL_GROUPER_PORT", "PORT"))

    # Paths
    data_dir: Path = Field(_BASE_DIR / "data", validation_alias=_env("data_dir"))

    # Logging
    log_level: str = Field("INFO", validation_alias=_env("log_level"))

    # Slack channel listing
    slack_page_size: int = Field(SLACK_MAX_PAGE_SIZE, validation_alias=_env("slack_page_size"))
    slack_timeout: int = Field(30, validation_alias=_env("slack_timeout"))

    # Result display
    display_limit: int = Field(20, ge=1, validation_alias=_env("display_limit"))

    # The serverless deployment runs without saved groups
    saved_groups_enabled: bool = Field(True, validation_alias=_env("saved_groups_enabled"))

    @field_validator("slack_page_size")
    @classmethod
    def _clamp_page_size(cls, value: int) -> int:
        return max(1, min(value, SLACK_MAX_PAGE_SIZE))

    @property
    def slack_configured(self) -> bool:
        return bool(self.slack_bot_token)

    @property
    def log_file(self) -> Path:
        return self.data_dir / "channel-grouper.log"

    @property
    def base_url(self) -> str:
        """The full base URL for the API server (used in MCP configs and status checks)."""
        return f"http://localhost:{self.port}"

    @property
    def mcp_url(self) -> str:
        """The full MCP endpoint URL."""
        return f"{self.base_url}/mcp"


# Singleton instance, import this everywhere
settings = Settings()

BASE_DIR = _BASE_DIR

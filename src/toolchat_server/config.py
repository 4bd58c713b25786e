"""Configuration module for toolchat-server using pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ToolchatSettings(BaseSettings):
    """Main configuration settings for toolchat-server.

    All settings can be overridden via environment variables with the TOOLCHAT_ prefix.
    For example, TOOLCHAT_GEMINI_API_KEY will override the gemini_api_key setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Model provider
    gemini_api_key: str = ""
    gemini_api_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    gemini_model: str = "gemini-2.0-flash-lite"

    # Outbound timeouts (seconds)
    model_timeout: float = 60.0
    tool_timeout: float = 30.0

    # Conversation
    history_limit: int = 20

    # Data directories (relative to data_dir)
    data_dir: str = "."
    store_dir: str = "data"

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="TOOLCHAT_")

    @property
    def resolved_store_dir(self) -> Path:
        """Get the full path to the record store directory."""
        return Path(self.data_dir) / self.store_dir

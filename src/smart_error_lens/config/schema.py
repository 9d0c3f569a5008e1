"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Names the registry knows about. ``ProviderConfig.provider`` stays a plain
# string so an unknown name reaches the registry and surfaces as ConfigError.
ProviderName = Literal["mock", "openai", "huggingface", "palm", "anthropic", "groq"]

# camelCase option names accepted by ``configure()``
CONFIG_KEY_ALIASES = {
    "apiKey": "api_key",
    "mockMode": "mock_mode",
    "collectStackTrace": "collect_stack_trace",
    "customPrompt": "custom_prompt",
}


class ProviderConfig(BaseModel):
    """Active provider selection and analysis behavior flags."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: str = "mock"
    api_key: str | None = None
    model: str | None = None
    collect_stack_trace: bool = True
    mock_mode: bool = False
    custom_prompt: str | None = None
    timeout: float = Field(60.0, gt=0, le=600, description="Backend request timeout in seconds")

    @property
    def wants_mock(self) -> bool:
        """True when no real backend should be used."""
        return self.mock_mode or not self.api_key or self.provider == "mock"


class ServerConfig(BaseModel):
    """Report streaming server configuration."""

    host: str = "127.0.0.1"
    port: int = Field(3001, ge=1, le=65535)
    static_dir: Path | None = None


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("/var/log/smart-error-lens/lens.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"
    file: FileLoggingConfig = FileLoggingConfig()


class LensSettings(BaseSettings):
    """Root configuration for Smart Error Lens."""

    provider: ProviderConfig = ProviderConfig()
    server: ServerConfig = ServerConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="SMART_ERROR_LENS_",
        env_file=".env",
        env_nested_delimiter="__",
    )

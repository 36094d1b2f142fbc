"""Configuration management for procrelay."""

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from procrelay.models.config import ModuleConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5032)
    log_level: str = Field(default="INFO")

    # Module configuration
    module_config: str = Field(default="procrelay.yaml")

    # Telegram transport
    telegram_api_base: str = Field(default="https://api.telegram.org")
    request_timeout: float = Field(default=30.0)

    @property
    def module_config_path(self) -> Path:
        return Path(self.module_config)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def load_module_config(config_path: str | Path) -> ModuleConfig:
    """Load the flat module configuration from a YAML file."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Module config not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Module config must be a mapping, got {type(data).__name__}")

    return ModuleConfig.model_validate(data)

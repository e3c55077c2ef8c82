"""Pydantic settings for configuration management."""

from pathlib import Path
from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

from .exceptions import ConfigurationError


class ApiSettings(BaseModel):
    """Remote web application endpoints."""
    base_url: str = Field(default="http://localhost:3000", description="Base URL of the sync web app")
    timeout: int = Field(default=30, ge=1, description="Request timeout in seconds")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class ExportSettings(BaseModel):
    """Google Sheets export settings."""
    mode: Literal["api", "direct"] = Field(default="api", description="Export through the web app or gspread")
    row_window: int = Field(default=73, ge=1, description="Rows covered by one export range")

    # Only used in direct mode
    spreadsheet_id: Optional[str] = Field(default=None, description="Target spreadsheet ID")
    credentials_file: Optional[Path] = Field(default=None, description="Service account JSON file")
    credentials_b64: Optional[str] = Field(default=None, description="Base64-encoded service account JSON")


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SESSIONSYNC_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    data_dir: Path = Field(default=Path("data"), description="Data directory")
    storage_dir: Optional[Path] = Field(default=None, description="Local storage directory")

    # Recorder layout
    session_count: int = Field(default=12, ge=1, description="Sessions per shift")
    videos_per_session: int = Field(default=6, ge=1, description="Videos per session")

    # Logging
    log_dir: Optional[Path] = Field(default=None, description="Log directory")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: Literal["json", "text"] = Field(default="json", description="Log format: json, text")

    api: ApiSettings = Field(default_factory=ApiSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def derive_directories(self) -> "Settings":
        if self.storage_dir is None:
            self.storage_dir = self.data_dir / "local_storage"
        if self.log_dir is None:
            self.log_dir = self.data_dir / "logs"
        return self

    def ensure_directories(self):
        """Create necessary directories."""
        for d in (self.data_dir, self.storage_dir, self.log_dir):
            d.mkdir(parents=True, exist_ok=True)


# Global settings cache
_settings_cache: Optional[Settings] = None


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Build settings from an optional YAML file merged with the environment."""
    if config_path and config_path.exists():
        with open(config_path) as f:
            try:
                config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {config_path}")
        return Settings(**config_data)
    return Settings()


def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Get or create settings instance."""
    global _settings_cache

    if _settings_cache is not None:
        return _settings_cache

    settings = load_settings(config_path)
    settings.ensure_directories()

    _settings_cache = settings
    return settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings."""
    global _settings_cache
    _settings_cache = None
    return get_settings(config_path)

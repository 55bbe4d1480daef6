"""Configuration management for bunnystream."""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://video.bunnycdn.com/library/"

ENV_OVERRIDES = {
    "BUNNY_STREAM_API_KEY": "api_key",
    "BUNNY_STREAM_LIBRARY_ID": "library_id",
    "BUNNY_STREAM_BASE_URL": "base_url",
    "BUNNY_STREAM_TIMEOUT": "timeout",
}


def mask_secret(value: str) -> str:
    """Keep the first four characters of a secret and hide the rest.

    Secrets of four characters or fewer are hidden completely.
    """
    if len(value) <= 4:
        return "****"
    return f"{value[:4]}****"


class StreamConfig(BaseModel):
    """Connection settings for one Stream library."""
    model_config = ConfigDict(frozen=True)

    api_key: SecretStr
    library_id: str = Field(min_length=1)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=30.0, gt=0)
    user_agent: str = "bunnystream/1.0.0"

    @field_validator("library_id")
    @classmethod
    def _strip_library_id(cls, value: str) -> str:
        value = value.strip().strip("/")
        if not value:
            raise ValueError("library_id must not be empty")
        return value

    @property
    def library_url(self) -> str:
        """Base URL all resource paths are joined to."""
        return f"{self.base_url.rstrip('/')}/{self.library_id}/"

    @property
    def masked_api_key(self) -> str:
        return mask_secret(self.api_key.get_secret_value())


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    file: str | None = None


class BunnyStreamSettings(BaseModel):
    """Top-level bunnystream configuration."""
    stream: StreamConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Loads and saves settings from YAML with environment overrides."""

    DEFAULT_CONFIG_NAME = "bunnystream.yaml"

    def __init__(self, config_path: Path | None = None, environ: dict[str, str] | None = None):
        """Initialize config manager."""
        self.config_path = config_path or self._get_default_config_path()
        self.environ = os.environ if environ is None else environ
        self._settings: BunnyStreamSettings | None = None

    def load(self) -> BunnyStreamSettings:
        """Load settings from the config file and environment.

        Raises:
            ConfigError: If the file cannot be parsed or the result is invalid.
        """
        data = self._read_file()

        stream = dict(data.get("stream") or {})
        for env_name, key in ENV_OVERRIDES.items():
            value = self.environ.get(env_name)
            if value:
                stream[key] = value
        data["stream"] = stream

        try:
            self._settings = BunnyStreamSettings(**data)
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        logger.debug(
            f"Loaded settings for library {self._settings.stream.library_id} "
            f"(key {self._settings.stream.masked_api_key})"
        )
        return self._settings

    def save(self, settings: BunnyStreamSettings | None = None, include_secret: bool = False) -> None:
        """Save settings to the config file.

        The access key is only written when ``include_secret`` is set.
        """
        to_save = settings or self._settings
        if to_save is None:
            raise ConfigError("No configuration to save")

        data = to_save.model_dump(mode="json")
        if include_secret:
            data["stream"]["api_key"] = to_save.stream.api_key.get_secret_value()
        else:
            data["stream"].pop("api_key", None)

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(data, f, default_flow_style=False, indent=2)

        logger.info(f"Configuration saved to {self.config_path}")

    def get_settings(self) -> BunnyStreamSettings:
        """Get current settings, loading if necessary."""
        if self._settings is None:
            self.load()
        return self._settings

    def _read_file(self) -> dict:
        if not self.config_path.exists():
            logger.debug(f"Config file not found at {self.config_path}, using environment only")
            return {}

        try:
            with open(self.config_path, encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config from {self.config_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {self.config_path} must contain a mapping")
        return data

    def _get_default_config_path(self) -> Path:
        """Get default configuration file path."""
        # Look for config in current directory first, then user config dir
        current_dir = Path.cwd() / self.DEFAULT_CONFIG_NAME
        if current_dir.exists():
            return current_dir

        config_dir = Path.home() / ".config" / "bunnystream"
        return config_dir / self.DEFAULT_CONFIG_NAME


def load_settings(config_path: Path | None = None) -> BunnyStreamSettings:
    """Load settings from a specific path, or the default locations."""
    return ConfigManager(config_path).load()

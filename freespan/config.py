"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pendulum import Duration
from pydantic import BaseModel, Field, field_validator

from .adapters.schedule_store import SAMPLE_DATA_FILE

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class DefaultsConfig(BaseModel):
    """Default settings for queries."""
    duration_minutes: int = 30

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure the required free span is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    def get_min_duration(self) -> Duration:
        """Get the default minimum duration."""
        return pendulum.duration(minutes=self.duration_minutes)


class AppConfig(BaseModel):
    """Application configuration."""
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    timezone: str = "UTC"
    commitment_padding_hours: int = 12
    data_file: Optional[Path] = None
    log_level: str = "WARNING"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("commitment_padding_hours")
    @classmethod
    def validate_padding(cls, value: int) -> int:
        """Validate padding is between 0 and 48 hours."""
        if not 0 <= value <= 48:
            raise ValueError(f"commitment_padding_hours must be between 0 and 48, got {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalise and validate the logging level name."""
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value}")
        return level

    def get_commitment_padding(self) -> Duration:
        """Get the commitment padding."""
        return pendulum.duration(hours=self.commitment_padding_hours)

    def get_data_file(self) -> Path:
        """Get the schedule data file, falling back to the bundled sample."""
        return self.data_file or SAMPLE_DATA_FILE

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        # Relative data paths are relative to the config file, not the cwd
        if config.data_file is not None and not config.data_file.is_absolute():
            config = config.model_copy(update={"data_file": config_path.parent / config.data_file})
        return config

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "AppConfig":
        """
        Load the configuration from an explicit path or the default location.

        An explicit path must exist; without one, defaults are used when no
        config.yaml is found.
        """
        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)
        return cls()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of freespan/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path

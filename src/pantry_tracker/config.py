"""Configuration management for Pantry Tracker."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models import Thresholds


@dataclass
class DataConfig:
    """Data storage configuration."""

    storage_dir: Path


@dataclass
class DefaultsConfig:
    """Default values for new records."""

    category: str = "Other"
    unit: str = "kg"
    estimated_duration: int = 30


@dataclass
class StatusConfig:
    """Stock status thresholds, as fractions of the estimated duration."""

    critical_ratio: float = 0.15
    warning_ratio: float = 0.40

    @property
    def thresholds(self) -> Thresholds:
        return Thresholds(critical_ratio=self.critical_ratio, warning_ratio=self.warning_ratio)


@dataclass
class SessionConfig:
    """Identity the session acts for."""

    user_id: str = "local"


@dataclass
class DisplayConfig:
    """Presentation settings."""

    currency_symbol: str = "₹"


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "WARNING"


@dataclass
class Config:
    """Complete application configuration."""

    data: DataConfig
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    status: StatusConfig = field(default_factory=StatusConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigManager:
    """Manages application configuration from TOML files."""

    def __init__(self, config_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional explicit path to config file.
                        If not provided, searches standard locations.

        Raises:
            ValidationError: If the status thresholds are inconsistent
        """
        self.config_path = config_path or self._find_config()
        self._config = self._load_config()
        self._validate()

    @property
    def data(self) -> DataConfig:
        """Get data configuration."""
        return self._config.data

    @property
    def defaults(self) -> DefaultsConfig:
        """Get defaults configuration."""
        return self._config.defaults

    @property
    def status(self) -> StatusConfig:
        """Get status threshold configuration."""
        return self._config.status

    @property
    def session(self) -> SessionConfig:
        """Get session configuration."""
        return self._config.session

    @property
    def display(self) -> DisplayConfig:
        """Get display configuration."""
        return self._config.display

    @property
    def logging(self) -> LoggingConfig:
        """Get logging configuration."""
        return self._config.logging

    def _find_config(self) -> Path:
        """Find config file in standard locations."""
        locations = [
            Path.cwd() / "config.toml",
            Path.home() / ".config" / "pantry-tracker" / "config.toml",
            Path.home() / ".pantry-tracker" / "config.toml",
        ]

        for loc in locations:
            if loc.exists():
                return loc

        # Return default location if none found
        return Path.home() / ".config" / "pantry-tracker" / "config.toml"

    def _load_config(self) -> Config:
        """Load configuration from TOML file."""
        if not self.config_path.exists():
            return self._default_config()

        with open(self.config_path, "rb") as f:
            data = tomllib.load(f)

        data_section = data.get("data", {})
        defaults = data.get("defaults", {})
        status = data.get("status", {})

        return Config(
            data=DataConfig(
                storage_dir=Path(
                    data_section.get("storage_dir", "~/pantry-tracker/data")
                ).expanduser(),
            ),
            defaults=DefaultsConfig(
                category=defaults.get("category", "Other"),
                unit=defaults.get("unit", "kg"),
                estimated_duration=defaults.get("estimated_duration", 30),
            ),
            status=StatusConfig(
                critical_ratio=status.get("critical_ratio", 0.15),
                warning_ratio=status.get("warning_ratio", 0.40),
            ),
            session=SessionConfig(
                user_id=data.get("session", {}).get("user_id", "local"),
            ),
            display=DisplayConfig(
                currency_symbol=data.get("display", {}).get("currency_symbol", "₹"),
            ),
            logging=LoggingConfig(
                level=str(data.get("logging", {}).get("level", "WARNING")).upper(),
            ),
        )

    def _default_config(self) -> Config:
        """Return default configuration."""
        return Config(data=DataConfig(storage_dir=Path.home() / "pantry-tracker" / "data"))

    def _validate(self) -> None:
        try:
            Thresholds(
                critical_ratio=self.status.critical_ratio,
                warning_ratio=self.status.warning_ratio,
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid status thresholds in {self.config_path}: {e}") from e

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get config value by dot-notation path.

        Args:
            key_path: Dot-separated path like 'status.critical_ratio'
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split(".")
        value: Any = self._config

        for key in keys:
            if hasattr(value, key):
                value = getattr(value, key)
            elif isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default

        return value if value is not None else default

"""Settings file loader with Pydantic v2 validation.

Loads a ``distributors.yaml`` file into a typed :class:`AppConfig`.  The
same file carries the distributor hierarchy (handed to
:class:`~distributor_permissions.distributors.DistributorRegistry`) and
the settings for the location dataset and logging.  Unknown keys are
allowed.

Example
-------
>>> loader = ConfigLoader()
>>> config = loader.load(Path("distributors.yaml"))
>>> config.locations.path
PosixPath('cities.csv')
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from distributor_permissions.distributors.registry import DistributorRegistry
from distributor_permissions.locations.loader import LocationLoader
from distributor_permissions.locations.location import Location
from distributor_permissions.regions.matcher import MatchMode


class LocationsConfig(BaseModel):
    """Configuration for the location dataset."""

    model_config = {"extra": "allow"}

    path: Path | None = Field(default=None)
    strict: bool = Field(default=True)
    encoding: str = Field(default="utf-8")


class LoggingConfig(BaseModel):
    """Configuration for log output."""

    model_config = {"extra": "allow"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="WARNING")
    format: str = Field(default="%(asctime)s %(levelname)s %(name)s: %(message)s")

    @field_validator("level", mode="before")
    @classmethod
    def normalise_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class AppConfig(BaseModel):
    """Top-level settings schema.

    All sections are optional and fall back to defaults.
    """

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    match_mode: MatchMode = Field(default=MatchMode.POSITIONAL)
    distributors: list[dict[str, object]] = Field(default_factory=list)
    locations: LocationsConfig = Field(default_factory=LocationsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("version", mode="before")
    @classmethod
    def version_to_str(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def build_registry(self, config_path: str | None = None) -> DistributorRegistry:
        """Freeze the configured hierarchy into a registry."""
        return DistributorRegistry.from_dict(
            {
                "version": self.version,
                "match_mode": self.match_mode.value,
                "distributors": self.distributors,
            },
            config_path=config_path,
        )

    def load_locations(self, base_dir: Path | None = None) -> list[Location]:
        """Load the configured location dataset.

        Relative paths resolve against *base_dir* when given.

        Raises
        ------
        ValueError
            If no dataset path is configured.
        """
        if self.locations.path is None:
            raise ValueError("No location dataset configured (locations.path).")
        path = self.locations.path
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        loader = LocationLoader(strict=self.locations.strict, encoding=self.locations.encoding)
        return loader.load(path)

    def configure_logging(self) -> None:
        """Apply the logging section to the root logger."""
        logging.basicConfig(level=self.logging.level, format=self.logging.format)


class ConfigLoader:
    """Loads and validates settings YAML.

    Example
    -------
    >>> loader = ConfigLoader()
    >>> config = loader.load(Path("distributors.yaml"))
    """

    def load(self, config_path: Path) -> AppConfig:
        """Load and validate a settings YAML file.

        Raises
        ------
        FileNotFoundError:
            When the file does not exist.
        ValueError:
            When the YAML content fails Pydantic validation.
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Settings file not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            raw: dict[str, object] = yaml.safe_load(fh) or {}

        return AppConfig.model_validate(raw)

    def load_string(self, yaml_content: str) -> AppConfig:
        """Load and validate a YAML string directly."""
        raw: dict[str, object] = yaml.safe_load(yaml_content) or {}
        return AppConfig.model_validate(raw)

    def defaults(self) -> AppConfig:
        """Return a configuration with all defaults applied."""
        return AppConfig()

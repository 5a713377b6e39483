"""
Configuration module for fsident.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.

Settings are immutable snapshots: they are loaded once and passed explicitly
to whatever reads them.
"""

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Cache for default values
_defaults_cache: dict[str, Any] | None = None


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section) or {}
    return section_defaults.get(key, fallback)


def _parse_paths(value: str) -> tuple[Path, ...]:
    """Parse an os.pathsep-separated list of paths."""
    return tuple(Path(p) for p in value.split(os.pathsep) if p.strip())


@dataclass(frozen=True)
class FilesystemSettings:
    """Filesystem crawl settings."""

    watched_paths: tuple[Path, ...] = field(
        default_factory=lambda: _get_default("filesystem_settings", "watched_paths", [])
    )

    def __post_init__(self) -> None:
        """Normalize watched_paths to a tuple of Path objects."""
        object.__setattr__(
            self, "watched_paths", tuple(Path(p).expanduser() for p in self.watched_paths)
        )


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "WARNING"))
    format: str = field(
        default_factory=lambda: _get_default(
            "logging", "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )


@dataclass(frozen=True)
class UserSettings:
    """Read-only snapshot of the user's settings."""

    filesystem_settings: FilesystemSettings = field(default_factory=FilesystemSettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "UserSettings":
        """
        Load settings from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            UserSettings instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the file format is unsupported
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        elif path.suffix == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "UserSettings":
        """Create UserSettings from a dictionary."""
        settings = cls()

        if "filesystem_settings" in data:
            settings = replace(
                settings, filesystem_settings=FilesystemSettings(**data["filesystem_settings"])
            )
        if "logging" in data:
            settings = replace(settings, logging=LoggingConfig(**data["logging"]))

        return settings

    def with_env_overrides(self) -> "UserSettings":
        """
        Return a copy with environment variable overrides applied.

        Environment variables follow the pattern: FSIDENT_<SECTION>_<KEY>
        Examples:
            - FSIDENT_FILESYSTEM_WATCHED_PATHS (os.pathsep separated)
            - FSIDENT_LOGGING_LEVEL

        Returns:
            New UserSettings with overrides applied
        """
        env_mappings = {
            "FSIDENT_FILESYSTEM_WATCHED_PATHS": ("filesystem_settings", "watched_paths", _parse_paths),
            "FSIDENT_LOGGING_LEVEL": ("logging", "level", str),
            "FSIDENT_LOGGING_FORMAT": ("logging", "format", str),
        }

        settings = self
        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                section_obj = replace(getattr(settings, section), **{key: converter(value)})
                settings = replace(settings, **{section: section_obj})

        return settings

    def to_dict(self) -> dict:
        """Convert settings to a plain dictionary."""
        return {
            "filesystem_settings": {
                "watched_paths": [str(p) for p in self.filesystem_settings.watched_paths],
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
            },
        }

    def to_yaml(self) -> str:
        """Serialize settings to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)


def load_settings(config_path: Optional[Path | str] = None, apply_env: bool = True) -> UserSettings:
    """
    Load a settings snapshot with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to apply environment variable overrides.

    Returns:
        UserSettings instance
    """
    if config_path:
        settings = UserSettings.from_file(config_path)
    else:
        settings = UserSettings()

    if apply_env:
        settings = settings.with_env_overrides()

    return settings


def configure_logging(config: LoggingConfig) -> None:
    """Configure the root logger from a LoggingConfig."""
    logging.basicConfig(
        level=getattr(logging, config.level.upper(), logging.WARNING),
        format=config.format,
        force=True,
    )

"""YAML configuration loader with inheritance support.

Supports:
- Loading YAML config files
- Config inheritance via 'extends' key
- Deep merging of nested config
- Falling back to defaults when no config file exists
"""

import logging
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from ..errors import ConfigError
from . import (
    AnnouncementConfig,
    AudioConfig,
    EspeakConfig,
    FeedConfig,
    GoogleConfig,
    LoggingConfig,
    PipelineConfig,
    PlaybackConfig,
    WxVoiceConfig,
)
from .profiles import DEFAULT_CONFIG_DIR, Profile, detect_profile

logger = logging.getLogger(__name__)

ROOT_KEY = "wxvoice"

_SECTIONS = {
    "feed": FeedConfig,
    "announcement": AnnouncementConfig,
    "espeak": EspeakConfig,
    "google": GoogleConfig,
    "audio": AudioConfig,
    "playback": PlaybackConfig,
    "pipeline": PipelineConfig,
    "logging": LoggingConfig,
}


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values from override take precedence. Nested dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_with_inheritance(path: Path, _seen: frozenset[Path] = frozenset()) -> dict[str, Any]:
    """Load YAML file with inheritance support.

    If the file contains an 'extends' key, the base config (a path relative
    to this file) is loaded first and merged with the current config.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the YAML is invalid or inheritance loops
    """
    path = path.resolve()
    if path in _seen:
        raise ConfigError(f"Config inheritance loop at: {path}")
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")

    # Handle inheritance
    if "extends" in config:
        base_name = config.pop("extends")
        base_path = path.parent / base_name
        base_config = load_yaml_with_inheritance(base_path, _seen | {path})
        config = deep_merge(base_config, config)

    return config


def dict_to_config(data: dict[str, Any]) -> WxVoiceConfig:
    """Convert raw dict to typed WxVoiceConfig dataclass.

    Raises:
        ConfigError: On unknown sections or keys
    """
    root = data.get(ROOT_KEY, {}) or {}
    unknown_top = set(data) - {ROOT_KEY}
    if unknown_top:
        raise ConfigError(f"Unknown top-level config keys: {', '.join(sorted(unknown_top))}")
    if not isinstance(root, dict):
        raise ConfigError(f"'{ROOT_KEY}' must be a mapping")

    unknown_sections = set(root) - set(_SECTIONS)
    if unknown_sections:
        raise ConfigError(f"Unknown config sections: {', '.join(sorted(unknown_sections))}")

    sections = {}
    for name, section_class in _SECTIONS.items():
        # YAML gives None for an empty section
        values = root.get(name) or {}
        if not isinstance(values, dict):
            raise ConfigError(f"Config section '{name}' must be a mapping")

        allowed = {f.name for f in fields(section_class)}
        unknown = set(values) - allowed
        if unknown:
            raise ConfigError(f"Unknown keys in '{name}': {', '.join(sorted(unknown))}")
        sections[name] = section_class(**values)

    return WxVoiceConfig(**sections)


class YAMLConfigLoader:
    """YAML configuration loader implementation."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader with optional config directory.

        Args:
            config_dir: Directory containing config files.
                        Defaults to 'config' relative to project root.
        """
        self._config_dir = config_dir if config_dir is not None else DEFAULT_CONFIG_DIR

    def load(self, path: Path) -> WxVoiceConfig:
        """Load configuration from file path.

        Args:
            path: Path to YAML config file

        Returns:
            Parsed WxVoiceConfig
        """
        raw_config = load_yaml_with_inheritance(path)
        return dict_to_config(raw_config)

    def load_profile(self, profile: str) -> WxVoiceConfig:
        """Load configuration by profile name.

        Args:
            profile: Profile name (e.g., 'dev', 'prod')

        Returns:
            Parsed WxVoiceConfig for the profile
        """
        config_path = self._config_dir / f"{profile}.yaml"
        return self.load(config_path)


# Convenience function
def load_config(
    path: str | Path | None = None,
    profile: str | Profile | None = None,
    config_dir: Path | None = None,
) -> WxVoiceConfig:
    """Load wxvoice configuration.

    Args:
        path: Direct path to config file (takes precedence; must exist)
        profile: Profile name if path not given (default: WXVOICE_PROFILE or dev)
        config_dir: Directory holding profile files

    Returns:
        Parsed WxVoiceConfig. Defaults when the profile file does not exist.

    Raises:
        ConfigError: If the file is invalid or names unknown keys

    Examples:
        >>> config = load_config(profile="dev")
        >>> config = load_config(path="/path/to/config.yaml")
    """
    loader = YAMLConfigLoader(config_dir)

    if path is not None:
        try:
            return loader.load(Path(path))
        except FileNotFoundError as e:
            raise ConfigError(str(e)) from e

    if profile is None:
        profile = detect_profile()
    name = profile.value if isinstance(profile, Profile) else profile

    try:
        return loader.load_profile(name)
    except FileNotFoundError:
        logger.debug(f"No config file for profile '{name}', using defaults")
        return WxVoiceConfig()


__all__ = [
    "YAMLConfigLoader",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
]

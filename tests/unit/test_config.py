"""Unit tests for configuration loading."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from wxvoice.config import WxVoiceConfig
from wxvoice.config.loader import (
    deep_merge,
    dict_to_config,
    load_config,
    load_yaml_with_inheritance,
)
from wxvoice.config.profiles import PROFILE_ENV, Profile, detect_profile
from wxvoice.errors import ConfigError

REPO_CONFIG_DIR = Path(__file__).parent.parent.parent / "config"


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_simple_merge(self) -> None:
        """Test merging two flat dicts."""
        assert deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self) -> None:
        """Test merging nested dicts."""
        base = {"wxvoice": {"google": {"voice": "default", "rate": 1.0}}}
        override = {"wxvoice": {"google": {"rate": 1.2}}}
        result = deep_merge(base, override)
        assert result == {"wxvoice": {"google": {"voice": "default", "rate": 1.2}}}

    def test_does_not_modify_base(self) -> None:
        """Test that merge does not modify base dict."""
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestLoadYamlWithInheritance:
    """Tests for YAML loading with extends."""

    def test_extends(self, tmp_path: Path) -> None:
        (tmp_path / "base.yaml").write_text("wxvoice:\n  logging:\n    level: INFO\n  announcement:\n    style: brief\n")
        (tmp_path / "child.yaml").write_text("extends: base.yaml\nwxvoice:\n  logging:\n    level: DEBUG\n")

        data = load_yaml_with_inheritance(tmp_path / "child.yaml")

        assert data == {"wxvoice": {"logging": {"level": "DEBUG"}, "announcement": {"style": "brief"}}}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_yaml_with_inheritance(tmp_path / "missing.yaml")

    def test_inheritance_loop(self, tmp_path: Path) -> None:
        (tmp_path / "a.yaml").write_text("extends: b.yaml\n")
        (tmp_path / "b.yaml").write_text("extends: a.yaml\n")
        with pytest.raises(ConfigError, match="loop"):
            load_yaml_with_inheritance(tmp_path / "a.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "bad.yaml").write_text("wxvoice: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_yaml_with_inheritance(tmp_path / "bad.yaml")

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        (tmp_path / "list.yaml").write_text("- one\n- two\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_yaml_with_inheritance(tmp_path / "list.yaml")


class TestDictToConfig:
    """Tests for dict_to_config."""

    def test_empty_gives_defaults(self) -> None:
        assert dict_to_config({}) == WxVoiceConfig()

    def test_sections(self) -> None:
        config = dict_to_config(
            {
                "wxvoice": {
                    "announcement": {"style": "aviation"},
                    "espeak": {"words_per_minute": 140},
                    "playback": {"endpoint": "65314"},
                    "pipeline": {"deadline_seconds": 30},
                    "logging": None,
                }
            }
        )
        assert config.announcement.style == "aviation"
        assert config.espeak.words_per_minute == 140
        assert config.espeak.pitch == 50
        assert config.playback.endpoint == "65314"
        assert config.pipeline.deadline_seconds == 30
        assert config.logging.level == "INFO"

    def test_unknown_top_level_key(self) -> None:
        with pytest.raises(ConfigError, match="top-level"):
            dict_to_config({"weather": {}})

    def test_unknown_section(self) -> None:
        with pytest.raises(ConfigError, match="sections"):
            dict_to_config({"wxvoice": {"stt": {}}})

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="'espeak'"):
            dict_to_config({"wxvoice": {"espeak": {"speed": 200}}})

    def test_section_must_be_mapping(self) -> None:
        with pytest.raises(ConfigError):
            dict_to_config({"wxvoice": {"google": "fast"}})


class TestProfiles:
    """Tests for profile detection."""

    def test_default_is_dev(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert detect_profile() == Profile.DEV

    @pytest.mark.parametrize(
        ("value", "profile"),
        [("prod", Profile.PROD), ("production", Profile.PROD), ("TEST", Profile.TEST), ("nonsense", Profile.DEV)],
    )
    def test_from_environment(self, value: str, profile: Profile) -> None:
        with patch.dict(os.environ, {PROFILE_ENV: value}):
            assert detect_profile() == profile


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_profile_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config(profile="dev", config_dir=tmp_path) == WxVoiceConfig()

    def test_explicit_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(path=tmp_path / "missing.yaml")

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "site.yaml"
        path.write_text("wxvoice:\n  feed:\n    timeout: 3.5\n")
        assert load_config(path=path).feed.timeout == 3.5

    def test_profile_from_environment(self, tmp_path: Path) -> None:
        (tmp_path / "test.yaml").write_text("wxvoice:\n  announcement:\n    style: brief\n")
        with patch.dict(os.environ, {PROFILE_ENV: "test"}):
            assert load_config(config_dir=tmp_path).announcement.style == "brief"


@pytest.mark.skipif(not REPO_CONFIG_DIR.exists(), reason="repository config directory not present")
class TestShippedProfiles:
    """The profile files in config/ load cleanly."""

    def test_dev(self) -> None:
        config = load_config(profile=Profile.DEV, config_dir=REPO_CONFIG_DIR)
        assert config.logging.level == "DEBUG"
        assert config.audio.file_mode == 0o644

    def test_prod(self) -> None:
        config = load_config(profile="prod", config_dir=REPO_CONFIG_DIR)
        assert config.announcement.style == "aviation"
        assert config.google.voice == "us-female"
        assert config.playback.endpoint == "65314"
        assert "{endpoint}" in config.playback.command
        assert config.pipeline.deadline_seconds == 60

    def test_test(self) -> None:
        config = load_config(profile="test", config_dir=REPO_CONFIG_DIR)
        assert config.google.max_attempts == 2
        assert config.google.retry_delay == 0.0

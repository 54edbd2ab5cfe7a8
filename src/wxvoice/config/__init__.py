"""Configuration module for wxvoice.

This module provides the typed configuration sections, loaded from YAML
profiles by :mod:`wxvoice.config.loader`.
"""

from dataclasses import dataclass, field


@dataclass
class FeedConfig:
    """Weather feed configuration."""

    url: str = "https://aviationweather.gov/api/data/metar"
    timeout: float = 10.0
    user_agent: str = "wxvoice"


@dataclass
class AnnouncementConfig:
    """Announcement text configuration."""

    style: str = "speech"


@dataclass
class EspeakConfig:
    """Local eSpeak engine configuration."""

    command: str | None = None
    voice: str = "default"
    words_per_minute: int = 120
    pitch: int = 50
    gap: int = 15
    amplitude: int | None = None
    timeout: float = 30.0
    default_format: str = "wav"


@dataclass
class GoogleConfig:
    """Google Cloud Text-to-Speech configuration."""

    api_key_env: str = "GOOGLE_CLOUD_API_KEY"
    url: str = "https://texttospeech.googleapis.com/v1/text:synthesize"
    voice: str = "default"
    rate: float = 1.0
    pitch: float | None = None
    sample_rate: int = 24000
    timeout: float = 10.0
    max_attempts: int = 3
    retry_delay: float = 0.5
    default_format: str = "mp3"


@dataclass
class AudioConfig:
    """Audio output configuration."""

    output_dir: str | None = None
    file_mode: int = 0o644
    sox_command: str = "sox"
    sox_timeout: float = 60.0


@dataclass
class PlaybackConfig:
    """Playback collaborator configuration.

    The command template may use {path}, {stem} and {endpoint}.
    """

    command: str = "play -q {path}"
    endpoint: str | None = None
    timeout: float = 120.0


@dataclass
class PipelineConfig:
    """Pipeline run configuration."""

    deadline_seconds: float | None = None


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class WxVoiceConfig:
    """Main wxvoice configuration."""

    feed: FeedConfig = field(default_factory=FeedConfig)
    announcement: AnnouncementConfig = field(default_factory=AnnouncementConfig)
    espeak: EspeakConfig = field(default_factory=EspeakConfig)
    google: GoogleConfig = field(default_factory=GoogleConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Public API
__all__ = [
    "AnnouncementConfig",
    "AudioConfig",
    "EspeakConfig",
    "FeedConfig",
    "GoogleConfig",
    "LoggingConfig",
    "PipelineConfig",
    "PlaybackConfig",
    "WxVoiceConfig",
]

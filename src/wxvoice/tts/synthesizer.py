"""Synthesizer protocol and data classes.

Defines the interface shared by the local and remote speech engines.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

from ..audio.formats import AudioData

MIN_RATE = 0.25
MAX_RATE = 4.0

# Engine-neutral voice presets accepted by every backend
VOICE_PRESETS = ("default", "us-female", "us-male", "uk-female", "uk-male")


@dataclass(frozen=True)
class VoiceParameters:
    """Voice selection for one synthesis call.

    Attributes:
        voice: Preset name (see VOICE_PRESETS) or a raw engine voice id
        rate: Speaking rate multiplier, clamped to 0.25..4.0
        extensions: Backend-specific options; unknown keys are ignored
    """

    voice: str = "default"
    rate: float = 1.0
    extensions: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rate", max(MIN_RATE, min(MAX_RATE, float(self.rate))))

    def option(self, key: str, default: Any = None) -> Any:
        """Read one extension value."""
        return self.extensions.get(key, default)


@dataclass(frozen=True)
class SynthesisResult:
    """Result of text-to-speech synthesis.

    Attributes:
        audio: Native engine output as 16-bit PCM
        latency_ms: Synthesis latency in milliseconds
        backend: Name of the engine that produced the audio
    """

    audio: AudioData
    latency_ms: int
    backend: str

    @property
    def duration_ms(self) -> int | None:
        return self.audio.duration_ms


class Synthesizer(Protocol):
    """Interface for text-to-speech synthesis.

    Implementations return native PCM; choosing the output format is the
    transcoder's job.
    """

    @property
    def name(self) -> str:
        """Short engine name used in logs and results."""
        ...

    @property
    def is_available(self) -> bool:
        """Return True if the engine can be used right now."""
        ...

    def synthesize(self, text: str, voice: VoiceParameters | None = None) -> SynthesisResult:
        """Convert text to speech audio.

        Args:
            text: Text to synthesize
            voice: Voice selection (default preset when None)

        Returns:
            SynthesisResult with PCM audio

        Raises:
            SynthesisError: If synthesis fails
        """
        ...


__all__ = ["MAX_RATE", "MIN_RATE", "SynthesisResult", "Synthesizer", "VOICE_PRESETS", "VoiceParameters"]

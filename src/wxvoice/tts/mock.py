"""Mock synthesizer for testing.

Provides a deterministic, controllable stand-in for the real engines.
"""

import math
import struct

from ..audio.formats import AudioData, AudioEncoding
from .synthesizer import SynthesisResult, VoiceParameters


class MockSynthesizer:
    """Mock synthesizer for testing.

    Generates a tone instead of speech; its length is proportional to the
    number of words. Output depends only on the text and rate.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        available: bool = True,
    ) -> None:
        """Initialize mock synthesizer.

        Args:
            sample_rate: Output sample rate
            channels: Output channel count
            available: Value reported by is_available
        """
        self._sample_rate = sample_rate
        self._channels = channels
        self._available = available
        self._calls: list[tuple[str, VoiceParameters]] = []
        self._errors: list[Exception] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def is_available(self) -> bool:
        return self._available

    def synthesize(self, text: str, voice: VoiceParameters | None = None) -> SynthesisResult:
        """Synthesize text to audio (generates tone).

        Raises the next queued error, if any, instead.
        """
        voice = voice or VoiceParameters()
        self._calls.append((text, voice))

        if self._errors:
            raise self._errors.pop(0)

        # Roughly 100ms per word at normal rate
        words = len(text.split())
        duration_ms = int(max(100, words * 100) / voice.rate)

        audio = AudioData(
            data=self._generate_tone(440, duration_ms),
            encoding=AudioEncoding.PCM_S16LE,
            sample_rate=self._sample_rate,
            channels=self._channels,
        )
        return SynthesisResult(audio=audio, latency_ms=0, backend=self.name)

    def _generate_tone(self, frequency: int, duration_ms: int) -> bytes:
        """Generate a sine tone with a short attack and release."""
        num_samples = int(self._sample_rate * duration_ms / 1000)
        ramp = max(1, int(self._sample_rate * 0.01))
        frames = []

        for i in range(num_samples):
            envelope = min(1.0, i / ramp, (num_samples - i) / ramp)
            sample = int(32767 * 0.3 * envelope * math.sin(2 * math.pi * frequency * i / self._sample_rate))
            frames.append(struct.pack("<h", sample) * self._channels)

        return b"".join(frames)

    def fail_with(self, *errors: Exception) -> None:
        """Queue errors to raise from the next synthesize calls."""
        self._errors.extend(errors)

    @property
    def call_count(self) -> int:
        """Get number of synthesize calls."""
        return len(self._calls)

    @property
    def synthesized_texts(self) -> list[str]:
        """Get list of synthesized texts."""
        return [text for text, _ in self._calls]

    @property
    def voices(self) -> list[VoiceParameters]:
        return [voice for _, voice in self._calls]

    def clear(self) -> None:
        """Reset mock state."""
        self._calls.clear()
        self._errors.clear()


__all__ = ["MockSynthesizer"]

"""Text-to-speech module for wxvoice.

Two interchangeable engines behind the Synthesizer protocol:
- eSpeak: local, offline, robotic but always available
- Google: remote neural voices, needs an API key and network
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING

from .espeak import EspeakSynthesizer
from .google import GoogleSynthesizer
from .mock import MockSynthesizer
from .synthesizer import VOICE_PRESETS, SynthesisResult, Synthesizer, VoiceParameters

if TYPE_CHECKING:
    from ..config import WxVoiceConfig

logger = logging.getLogger(__name__)


class Engine(Enum):
    """Available synthesis engines."""

    ESPEAK = "espeak"
    GOOGLE = "google"

    @classmethod
    def parse(cls, value: "str | Engine") -> "Engine":
        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            names = ", ".join(engine.value for engine in cls)
            raise ValueError(f"unknown engine {value!r} (choose from {names})") from None


def create_synthesizer(
    engine: Engine | str,
    config: "WxVoiceConfig | None" = None,
) -> Synthesizer:
    """Create the synthesizer for an engine.

    Args:
        engine: Which engine to build
        config: wxvoice configuration (defaults when None)

    Returns:
        Synthesizer implementation. Availability is not checked here; an
        unavailable engine fails when it is first used.
    """
    if config is None:
        from ..config import WxVoiceConfig

        config = WxVoiceConfig()

    engine = Engine.parse(engine)

    if engine == Engine.ESPEAK:
        espeak = config.espeak
        synth = EspeakSynthesizer(
            command=espeak.command,
            words_per_minute=espeak.words_per_minute,
            pitch=espeak.pitch,
            gap=espeak.gap,
            amplitude=espeak.amplitude,
            timeout=espeak.timeout,
        )
    else:
        google = config.google
        synth = GoogleSynthesizer(
            api_key_env=google.api_key_env,
            url=google.url,
            sample_rate=google.sample_rate,
            timeout=google.timeout,
            max_attempts=google.max_attempts,
            retry_delay=google.retry_delay,
        )

    if synth.is_available:
        logger.info(f"TTS: Using {type(synth).__name__}")
    else:
        logger.warning(f"TTS: {type(synth).__name__} is not available")
    return synth


__all__ = [
    "Engine",
    "EspeakSynthesizer",
    "GoogleSynthesizer",
    "MockSynthesizer",
    "SynthesisResult",
    "Synthesizer",
    "VOICE_PRESETS",
    "VoiceParameters",
    "create_synthesizer",
]

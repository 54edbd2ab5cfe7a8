"""Audio formats and the AudioData container.

Defines the output encodings the transcoder can produce and the
immutable audio value passed between pipeline stages.
"""

from dataclasses import dataclass
from enum import Enum


class AudioEncoding(Enum):
    """Encoding of the bytes held by an AudioData."""

    PCM_S16LE = "pcm_s16le"
    WAV = "wav"
    MP3 = "mp3"
    OGG = "ogg"
    ULAW = "ulaw"
    ALAW = "alaw"
    GSM = "gsm"


@dataclass(frozen=True)
class FormatProfile:
    """Sample layout an output format requires.

    Attributes:
        sample_rate: Required rate in Hz, or None to keep the source rate
        sample_width: Bytes per sample before encoding
        channels: Required channel count, or None to keep the source layout
    """

    sample_rate: int | None
    sample_width: int
    channels: int | None


TELEPHONY_RATE = 8000

_TELEPHONY_PROFILE = FormatProfile(sample_rate=TELEPHONY_RATE, sample_width=2, channels=1)
_GENERAL_PROFILE = FormatProfile(sample_rate=None, sample_width=2, channels=None)


class AudioFormat(Enum):
    """Output formats selectable by callers."""

    WAV = "wav"
    MP3 = "mp3"
    OGG = "ogg"
    ULAW = "ulaw"
    ALAW = "alaw"
    GSM = "gsm"

    @property
    def is_telephony(self) -> bool:
        """True for the 8 kHz mono narrowband formats."""
        return self in (AudioFormat.ULAW, AudioFormat.ALAW, AudioFormat.GSM)

    @property
    def profile(self) -> FormatProfile:
        return _TELEPHONY_PROFILE if self.is_telephony else _GENERAL_PROFILE

    @property
    def encoding(self) -> AudioEncoding:
        return AudioEncoding(self.value)

    @property
    def file_extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "str | AudioFormat") -> "AudioFormat":
        """Look up a format by name, case-insensitively.

        "mulaw" is accepted for ulaw.

        Raises:
            ValueError: If the name is not a known format
        """
        if isinstance(value, cls):
            return value
        name = value.strip().lower().lstrip(".")
        name = _ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            names = ", ".join(fmt.value for fmt in cls)
            raise ValueError(f"unknown audio format {value!r} (choose from {names})") from None


_ALIASES = {"mulaw": "ulaw", "mu-law": "ulaw", "a-law": "alaw"}

# GSM 06.10 full rate: 160 samples (20 ms) per 33-byte frame
GSM_FRAME_BYTES = 33
GSM_FRAME_MS = 20


@dataclass(frozen=True)
class AudioData:
    """Encoded or raw audio with its layout.

    For WAV the bytes are a complete RIFF file; for MP3/OGG/GSM they are the
    encoder output; PCM_S16LE and G.711 are headerless sample streams.
    """

    data: bytes
    encoding: AudioEncoding
    sample_rate: int
    channels: int = 1

    @property
    def duration_ms(self) -> int | None:
        """Playback duration, or None when it cannot be derived from the size."""
        if self.sample_rate <= 0 or self.channels <= 0:
            return None

        if self.encoding == AudioEncoding.PCM_S16LE:
            frames = len(self.data) // (2 * self.channels)
        elif self.encoding in (AudioEncoding.ULAW, AudioEncoding.ALAW):
            frames = len(self.data) // self.channels
        elif self.encoding == AudioEncoding.WAV:
            # Local import: pcm depends on this module.
            from .pcm import read_wav

            try:
                pcm = read_wav(self.data)
            except ValueError:
                return None
            return pcm.duration_ms
        elif self.encoding == AudioEncoding.GSM:
            return (len(self.data) // GSM_FRAME_BYTES) * GSM_FRAME_MS
        else:
            return None

        return int(frames * 1000 / self.sample_rate)

    @property
    def is_pcm(self) -> bool:
        return self.encoding == AudioEncoding.PCM_S16LE


__all__ = [
    "AudioData",
    "AudioEncoding",
    "AudioFormat",
    "FormatProfile",
    "GSM_FRAME_BYTES",
    "TELEPHONY_RATE",
]

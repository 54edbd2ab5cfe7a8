"""Conversion of synthesized audio into output formats.

Telephony formats (μ-law, A-law, GSM) are 8 kHz mono: the source is
downmixed and resampled first. General formats (WAV, MP3, OGG) keep the
source rate and channel layout.
"""

import logging

import numpy as np

from ..errors import TranscodeError, UnsupportedConversionError
from . import g711
from .formats import TELEPHONY_RATE, AudioData, AudioEncoding, AudioFormat
from .pcm import downmix, from_samples, read_wav, resample, to_samples, write_wav
from .sox import SoxEncoder

logger = logging.getLogger(__name__)

SUPPORTED_RATES = frozenset({8000, 11025, 16000, 22050, 24000, 32000, 44100, 48000})
SUPPORTED_CHANNELS = frozenset({1, 2})
SOURCE_ENCODINGS = frozenset(
    {AudioEncoding.PCM_S16LE, AudioEncoding.WAV, AudioEncoding.ULAW, AudioEncoding.ALAW}
)


class Transcoder:
    """Converts AudioData between encodings.

    Output is a pure function of the input: the same source and target
    always give byte-identical results.
    """

    def __init__(self, encoder: SoxEncoder | None = None) -> None:
        """Initialize the transcoder.

        Args:
            encoder: External encoder for GSM, MP3 and OGG (default: sox)
        """
        self._encoder = encoder or SoxEncoder()

    def transcode(self, audio: AudioData, target: AudioFormat | str) -> AudioData:
        """Convert audio to the target format.

        Args:
            audio: Source audio
            target: Output format (or its name)

        Returns:
            New AudioData in the target encoding. Audio already in the target
            format is returned unchanged.

        Raises:
            UnsupportedConversionError: If the source encoding, rate or
                channel count cannot be converted
            EncoderError: If the external encoder is missing or fails
        """
        target = AudioFormat.parse(target)

        if self._is_identity(audio, target):
            logger.debug(f"Audio already {target.value}, passing through")
            return audio

        pcm = self._to_pcm(audio)

        if target.is_telephony:
            result = self._to_telephony(pcm, target)
        else:
            result = self._to_general(pcm, target)

        logger.debug(
            f"Transcoded {audio.encoding.value} {audio.sample_rate}Hz/{audio.channels}ch "
            f"-> {target.value} {result.sample_rate}Hz/{result.channels}ch "
            f"({len(result.data)} bytes)"
        )
        return result

    def _is_identity(self, audio: AudioData, target: AudioFormat) -> bool:
        if audio.encoding != target.encoding:
            return False
        if target.is_telephony:
            profile = target.profile
            return audio.sample_rate == profile.sample_rate and audio.channels == profile.channels
        return True

    def _to_pcm(self, audio: AudioData) -> AudioData:
        """Decode any accepted source to 16-bit PCM and validate its layout."""
        if audio.encoding not in SOURCE_ENCODINGS:
            raise UnsupportedConversionError(
                f"cannot transcode from {audio.encoding.value}; "
                "source must be PCM, WAV, μ-law or A-law"
            )

        if audio.encoding == AudioEncoding.WAV:
            try:
                pcm = read_wav(audio.data)
            except ValueError as e:
                raise UnsupportedConversionError(str(e)) from e
        elif audio.encoding == AudioEncoding.ULAW:
            pcm = self._expand(g711.ulaw_decode(audio.data), audio)
        elif audio.encoding == AudioEncoding.ALAW:
            pcm = self._expand(g711.alaw_decode(audio.data), audio)
        else:
            pcm = audio

        if pcm.sample_rate not in SUPPORTED_RATES:
            raise UnsupportedConversionError(f"unsupported sample rate: {pcm.sample_rate} Hz")
        if pcm.channels not in SUPPORTED_CHANNELS:
            raise UnsupportedConversionError(f"unsupported channel count: {pcm.channels}")
        if len(pcm.data) % (2 * pcm.channels):
            raise UnsupportedConversionError("PCM data is not a whole number of frames")
        if not pcm.data:
            raise UnsupportedConversionError("no audio to transcode")
        return pcm

    def _expand(self, samples: np.ndarray, audio: AudioData) -> AudioData:
        usable = len(samples) - len(samples) % audio.channels
        return from_samples(samples[:usable].reshape(-1, audio.channels), audio.sample_rate)

    def _to_telephony(self, pcm: AudioData, target: AudioFormat) -> AudioData:
        rate = target.profile.sample_rate
        mono = resample(downmix(to_samples(pcm)), pcm.sample_rate, rate)

        if target == AudioFormat.ULAW:
            data = g711.ulaw_encode(mono)
        elif target == AudioFormat.ALAW:
            data = g711.alaw_encode(mono)
        elif target == AudioFormat.GSM:
            data = self._encoder.encode(from_samples(mono, rate), AudioEncoding.GSM)
        else:
            raise TranscodeError(f"{target.value} is not a telephony format")

        return AudioData(data=data, encoding=target.encoding, sample_rate=rate, channels=1)

    def _to_general(self, pcm: AudioData, target: AudioFormat) -> AudioData:
        if target == AudioFormat.WAV:
            data = write_wav(pcm)
        else:
            data = self._encoder.encode(pcm, target.encoding)

        return AudioData(
            data=data,
            encoding=target.encoding,
            sample_rate=pcm.sample_rate,
            channels=pcm.channels,
        )


_default_transcoder: Transcoder | None = None


def transcode(audio: AudioData, target: AudioFormat | str) -> AudioData:
    """Convert audio to the target format with a shared default Transcoder."""
    global _default_transcoder
    if _default_transcoder is None:
        _default_transcoder = Transcoder()
    return _default_transcoder.transcode(audio, target)


__all__ = ["SUPPORTED_RATES", "Transcoder", "transcode", "TELEPHONY_RATE"]

"""16-bit PCM helpers: WAV container I/O, downmix and resampling."""

import io
import logging
import wave

import numpy as np

from .formats import AudioData, AudioEncoding

logger = logging.getLogger(__name__)


def read_wav(data: bytes) -> AudioData:
    """Extract 16-bit PCM from a RIFF/WAV byte string.

    8-bit WAV is widened to 16-bit. Streams whose header declares more data
    than is present (as written by engines piping to stdout) are read up to
    the end of the bytes.

    Args:
        data: Complete WAV file contents

    Returns:
        AudioData tagged PCM_S16LE

    Raises:
        ValueError: If the bytes are not a readable PCM WAV file
    """
    try:
        with wave.open(io.BytesIO(data), "rb") as wav_file:
            channels = wav_file.getnchannels()
            width = wav_file.getsampwidth()
            rate = wav_file.getframerate()
            frames = wav_file.readframes(wav_file.getnframes())
    except (wave.Error, EOFError) as e:
        raise ValueError(f"not a readable WAV stream: {e}") from e

    if width == 1:
        samples = (np.frombuffer(frames, dtype=np.uint8).astype(np.int16) - 128) << 8
        frames = samples.astype("<i2").tobytes()
    elif width != 2:
        raise ValueError(f"unsupported WAV sample width: {width * 8} bits")

    # Drop a trailing partial frame
    frame_size = 2 * channels
    frames = frames[: len(frames) - len(frames) % frame_size]

    return AudioData(
        data=frames,
        encoding=AudioEncoding.PCM_S16LE,
        sample_rate=rate,
        channels=channels,
    )


def write_wav(audio: AudioData) -> bytes:
    """Wrap 16-bit PCM in a RIFF/WAV container."""
    if audio.encoding != AudioEncoding.PCM_S16LE:
        raise ValueError(f"expected PCM_S16LE, got {audio.encoding.value}")

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(audio.channels)
        wav_file.setsampwidth(2)
        wav_file.setframerate(audio.sample_rate)
        wav_file.writeframes(audio.data)
    return buffer.getvalue()


def to_samples(audio: AudioData) -> np.ndarray:
    """Return PCM samples as an int16 array shaped (frames, channels)."""
    samples = np.frombuffer(audio.data, dtype="<i2")
    return samples.reshape(-1, audio.channels)


def from_samples(samples: np.ndarray, sample_rate: int) -> AudioData:
    """Build PCM AudioData from an int16 array shaped (frames, channels)."""
    if samples.ndim == 1:
        samples = samples.reshape(-1, 1)
    return AudioData(
        data=samples.astype("<i2").tobytes(),
        encoding=AudioEncoding.PCM_S16LE,
        sample_rate=sample_rate,
        channels=samples.shape[1],
    )


def downmix(samples: np.ndarray) -> np.ndarray:
    """Average all channels into one.

    Args:
        samples: int16 array shaped (frames, channels)

    Returns:
        int16 array shaped (frames,)
    """
    if samples.ndim == 1:
        return samples
    if samples.shape[1] == 1:
        return samples[:, 0]
    mixed = samples.astype(np.int32).sum(axis=1) // samples.shape[1]
    return mixed.astype(np.int16)


def resample(samples: np.ndarray, source_rate: int, target_rate: int) -> np.ndarray:
    """Resample a mono int16 signal.

    Downsampling first averages each output period (box filter) to limit
    aliasing, then both directions use linear interpolation on the output
    time grid. The result depends only on the input, so repeated runs are
    byte-identical.

    Args:
        samples: Mono int16 samples
        source_rate: Input rate in Hz
        target_rate: Output rate in Hz

    Returns:
        Resampled int16 samples
    """
    if source_rate == target_rate or len(samples) == 0:
        return samples

    signal = samples.astype(np.float64)

    if target_rate < source_rate:
        width = int(round(source_rate / target_rate))
        if width > 1:
            kernel = np.ones(width) / width
            signal = np.convolve(signal, kernel, mode="same")

    new_length = max(1, int(round(len(signal) * target_rate / source_rate)))
    source_times = np.arange(len(signal)) / source_rate
    target_times = np.arange(new_length) / target_rate
    resampled = np.interp(target_times, source_times, signal)

    logger.debug(f"Resampled {len(samples)} samples {source_rate}Hz -> {target_rate}Hz")
    return np.clip(np.round(resampled), -32768, 32767).astype(np.int16)


__all__ = ["downmix", "from_samples", "read_wav", "resample", "to_samples", "write_wav"]

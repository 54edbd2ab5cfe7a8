"""G.711 μ-law and A-law companding on numpy arrays.

Bit-exact with the ITU reference tables: each 16-bit sample maps to one
byte, so 8 kHz mono audio becomes a 64 kbit/s stream.
"""

import numpy as np

ULAW_BIAS = 0x84
ULAW_CLIP = 32635

_ULAW_EXPONENT_BOUNDS = np.array([2, 4, 8, 16, 32, 64, 128])
_ALAW_SEGMENT_ENDS = np.array([0x1F, 0x3F, 0x7F, 0xFF, 0x1FF, 0x3FF, 0x7FF, 0xFFF])


def ulaw_encode(samples: np.ndarray) -> bytes:
    """Compress int16 samples to μ-law bytes."""
    pcm = samples.astype(np.int32)
    sign = (pcm < 0).astype(np.int32) << 7
    magnitude = np.minimum(np.abs(pcm), ULAW_CLIP) + ULAW_BIAS

    exponent = np.searchsorted(_ULAW_EXPONENT_BOUNDS, magnitude >> 7, side="right")
    mantissa = (magnitude >> (exponent + 3)) & 0x0F
    encoded = ~(sign | (exponent << 4) | mantissa) & 0xFF
    return encoded.astype(np.uint8).tobytes()


def ulaw_decode(data: bytes) -> np.ndarray:
    """Expand μ-law bytes to int16 samples."""
    codes = ~np.frombuffer(data, dtype=np.uint8).astype(np.int32) & 0xFF
    sign = codes & 0x80
    exponent = (codes >> 4) & 0x07
    mantissa = codes & 0x0F

    magnitude = (((mantissa << 3) + ULAW_BIAS) << exponent) - ULAW_BIAS
    return np.where(sign != 0, -magnitude, magnitude).astype(np.int16)


def alaw_encode(samples: np.ndarray) -> bytes:
    """Compress int16 samples to A-law bytes."""
    pcm = samples.astype(np.int32) >> 3
    positive = pcm >= 0
    mask = np.where(positive, 0xD5, 0x55)
    pcm = np.where(positive, pcm, -pcm - 1)

    segment = np.searchsorted(_ALAW_SEGMENT_ENDS, pcm, side="left")
    shift = np.where(segment < 2, 1, segment)
    value = (np.minimum(segment, 7) << 4) | ((pcm >> shift) & 0x0F)
    value = np.where(segment >= 8, 0x7F, value)
    return (value ^ mask).astype(np.uint8).tobytes()


def alaw_decode(data: bytes) -> np.ndarray:
    """Expand A-law bytes to int16 samples."""
    codes = np.frombuffer(data, dtype=np.uint8).astype(np.int32) ^ 0x55
    mantissa = (codes & 0x0F) << 4
    segment = (codes & 0x70) >> 4

    magnitude = np.where(segment == 0, mantissa + 8, mantissa + 0x108)
    magnitude = np.where(segment > 1, magnitude << np.maximum(segment - 1, 0), magnitude)
    return np.where(codes & 0x80, magnitude, -magnitude).astype(np.int16)


__all__ = ["alaw_decode", "alaw_encode", "ulaw_decode", "ulaw_encode"]

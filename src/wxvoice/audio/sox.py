"""External encoder driven through the `sox` command.

Used for the formats without a numpy encoder here: GSM 06.10, MP3 and
Ogg Vorbis. PCM is piped in on stdin and the encoded stream is read from
stdout, so no temporary files are involved.
"""

import logging
import shutil
import subprocess

from ..errors import EncoderError
from .formats import AudioData, AudioEncoding

logger = logging.getLogger(__name__)

# Fixed encoder settings; together with -R these make output repeatable.
MP3_BITRATE_KBPS = 64
OGG_QUALITY = 4


class SoxEncoder:
    """Encodes 16-bit PCM with sox.

    Example:
        encoder = SoxEncoder()
        gsm = encoder.encode(pcm_8k_mono, AudioEncoding.GSM)
    """

    _TYPES = {
        AudioEncoding.GSM: "gsm",
        AudioEncoding.MP3: "mp3",
        AudioEncoding.OGG: "vorbis",
    }

    def __init__(self, command: str = "sox", timeout: float = 60.0) -> None:
        """Initialize the encoder.

        Args:
            command: sox executable name or path
            timeout: Seconds to wait for one conversion
        """
        self._command = command
        self._timeout = timeout

    @property
    def is_available(self) -> bool:
        return shutil.which(self._command) is not None

    def build_command(self, audio: AudioData, target: AudioEncoding) -> list[str]:
        """Build the sox argument list for one conversion."""
        if target not in self._TYPES:
            raise EncoderError(f"sox encoder does not handle {target.value}")

        cmd = [
            self._command,
            "-R",
            "-V1",
            "-t",
            "raw",
            "-e",
            "signed-integer",
            "-b",
            "16",
            "-L",
            "-r",
            str(audio.sample_rate),
            "-c",
            str(audio.channels),
            "-",
        ]

        if target == AudioEncoding.MP3:
            cmd += ["-C", str(MP3_BITRATE_KBPS)]
        elif target == AudioEncoding.OGG:
            cmd += ["-C", str(OGG_QUALITY)]

        cmd += ["-t", self._TYPES[target], "-"]
        return cmd

    def encode(self, audio: AudioData, target: AudioEncoding) -> bytes:
        """Encode PCM audio.

        Args:
            audio: PCM_S16LE input, already at the target rate and layout
            target: GSM, MP3 or OGG

        Returns:
            Encoded bytes from sox's stdout

        Raises:
            EncoderError: If sox is missing, fails, or produces nothing
        """
        if audio.encoding != AudioEncoding.PCM_S16LE:
            raise EncoderError(f"sox input must be PCM_S16LE, got {audio.encoding.value}")

        cmd = self.build_command(audio, target)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                input=audio.data,
                capture_output=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as e:
            raise EncoderError(f"{self._command} not found; install sox to encode {target.value}") from e
        except subprocess.TimeoutExpired as e:
            raise EncoderError(f"{self._command} timed out after {self._timeout}s") from e
        except OSError as e:
            raise EncoderError(f"failed to start {self._command}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise EncoderError(f"sox {target.value} conversion failed: {stderr}")
        if not result.stdout:
            raise EncoderError(f"sox produced no {target.value} output")

        return result.stdout


__all__ = ["MP3_BITRATE_KBPS", "OGG_QUALITY", "SoxEncoder"]

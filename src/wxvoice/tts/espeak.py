"""Local synthesizer using the eSpeak NG command.

Runs `espeak-ng` (or the older `espeak`) offline and reads the WAV stream
it writes to stdout.
"""

import logging
import shutil
import subprocess
import time

from ..audio.pcm import read_wav
from ..errors import EngineFailureError, EngineUnavailableError
from .synthesizer import SynthesisResult, VoiceParameters

logger = logging.getLogger(__name__)

ESPEAK_COMMANDS = ("espeak-ng", "espeak")


class EspeakSynthesizer:
    """Text-to-speech synthesizer using eSpeak.

    Uses a slow, widely spaced delivery by default, which carries well over
    narrowband radio links.
    """

    # Preset name -> eSpeak voice (language + variant)
    VOICES = {
        "default": "en-us",
        "us-female": "en-us+f3",
        "us-male": "en-us+m3",
        "uk-female": "en-gb+f3",
        "uk-male": "en-gb+m3",
    }

    DEFAULT_WORDS_PER_MINUTE = 120
    DEFAULT_PITCH = 50
    DEFAULT_GAP = 15

    MIN_WORDS_PER_MINUTE = 80
    MAX_WORDS_PER_MINUTE = 450

    def __init__(
        self,
        command: str | None = None,
        words_per_minute: int = DEFAULT_WORDS_PER_MINUTE,
        pitch: int = DEFAULT_PITCH,
        gap: int = DEFAULT_GAP,
        amplitude: int | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize eSpeak synthesizer.

        Args:
            command: Executable to run (default: first of espeak-ng, espeak on PATH)
            words_per_minute: Base speaking speed at rate 1.0
            pitch: Pitch, 0 to 99
            gap: Pause between words in units of 10 ms
            amplitude: Volume, 0 to 200 (eSpeak default when None)
            timeout: Seconds to wait for the engine
        """
        self._command = command or self._find_command()
        self._words_per_minute = words_per_minute
        self._pitch = pitch
        self._gap = gap
        self._amplitude = amplitude
        self._timeout = timeout

    @staticmethod
    def _find_command() -> str | None:
        for name in ESPEAK_COMMANDS:
            path = shutil.which(name)
            if path:
                return path
        return None

    @property
    def name(self) -> str:
        return "espeak"

    @property
    def is_available(self) -> bool:
        """Check if an eSpeak executable is on PATH."""
        return self._command is not None and shutil.which(self._command) is not None

    def build_command(self, text: str, voice: VoiceParameters) -> list[str]:
        """Build the eSpeak argument list for one call."""
        base_wpm = int(voice.option("words_per_minute", self._words_per_minute))
        wpm = int(round(base_wpm * voice.rate))
        wpm = max(self.MIN_WORDS_PER_MINUTE, min(self.MAX_WORDS_PER_MINUTE, wpm))
        pitch = max(0, min(99, int(voice.option("pitch", self._pitch))))
        gap = max(0, int(voice.option("gap", self._gap)))

        cmd = [
            self._command or ESPEAK_COMMANDS[0],
            "--stdout",
            "-v",
            self.VOICES.get(voice.voice.lower(), voice.voice),
            "-s",
            str(wpm),
            "-p",
            str(pitch),
            "-g",
            str(gap),
        ]

        amplitude = voice.option("amplitude", self._amplitude)
        if amplitude is not None:
            cmd += ["-a", str(max(0, min(200, int(amplitude))))]

        cmd.append(text or " ")
        return cmd

    def synthesize(self, text: str, voice: VoiceParameters | None = None) -> SynthesisResult:
        """Convert text to speech audio.

        Args:
            text: Text to synthesize
            voice: Voice selection

        Returns:
            SynthesisResult with PCM audio at eSpeak's native rate

        Raises:
            EngineUnavailableError: If eSpeak is not installed or cannot start
            EngineFailureError: If eSpeak fails or writes no usable audio
        """
        start_time = time.time()
        voice = voice or VoiceParameters()

        if self._command is None:
            raise EngineUnavailableError("eSpeak not available: espeak-ng/espeak command not found")

        cmd = self.build_command(text, voice)
        logger.debug(f"Running: {' '.join(cmd[:-1])} <{len(text)} chars>")

        try:
            result = subprocess.run(cmd, capture_output=True, timeout=self._timeout)
        except FileNotFoundError as e:
            raise EngineUnavailableError(f"eSpeak not available: {self._command} not found") from e
        except subprocess.TimeoutExpired as e:
            raise EngineFailureError(f"eSpeak timed out after {self._timeout}s") from e
        except OSError as e:
            raise EngineUnavailableError(f"failed to start eSpeak: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise EngineFailureError(f"eSpeak exited with status {result.returncode}: {stderr}")
        if not result.stdout:
            raise EngineFailureError("eSpeak produced no audio")

        try:
            audio = read_wav(result.stdout)
        except ValueError as e:
            raise EngineFailureError(f"eSpeak output is not valid WAV: {e}") from e

        if not audio.data:
            raise EngineFailureError("eSpeak produced an empty WAV stream")

        latency_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            f"Synthesized '{text[:30]}...' in {latency_ms}ms ({audio.duration_ms}ms audio)"
        )

        return SynthesisResult(audio=audio, latency_ms=latency_ms, backend=self.name)


__all__ = ["ESPEAK_COMMANDS", "EspeakSynthesizer"]

"""Remote synthesizer using the Google Cloud Text-to-Speech REST API.

Requests LINEAR16 audio (a WAV file, base64 encoded in the response) and
returns its PCM samples.

API docs: https://cloud.google.com/text-to-speech/docs/reference/rest/v1/text/synthesize
"""

import base64
import binascii
import logging
import os
import time
from typing import Any, Callable

import httpx

from ..audio.formats import AudioData, AudioEncoding
from ..audio.pcm import read_wav
from ..errors import (
    AuthenticationError,
    EngineFailureError,
    NetworkError,
    QuotaError,
)
from .synthesizer import SynthesisResult, VoiceParameters

logger = logging.getLogger(__name__)

GOOGLE_TTS_URL = "https://texttospeech.googleapis.com/v1/text:synthesize"
GOOGLE_API_KEY_ENV = "GOOGLE_CLOUD_API_KEY"
GOOGLE_TIMEOUT = 10.0  # seconds


class GoogleSynthesizer:
    """Text-to-speech synthesizer using Google Cloud neural voices.

    Connection failures, timeouts and 5xx responses are retried up to
    ``max_attempts`` times with a linearly growing delay. Credential and
    quota rejections are raised after the first call.
    """

    # Preset name -> (voice name, language code)
    VOICES = {
        "default": ("en-US-Neural2-F", "en-US"),
        "us-female": ("en-US-Neural2-F", "en-US"),
        "us-male": ("en-US-Neural2-D", "en-US"),
        "uk-female": ("en-GB-Neural2-A", "en-GB"),
        "uk-male": ("en-GB-Neural2-B", "en-GB"),
    }

    DEFAULT_SAMPLE_RATE = 24000

    def __init__(
        self,
        api_key: str | None = None,
        api_key_env: str = GOOGLE_API_KEY_ENV,
        url: str = GOOGLE_TTS_URL,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        timeout: float = GOOGLE_TIMEOUT,
        max_attempts: int = 3,
        retry_delay: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize Google synthesizer.

        Args:
            api_key: API key. If not provided, read from ``api_key_env``.
            api_key_env: Environment variable holding the API key
            url: Synthesize endpoint
            sample_rate: Requested output sample rate in Hz
            timeout: Per-request timeout in seconds
            max_attempts: Total tries for retryable failures
            retry_delay: Base delay between tries; attempt n waits n * delay
            sleep: Sleep function (replaced in tests)
            transport: Optional httpx transport (replaced in tests)
        """
        self._api_key = api_key or os.environ.get(api_key_env)
        self._api_key_env = api_key_env
        self._url = url
        self._sample_rate = sample_rate
        self._timeout = timeout
        self._max_attempts = max(1, max_attempts)
        self._retry_delay = retry_delay
        self._sleep = sleep
        self._transport = transport

    @property
    def name(self) -> str:
        return "google"

    @property
    def is_available(self) -> bool:
        """Check if an API key is configured."""
        return bool(self._api_key)

    def build_request(self, text: str, voice: VoiceParameters) -> dict[str, Any]:
        """Build the JSON request body."""
        preset = self.VOICES.get(voice.voice.lower())
        if preset is not None:
            voice_name, language_code = preset
        else:
            # Raw voice id such as "en-AU-Neural2-B"
            voice_name = voice.voice
            language_code = "-".join(voice.voice.split("-")[:2])
        language_code = voice.option("language_code", language_code)

        audio_config: dict[str, Any] = {
            "audioEncoding": "LINEAR16",
            "sampleRateHertz": self._sample_rate,
            "speakingRate": voice.rate,
        }
        if voice.option("pitch") is not None:
            audio_config["pitch"] = float(voice.option("pitch"))
        if voice.option("volume_gain_db") is not None:
            audio_config["volumeGainDb"] = float(voice.option("volume_gain_db"))
        if voice.option("effects_profile_id"):
            profile = voice.option("effects_profile_id")
            audio_config["effectsProfileId"] = [profile] if isinstance(profile, str) else list(profile)

        return {
            "input": {"text": text},
            "voice": {"languageCode": language_code, "name": voice_name},
            "audioConfig": audio_config,
        }

    def synthesize(self, text: str, voice: VoiceParameters | None = None) -> SynthesisResult:
        """Convert text to speech audio.

        Args:
            text: Text to synthesize
            voice: Voice selection

        Returns:
            SynthesisResult with PCM audio

        Raises:
            AuthenticationError: If the key is missing or rejected
            QuotaError: If the service reports rate or quota exhaustion
            NetworkError: If every attempt failed to reach the service
            EngineFailureError: If the service rejects the request or
                returns unusable audio
        """
        if not self._api_key:
            raise AuthenticationError(f"Google TTS API key not configured (set {self._api_key_env})")

        voice = voice or VoiceParameters()
        payload = self.build_request(text, voice)
        start_time = time.time()
        last_error: NetworkError | None = None

        for attempt in range(self._max_attempts):
            try:
                audio = self._make_request(payload)
            except NetworkError as e:
                last_error = e
                logger.warning(f"Google TTS network error (attempt {attempt + 1}/{self._max_attempts}): {e}")
                if attempt + 1 < self._max_attempts:
                    self._sleep(self._retry_delay * (attempt + 1))
                continue

            latency_ms = int((time.time() - start_time) * 1000)
            logger.debug(
                f"Google TTS synthesized '{text[:30]}...' in {latency_ms}ms "
                f"({audio.duration_ms}ms audio)"
            )
            return SynthesisResult(audio=audio, latency_ms=latency_ms, backend=self.name)

        raise NetworkError(
            f"Google TTS unreachable after {self._max_attempts} attempts: {last_error}",
            attempts=self._max_attempts,
        )

    def _make_request(self, payload: dict[str, Any]) -> AudioData:
        """Make one API request and decode the audio.

        Raises:
            NetworkError: On transport failures, timeouts and 5xx responses
        """
        headers = {
            "X-Goog-Api-Key": self._api_key,
            "Content-Type": "application/json; charset=utf-8",
        }

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(self._url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            raise NetworkError(f"request timed out: {e}") from e
        except httpx.TransportError as e:
            raise NetworkError(f"request failed: {e}") from e

        self._check_status(response)

        try:
            content = response.json()["audioContent"]
            wav_bytes = base64.b64decode(content, validate=True)
        except (ValueError, KeyError, TypeError, binascii.Error) as e:
            raise EngineFailureError(f"unexpected Google TTS response: {e}") from e

        if wav_bytes[:4] == b"RIFF":
            try:
                audio = read_wav(wav_bytes)
            except ValueError as e:
                raise EngineFailureError(f"Google TTS returned unreadable audio: {e}") from e
        else:
            audio = AudioData(
                data=wav_bytes[: len(wav_bytes) - len(wav_bytes) % 2],
                encoding=AudioEncoding.PCM_S16LE,
                sample_rate=self._sample_rate,
                channels=1,
            )

        if not audio.data:
            raise EngineFailureError("Google TTS returned no audio")
        return audio

    def _check_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return

        detail = _error_message(response)
        if status in (401, 403):
            raise AuthenticationError(f"Google TTS rejected the API key ({status}): {detail}")
        if status == 429 or "RESOURCE_EXHAUSTED" in response.text or "quota" in detail.lower():
            raise QuotaError(f"Google TTS quota exceeded ({status}): {detail}", status_code=status)
        if status >= 500:
            raise NetworkError(f"Google TTS server error ({status}): {detail}")
        raise EngineFailureError(f"Google TTS API error ({status}): {detail}")


def _error_message(response: httpx.Response) -> str:
    """Extract the error message from a Google API error body."""
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return response.text.strip() or response.reason_phrase


__all__ = ["GOOGLE_API_KEY_ENV", "GOOGLE_TTS_URL", "GoogleSynthesizer"]

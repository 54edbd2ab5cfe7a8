"""Pipeline driver: raw report to announcement text or encoded audio.

A run walks FETCHED -> DECODED -> FORMATTED and then either stops at
TEXT_OUTPUT or continues SYNTHESIZED -> TRANSCODED -> AUDIO_OUTPUT. Any
stage failure moves the run to FAILED and no later stage runs.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from .announce import AnnouncementFormatter, AnnouncementStyle
from .audio.formats import AudioData, AudioFormat
from .audio.output import DEFAULT_FILE_MODE, write_audio_file
from .audio.transcoder import Transcoder
from .errors import PipelineCancelledError, WxVoiceError
from .metar import MetarDecoder, Observation
from .tts.synthesizer import SynthesisResult, Synthesizer, VoiceParameters

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """States of one pipeline run."""

    FETCHED = "fetched"
    DECODED = "decoded"
    FORMATTED = "formatted"
    TEXT_OUTPUT = "text_output"
    SYNTHESIZED = "synthesized"
    TRANSCODED = "transcoded"
    AUDIO_OUTPUT = "audio_output"
    FAILED = "failed"


class CancellationToken:
    """Cooperative cancellation checked at every stage boundary.

    A token is cancelled explicitly with cancel() or implicitly once its
    deadline passes.

    Example:
        token = CancellationToken(timeout=30)
        result = pipeline.run(raw, "speech", audio_format="wav", cancel=token)
    """

    def __init__(
        self,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the token.

        Args:
            timeout: Seconds from now until the token expires (None: never)
            clock: Monotonic clock (replaced in tests)
        """
        self._clock = clock
        self._deadline = clock() + timeout if timeout is not None else None
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def expired(self) -> bool:
        return self._deadline is not None and self._clock() >= self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled or self.expired

    def check(self, stage: str) -> None:
        """Raise if the token is cancelled.

        Raises:
            PipelineCancelledError: If cancelled or past the deadline
        """
        if self._cancelled:
            raise PipelineCancelledError(f"cancelled before {stage}")
        if self.expired:
            raise PipelineCancelledError(f"deadline passed before {stage}")


@dataclass
class PipelineResult:
    """Outcome of one pipeline run.

    Attributes:
        state: Final state (TEXT_OUTPUT, AUDIO_OUTPUT or FAILED)
        transitions: States visited, in order
        observation: Decoded observation, if decoding succeeded
        text: Announcement text, if formatting succeeded
        synthesis: Native engine output, if synthesis succeeded
        audio: Encoded audio, if transcoding succeeded
        output_path: File written, if any
        stage: Name of the stage that failed
        error: The failure
    """

    state: PipelineState
    transitions: list[PipelineState] = field(default_factory=list)
    observation: Observation | None = None
    text: str | None = None
    synthesis: SynthesisResult | None = None
    audio: AudioData | None = None
    output_path: Path | None = None
    stage: str | None = None
    error: WxVoiceError | None = None

    @property
    def succeeded(self) -> bool:
        return self.state != PipelineState.FAILED

    def raise_for_error(self) -> None:
        """Re-raise the failure of a failed run."""
        if self.error is not None:
            raise self.error


class WeatherPipeline:
    """Runs decode, format, synthesize, transcode and output for one report.

    Runs share no mutable state; one pipeline can serve many runs.
    """

    def __init__(
        self,
        synthesizer: Synthesizer | None = None,
        transcoder: Transcoder | None = None,
        formatter: AnnouncementFormatter | None = None,
        decoder: MetarDecoder | None = None,
        file_mode: int = DEFAULT_FILE_MODE,
    ) -> None:
        """Initialize the pipeline.

        Args:
            synthesizer: Speech engine; without one runs stop at TEXT_OUTPUT
            transcoder: Audio transcoder (default: sox-backed Transcoder)
            formatter: Announcement formatter
            decoder: Report decoder
            file_mode: Permission bits for written audio files
        """
        self._synthesizer = synthesizer
        self._transcoder = transcoder or Transcoder()
        self._formatter = formatter or AnnouncementFormatter()
        self._decoder = decoder or MetarDecoder()
        self._file_mode = file_mode

    @property
    def synthesizer(self) -> Synthesizer | None:
        return self._synthesizer

    def run(
        self,
        raw: str,
        style: AnnouncementStyle | str,
        voice: VoiceParameters | None = None,
        audio_format: AudioFormat | str | None = None,
        output_path: str | Path | None = None,
        cancel: CancellationToken | None = None,
        station_name: str | None = None,
    ) -> PipelineResult:
        """Run the pipeline for one raw report.

        Args:
            raw: Raw report text
            style: Announcement style
            voice: Voice selection for synthesis
            audio_format: Output format; None stops after formatting
            output_path: File to write the encoded audio to
            cancel: Cancellation token checked between stages
            station_name: Station display name for the announcement

        Returns:
            PipelineResult. Stage failures are reported in the result, not
            raised; use raise_for_error() to raise them.

        Raises:
            ValueError: If style or audio_format names are unknown
        """
        style = AnnouncementStyle.parse(style)
        target = AudioFormat.parse(audio_format) if audio_format is not None else None
        cancel = cancel or CancellationToken()

        result = PipelineResult(state=PipelineState.FETCHED)
        result.transitions.append(PipelineState.FETCHED)
        stage = "decode"

        def advance(state: PipelineState) -> None:
            result.state = state
            result.transitions.append(state)
            logger.debug(f"Pipeline -> {state.value}")

        try:
            cancel.check(stage)
            result.observation = self._decoder.decode(raw)
            advance(PipelineState.DECODED)

            stage = "format"
            cancel.check(stage)
            result.text = self._formatter.format(
                result.observation, style, station_name=station_name
            )
            advance(PipelineState.FORMATTED)

            if self._synthesizer is None or target is None:
                advance(PipelineState.TEXT_OUTPUT)
                return result

            stage = "synthesize"
            cancel.check(stage)
            result.synthesis = self._synthesizer.synthesize(result.text, voice)
            advance(PipelineState.SYNTHESIZED)

            stage = "transcode"
            cancel.check(stage)
            result.audio = self._transcoder.transcode(result.synthesis.audio, target)
            advance(PipelineState.TRANSCODED)

            stage = "output"
            cancel.check(stage)
            if output_path is not None:
                result.output_path = write_audio_file(result.audio, output_path, self._file_mode)
            advance(PipelineState.AUDIO_OUTPUT)

        except WxVoiceError as e:
            logger.error(f"Pipeline failed at {stage}: {e.kind}: {e}")
            result.stage = stage
            result.error = e
            advance(PipelineState.FAILED)
            return result

        logger.info(
            f"Announcement ready: {target.value}, {len(result.audio.data)} bytes"
            f" via {result.synthesis.backend} in {result.synthesis.latency_ms}ms"
        )
        return result


__all__ = ["CancellationToken", "PipelineResult", "PipelineState", "WeatherPipeline"]

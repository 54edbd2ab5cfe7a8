"""Integration tests for the report-to-audio pipeline."""

import stat
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from wxvoice.audio.formats import AudioEncoding, AudioFormat
from wxvoice.audio.g711 import ulaw_decode
from wxvoice.audio.pcm import read_wav
from wxvoice.audio.sox import SoxEncoder
from wxvoice.audio.transcoder import Transcoder
from wxvoice.errors import (
    AuthenticationError,
    EncoderError,
    MalformedReportError,
    OutputError,
    PipelineCancelledError,
)
from wxvoice.metar import MetarDecoder
from wxvoice.pipeline import CancellationToken, PipelineState, WeatherPipeline
from wxvoice.tts import MockSynthesizer, VoiceParameters

REFERENCE = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
RAW = "KSJC 011853Z 28010KT 10SM CLR 22/14 A3012 RMK AO2"

TEXT_PATH = [
    PipelineState.FETCHED,
    PipelineState.DECODED,
    PipelineState.FORMATTED,
    PipelineState.TEXT_OUTPUT,
]

AUDIO_PATH = [
    PipelineState.FETCHED,
    PipelineState.DECODED,
    PipelineState.FORMATTED,
    PipelineState.SYNTHESIZED,
    PipelineState.TRANSCODED,
    PipelineState.AUDIO_OUTPUT,
]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class SlowSynthesizer(MockSynthesizer):
    """Mock synthesizer whose call takes a fixed amount of fake time."""

    def __init__(self, clock: FakeClock, seconds: float) -> None:
        super().__init__()
        self._clock = clock
        self._seconds = seconds

    def synthesize(self, text, voice=None):
        self._clock.now += self._seconds
        return super().synthesize(text, voice)


@pytest.fixture
def synthesizer() -> MockSynthesizer:
    return MockSynthesizer(sample_rate=16000)


@pytest.fixture
def encoder() -> MagicMock:
    mock = MagicMock(spec=SoxEncoder)
    mock.encode.return_value = b"\x00" * 66
    return mock


def _pipeline(synthesizer=None, encoder=None) -> WeatherPipeline:
    return WeatherPipeline(
        synthesizer=synthesizer,
        transcoder=Transcoder(encoder=encoder or MagicMock(spec=SoxEncoder)),
        decoder=MetarDecoder(reference=REFERENCE),
    )


class TestTextFlow:
    """Runs that stop after formatting."""

    def test_text_only(self) -> None:
        result = _pipeline().run(RAW, "brief")

        assert result.state == PipelineState.TEXT_OUTPUT
        assert result.transitions == TEXT_PATH
        assert result.text == "Weather for K S J C. Wind ten knots."
        assert result.observation.station == "KSJC"
        assert result.audio is None
        assert result.succeeded

    def test_no_format_skips_synthesis(self, synthesizer: MockSynthesizer) -> None:
        result = _pipeline(synthesizer).run(RAW, "aviation")

        assert result.transitions == TEXT_PATH
        assert synthesizer.call_count == 0

    def test_station_name(self) -> None:
        result = _pipeline().run(RAW, "speech", station_name="San Jose Intl")
        assert result.text.startswith("Here is the current weather for San Jose International,")

    def test_unknown_style_raises(self) -> None:
        with pytest.raises(ValueError):
            _pipeline().run(RAW, "poetry")


class TestAudioFlow:
    """Runs through synthesis, transcoding and output."""

    def test_ulaw(self, synthesizer: MockSynthesizer) -> None:
        result = _pipeline(synthesizer).run(RAW, "aviation", audio_format="ulaw")

        assert result.state == PipelineState.AUDIO_OUTPUT
        assert result.transitions == AUDIO_PATH
        assert result.audio.encoding == AudioEncoding.ULAW
        assert (result.audio.sample_rate, result.audio.channels) == (8000, 1)
        assert synthesizer.synthesized_texts == [result.text]
        # 16 kHz source halves into one byte per 8 kHz sample
        assert len(result.audio.data) == len(result.synthesis.audio.data) // 4
        assert ulaw_decode(result.audio.data).any()

    def test_wav_keeps_engine_rate(self, synthesizer: MockSynthesizer) -> None:
        result = _pipeline(synthesizer).run(RAW, "speech", audio_format=AudioFormat.WAV)

        assert result.audio.encoding == AudioEncoding.WAV
        assert read_wav(result.audio.data) == result.synthesis.audio

    def test_voice_is_passed_to_engine(self, synthesizer: MockSynthesizer) -> None:
        voice = VoiceParameters(voice="uk-male", rate=1.5)
        _pipeline(synthesizer).run(RAW, "brief", voice=voice, audio_format="alaw")
        assert synthesizer.voices == [voice]

    def test_gsm_scenario(self, synthesizer: MockSynthesizer, encoder: MagicMock) -> None:
        result = _pipeline(synthesizer, encoder).run(RAW, "aviation", audio_format="gsm")

        pcm, target = encoder.encode.call_args.args
        assert target == AudioEncoding.GSM
        assert (pcm.sample_rate, pcm.channels) == (8000, 1)
        assert result.audio.encoding == AudioEncoding.GSM
        assert "two eight zero" in result.text
        assert "one zero" in result.text
        assert "three zero one two" in result.text
        assert "AO2" not in result.text

    def test_writes_output_file(self, synthesizer: MockSynthesizer, tmp_path: Path) -> None:
        path = tmp_path / "wx.ulaw"
        result = _pipeline(synthesizer).run(RAW, "brief", audio_format="ulaw", output_path=path)

        assert result.output_path == path
        assert path.read_bytes() == result.audio.data
        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_repeatable(self, synthesizer: MockSynthesizer) -> None:
        pipeline = _pipeline(synthesizer)
        first = pipeline.run(RAW, "detailed", audio_format="ulaw")
        second = pipeline.run(RAW, "detailed", audio_format="ulaw")
        assert first.audio.data == second.audio.data


class TestFailures:
    """Stage failures end the run in FAILED."""

    def test_decode_failure(self, synthesizer: MockSynthesizer) -> None:
        result = _pipeline(synthesizer).run("KSJC GARBAGE", "brief", audio_format="ulaw")

        assert result.state == PipelineState.FAILED
        assert result.transitions == [PipelineState.FETCHED, PipelineState.FAILED]
        assert result.stage == "decode"
        assert isinstance(result.error, MalformedReportError)
        assert synthesizer.call_count == 0
        assert not result.succeeded

    def test_synthesis_failure_writes_nothing(self, synthesizer: MockSynthesizer, tmp_path: Path) -> None:
        synthesizer.fail_with(AuthenticationError("API key rejected"))
        path = tmp_path / "wx.ulaw"

        result = _pipeline(synthesizer).run(RAW, "brief", audio_format="ulaw", output_path=path)

        assert result.stage == "synthesize"
        assert result.text is not None
        assert result.synthesis is None
        assert not path.exists()

    def test_transcode_failure(self, synthesizer: MockSynthesizer, encoder: MagicMock) -> None:
        encoder.encode.side_effect = EncoderError("sox not found")
        result = _pipeline(synthesizer, encoder).run(RAW, "brief", audio_format="mp3")

        assert result.stage == "transcode"
        assert result.synthesis is not None
        assert result.audio is None

    def test_output_failure(self, synthesizer: MockSynthesizer, tmp_path: Path) -> None:
        path = tmp_path / "missing" / "wx.ulaw"
        result = _pipeline(synthesizer).run(RAW, "brief", audio_format="ulaw", output_path=path)

        assert result.stage == "output"
        assert isinstance(result.error, OutputError)
        assert result.audio is not None

    def test_raise_for_error(self) -> None:
        result = _pipeline().run("", "brief")
        with pytest.raises(MalformedReportError):
            result.raise_for_error()


class TestCancellation:
    """Cancellation is observed at stage boundaries."""

    def test_cancelled_before_start(self, synthesizer: MockSynthesizer) -> None:
        token = CancellationToken()
        token.cancel()

        result = _pipeline(synthesizer).run(RAW, "brief", audio_format="ulaw", cancel=token)

        assert result.stage == "decode"
        assert isinstance(result.error, PipelineCancelledError)
        assert result.observation is None
        assert synthesizer.call_count == 0

    def test_deadline_already_passed(self, synthesizer: MockSynthesizer) -> None:
        clock = FakeClock()
        token = CancellationToken(timeout=5, clock=clock)
        clock.now += 10

        result = _pipeline(synthesizer).run(RAW, "brief", audio_format="ulaw", cancel=token)

        assert "deadline" in str(result.error)
        assert synthesizer.call_count == 0

    def test_deadline_passes_during_synthesis(self, tmp_path: Path) -> None:
        clock = FakeClock()
        synthesizer = SlowSynthesizer(clock, seconds=30)
        token = CancellationToken(timeout=10, clock=clock)
        path = tmp_path / "wx.ulaw"

        result = _pipeline(synthesizer).run(
            RAW, "brief", audio_format="ulaw", output_path=path, cancel=token
        )

        assert result.transitions[-2:] == [PipelineState.SYNTHESIZED, PipelineState.FAILED]
        assert result.stage == "transcode"
        assert isinstance(result.error, PipelineCancelledError)
        assert result.audio is None
        assert not path.exists()

    def test_within_deadline(self, synthesizer: MockSynthesizer) -> None:
        clock = FakeClock()
        token = CancellationToken(timeout=10, clock=clock)
        result = _pipeline(synthesizer).run(RAW, "brief", audio_format="ulaw", cancel=token)
        assert result.state == PipelineState.AUDIO_OUTPUT
        assert not token.cancelled

"""Integration tests for the weather and speak-weather commands."""

from pathlib import Path
from unittest.mock import patch

import pytest

from wxvoice.__main__ import build_speak_parser, run_speak, run_weather
from wxvoice.audio import allocate_output_path
from wxvoice.errors import AuthenticationError, FeedError, PlaybackError
from wxvoice.feed import StationReport
from wxvoice.tts import MockSynthesizer

RAW = "KSJC 011853Z 28010KT 10SM CLR 22/14 A3012 RMK AO2"
COMMON = ["--metar", RAW, "--profile", "test"]


def _allocate_in(root: Path):
    """Allocate playback files under a test directory."""

    def allocate(audio_format, directory=None):
        return allocate_output_path(audio_format, directory=root)

    return allocate


class TestWeatherCommand:
    """Tests for `weather`."""

    def test_prints_announcement(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_weather(["KSJC", "-f", "brief", *COMMON]) == 0
        assert capsys.readouterr().out.strip() == "Weather for K S J C. Wind ten knots."

    def test_decode_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = run_weather(["KSJC", "--metar", "KSJC GARBAGE", "--profile", "test"])

        assert code == 1
        assert capsys.readouterr().err.startswith("error: [decode] MalformedReportError:")

    def test_unsupported_report(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = run_weather(["KSJC", "--metar", "TAF KSJC 011730Z", "--profile", "test"])

        assert code == 1
        assert "UnsupportedReportError" in capsys.readouterr().err

    def test_fetches_from_feed(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("wxvoice.__main__.AviationWeatherClient") as mock_client:
            mock_client.return_value.fetch.return_value = StationReport("KSJC", RAW, "San Jose Intl, CA, US")
            code = run_weather(["ksjc", "-f", "speech", "--profile", "test"])

        assert code == 0
        mock_client.return_value.fetch.assert_called_once_with("ksjc")
        assert "San Jose International" in capsys.readouterr().out

    def test_feed_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("wxvoice.__main__.AviationWeatherClient") as mock_client:
            mock_client.return_value.fetch.side_effect = FeedError("no weather data found for ICAO: KXXX")
            code = run_weather(["KXXX", "--profile", "test"])

        assert code == 1
        assert capsys.readouterr().err.strip() == (
            "error: [fetch] FeedError: no weather data found for ICAO: KXXX"
        )

    def test_bad_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("wxvoice:\n  espeak:\n    speed: 200\n")

        code = run_weather(["KSJC", "--metar", RAW, "--config", str(path)])

        assert code == 1
        assert capsys.readouterr().err.startswith("error: [config] ConfigError:")

    def test_bad_style_in_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "site.yaml"
        path.write_text("wxvoice:\n  announcement:\n    style: poetry\n")

        code = run_weather(["KSJC", "--metar", RAW, "--config", str(path)])

        assert code == 1
        assert "unknown announcement style" in capsys.readouterr().err


class TestSpeakTextEngine:
    """Tests for `speak-weather text`."""

    def test_prints_text(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_speak(["text", "KSJC", "-f", "aviation", *COMMON]) == 0
        out = capsys.readouterr().out
        assert "two eight zero" in out
        assert "AO2" not in out

    def test_writes_text_file(self, tmp_path: Path) -> None:
        path = tmp_path / "wx.txt"
        assert run_speak(["text", "KSJC", "-f", "brief", "-o", str(path), *COMMON]) == 0
        assert path.read_text() == "Weather for K S J C. Wind ten knots.\n"


class TestSpeakAudio:
    """Tests for `speak-weather espeak|google`."""

    def test_saves_ulaw_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("wxvoice.__main__.create_synthesizer", return_value=MockSynthesizer()):
            code = run_speak(["espeak", "KSJC", "-a", "ulaw", "-o", str(tmp_path / "wx"), *COMMON])

        assert code == 0
        output = tmp_path / "wx.ulaw"
        assert output.stat().st_size > 0
        assert f"Audio saved to: {output}" in capsys.readouterr().out

    def test_engine_default_format(self, tmp_path: Path) -> None:
        with patch("wxvoice.__main__.create_synthesizer", return_value=MockSynthesizer()):
            assert run_speak(["espeak", "KSJC", "-o", str(tmp_path / "wx"), *COMMON]) == 0
        assert (tmp_path / "wx.wav").exists()

    def test_plays_and_keeps_handed_file(self, tmp_path: Path) -> None:
        with (
            patch("wxvoice.__main__.create_synthesizer", return_value=MockSynthesizer()),
            patch("wxvoice.__main__.allocate_output_path", side_effect=_allocate_in(tmp_path)),
            patch("wxvoice.__main__.CommandPlayback") as mock_playback,
        ):
            player = mock_playback.return_value

            code = run_speak(["google", "KSJC", "-a", "mulaw", "--endpoint", "65314", *COMMON])

        assert code == 0
        path = player.play_file.call_args.args[0]
        assert path.suffix == ".ulaw"
        assert path.parent == tmp_path
        # Playback systems such as Asterisk only queue the file
        assert path.exists()
        assert path.stat().st_size > 0
        assert player.play_file.call_args.kwargs["endpoint"] == "65314"

    def test_removes_file_when_pipeline_fails(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        synth = MockSynthesizer()
        synth.fail_with(AuthenticationError("Google TTS API key not configured"))

        with (
            patch("wxvoice.__main__.create_synthesizer", return_value=synth),
            patch("wxvoice.__main__.allocate_output_path", side_effect=_allocate_in(tmp_path)),
            patch("wxvoice.__main__.CommandPlayback") as mock_playback,
        ):
            code = run_speak(["google", "KSJC", "-a", "ulaw", *COMMON])

        assert code == 1
        assert capsys.readouterr().err.startswith("error: [synthesize] AuthenticationError:")
        mock_playback.return_value.play_file.assert_not_called()
        assert list(tmp_path.iterdir()) == []

    def test_removes_file_when_playback_fails(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with (
            patch("wxvoice.__main__.create_synthesizer", return_value=MockSynthesizer()),
            patch("wxvoice.__main__.allocate_output_path", side_effect=_allocate_in(tmp_path)),
            patch("wxvoice.__main__.CommandPlayback") as mock_playback,
        ):
            mock_playback.return_value.play_file.side_effect = PlaybackError("asterisk exited with status 1")
            code = run_speak(["espeak", "KSJC", "-a", "ulaw", *COMMON])

        assert code == 1
        assert capsys.readouterr().err.startswith("error: [playback] PlaybackError:")
        assert list(tmp_path.iterdir()) == []

    def test_timeout_overrides_engine_timeout(self, tmp_path: Path) -> None:
        with patch("wxvoice.__main__.create_synthesizer", return_value=MockSynthesizer()) as factory:
            run_speak(["espeak", "KSJC", "--timeout", "5", "-o", str(tmp_path / "wx"), *COMMON])

        config = factory.call_args.args[1]
        assert config.espeak.timeout == 5.0

    def test_voice_options(self, tmp_path: Path) -> None:
        synth = MockSynthesizer()
        with patch("wxvoice.__main__.create_synthesizer", return_value=synth):
            run_speak(
                ["espeak", "KSJC", "-v", "uk-male", "-s", "160", "-o", str(tmp_path / "wx"), *COMMON]
            )

        voice = synth.voices[0]
        assert voice.voice == "uk-male"
        assert voice.option("words_per_minute") == 160
        assert voice.option("pitch") == 50


class TestParser:
    """Tests for the speak-weather argument parser."""

    def test_engine_required(self) -> None:
        with pytest.raises(SystemExit):
            build_speak_parser().parse_args(["KSJC"])

    def test_rejects_unknown_format(self) -> None:
        with pytest.raises(SystemExit):
            build_speak_parser().parse_args(["espeak", "KSJC", "-a", "flac"])

    def test_google_options(self) -> None:
        args = build_speak_parser().parse_args(["google", "KSJC", "--rate", "1.2", "--pitch", "-2"])
        assert args.engine == "google"
        assert args.rate == 1.2
        assert args.pitch == -2.0


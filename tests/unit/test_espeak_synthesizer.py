"""Unit tests for the eSpeak synthesizer."""

import shutil
import subprocess
from unittest.mock import patch

import numpy as np
import pytest

from wxvoice.audio.formats import AudioData, AudioEncoding
from wxvoice.audio.pcm import write_wav
from wxvoice.errors import EngineFailureError, EngineUnavailableError
from wxvoice.tts import EspeakSynthesizer, VoiceParameters

PCM = AudioData(
    data=np.arange(-500, 500, dtype="<i2").tobytes(),
    encoding=AudioEncoding.PCM_S16LE,
    sample_rate=22050,
)


def _completed(returncode: int = 0, stdout: bytes = b"", stderr: bytes = b"") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=["espeak-ng"], returncode=returncode, stdout=stdout, stderr=stderr)


class TestEspeakSynthesizerInit:
    """Tests for EspeakSynthesizer initialization."""

    def test_finds_espeak_ng_first(self) -> None:
        with patch("wxvoice.tts.espeak.shutil.which", side_effect=lambda name: f"/usr/bin/{name}"):
            synth = EspeakSynthesizer()
            assert synth.build_command("hi", VoiceParameters())[0] == "/usr/bin/espeak-ng"
            assert synth.is_available is True

    def test_falls_back_to_espeak(self) -> None:
        def which(name: str) -> str | None:
            return "/usr/bin/espeak" if name == "espeak" else None

        with patch("wxvoice.tts.espeak.shutil.which", side_effect=which):
            synth = EspeakSynthesizer()
            assert synth.build_command("hi", VoiceParameters())[0] == "/usr/bin/espeak"

    def test_not_available(self) -> None:
        with patch("wxvoice.tts.espeak.shutil.which", return_value=None):
            synth = EspeakSynthesizer()
            assert synth.is_available is False
            assert synth.name == "espeak"


class TestBuildCommand:
    """Tests for the eSpeak argument list."""

    def test_defaults(self) -> None:
        cmd = EspeakSynthesizer(command="espeak-ng").build_command("Wind calm.", VoiceParameters())
        assert cmd == [
            "espeak-ng",
            "--stdout",
            "-v",
            "en-us",
            "-s",
            "120",
            "-p",
            "50",
            "-g",
            "15",
            "Wind calm.",
        ]

    @pytest.mark.parametrize(
        ("preset", "voice"),
        [("us-female", "en-us+f3"), ("us-male", "en-us+m3"), ("uk-female", "en-gb+f3"), ("uk-male", "en-gb+m3")],
    )
    def test_presets(self, preset: str, voice: str) -> None:
        cmd = EspeakSynthesizer(command="espeak-ng").build_command("x", VoiceParameters(voice=preset))
        assert cmd[cmd.index("-v") + 1] == voice

    def test_raw_voice_passes_through(self) -> None:
        cmd = EspeakSynthesizer(command="espeak-ng").build_command("x", VoiceParameters(voice="de+m1"))
        assert cmd[cmd.index("-v") + 1] == "de+m1"

    @pytest.mark.parametrize(("rate", "wpm"), [(2.0, "240"), (0.25, "80"), (4.0, "450")])
    def test_rate_scales_and_clamps_speed(self, rate: float, wpm: str) -> None:
        cmd = EspeakSynthesizer(command="espeak-ng").build_command("x", VoiceParameters(rate=rate))
        assert cmd[cmd.index("-s") + 1] == wpm

    def test_extensions_override_defaults(self) -> None:
        voice = VoiceParameters(extensions={"words_per_minute": 150, "pitch": 120, "gap": 5, "amplitude": 300})
        cmd = EspeakSynthesizer(command="espeak-ng").build_command("x", voice)
        assert cmd[cmd.index("-s") + 1] == "150"
        assert cmd[cmd.index("-p") + 1] == "99"
        assert cmd[cmd.index("-g") + 1] == "5"
        assert cmd[cmd.index("-a") + 1] == "200"

    def test_empty_text(self) -> None:
        cmd = EspeakSynthesizer(command="espeak-ng").build_command("", VoiceParameters())
        assert cmd[-1] == " "


class TestSynthesize:
    """Tests for running eSpeak."""

    def test_returns_pcm(self) -> None:
        synth = EspeakSynthesizer(command="espeak-ng", timeout=7.0)
        with patch("wxvoice.tts.espeak.subprocess.run", return_value=_completed(stdout=write_wav(PCM))) as mock_run:
            result = synth.synthesize("Wind calm.")

        assert result.audio == PCM
        assert result.backend == "espeak"
        assert result.latency_ms >= 0
        assert mock_run.call_args.kwargs["timeout"] == 7.0

    def test_no_command(self) -> None:
        with patch("wxvoice.tts.espeak.shutil.which", return_value=None):
            synth = EspeakSynthesizer()
        with pytest.raises(EngineUnavailableError) as exc_info:
            synth.synthesize("hello")
        assert exc_info.value.stage == "synthesize"

    def test_command_disappeared(self) -> None:
        with (
            patch("wxvoice.tts.espeak.subprocess.run", side_effect=FileNotFoundError()),
            pytest.raises(EngineUnavailableError),
        ):
            EspeakSynthesizer(command="espeak-ng").synthesize("hello")

    def test_nonzero_exit(self) -> None:
        with (
            patch("wxvoice.tts.espeak.subprocess.run", return_value=_completed(returncode=1, stderr=b"bad voice")),
            pytest.raises(EngineFailureError, match="bad voice"),
        ):
            EspeakSynthesizer(command="espeak-ng").synthesize("hello")

    def test_timeout(self) -> None:
        with (
            patch(
                "wxvoice.tts.espeak.subprocess.run",
                side_effect=subprocess.TimeoutExpired(cmd="espeak-ng", timeout=1),
            ),
            pytest.raises(EngineFailureError, match="timed out"),
        ):
            EspeakSynthesizer(command="espeak-ng").synthesize("hello")

    def test_empty_output(self) -> None:
        with (
            patch("wxvoice.tts.espeak.subprocess.run", return_value=_completed()),
            pytest.raises(EngineFailureError),
        ):
            EspeakSynthesizer(command="espeak-ng").synthesize("hello")

    def test_garbage_output(self) -> None:
        with (
            patch("wxvoice.tts.espeak.subprocess.run", return_value=_completed(stdout=b"not audio")),
            pytest.raises(EngineFailureError, match="not valid WAV"),
        ):
            EspeakSynthesizer(command="espeak-ng").synthesize("hello")


@pytest.mark.requires_espeak
@pytest.mark.skipif(
    shutil.which("espeak-ng") is None and shutil.which("espeak") is None,
    reason="eSpeak not installed",
)
class TestWithEspeak:
    """Synthesis through the real engine."""

    def test_synthesizes_speech(self) -> None:
        result = EspeakSynthesizer().synthesize("Wind two eight zero at one zero.")
        assert result.audio.encoding == AudioEncoding.PCM_S16LE
        assert result.audio.sample_rate > 0
        assert result.duration_ms > 0

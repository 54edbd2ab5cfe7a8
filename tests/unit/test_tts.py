"""Unit tests for the TTS factory, voice parameters and mock synthesizer."""

from unittest.mock import patch

import pytest

from wxvoice.audio.formats import AudioEncoding
from wxvoice.config import WxVoiceConfig
from wxvoice.errors import NetworkError
from wxvoice.tts import (
    Engine,
    EspeakSynthesizer,
    GoogleSynthesizer,
    MockSynthesizer,
    VoiceParameters,
    create_synthesizer,
)


class TestVoiceParameters:
    """Tests for VoiceParameters."""

    def test_defaults(self) -> None:
        voice = VoiceParameters()
        assert voice.voice == "default"
        assert voice.rate == 1.0

    @pytest.mark.parametrize(("rate", "clamped"), [(0.1, 0.25), (10, 4.0), (1.5, 1.5)])
    def test_rate_is_clamped(self, rate: float, clamped: float) -> None:
        assert VoiceParameters(rate=rate).rate == clamped

    def test_option(self) -> None:
        voice = VoiceParameters(extensions={"pitch": 3})
        assert voice.option("pitch") == 3
        assert voice.option("gap", 15) == 15


class TestEngine:
    """Tests for Engine.parse."""

    def test_parse(self) -> None:
        assert Engine.parse("Google") == Engine.GOOGLE
        assert Engine.parse(Engine.ESPEAK) == Engine.ESPEAK

    def test_parse_unknown(self) -> None:
        with pytest.raises(ValueError, match="unknown engine"):
            Engine.parse("festival")


class TestCreateSynthesizer:
    """Tests for create_synthesizer."""

    def test_espeak_from_config(self) -> None:
        config = WxVoiceConfig()
        config.espeak.command = "/opt/espeak-ng"
        config.espeak.words_per_minute = 140

        with patch("wxvoice.tts.espeak.shutil.which", return_value=None):
            synth = create_synthesizer(Engine.ESPEAK, config)

        assert isinstance(synth, EspeakSynthesizer)
        cmd = synth.build_command("x", VoiceParameters())
        assert cmd[0] == "/opt/espeak-ng"
        assert cmd[cmd.index("-s") + 1] == "140"

    def test_google_from_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WX_GOOGLE_KEY", "abc")
        config = WxVoiceConfig()
        config.google.api_key_env = "WX_GOOGLE_KEY"
        config.google.sample_rate = 16000

        synth = create_synthesizer("google", config)

        assert isinstance(synth, GoogleSynthesizer)
        assert synth.is_available
        assert synth.build_request("x", VoiceParameters())["audioConfig"]["sampleRateHertz"] == 16000

    def test_unknown_engine(self) -> None:
        with pytest.raises(ValueError):
            create_synthesizer("festival")


class TestMockSynthesizer:
    """Tests for MockSynthesizer."""

    def test_tone_length_follows_words(self) -> None:
        synth = MockSynthesizer(sample_rate=8000)
        result = synth.synthesize("one two three four five")

        assert result.audio.encoding == AudioEncoding.PCM_S16LE
        assert result.audio.sample_rate == 8000
        assert result.duration_ms == 500
        assert result.backend == "mock"

    def test_deterministic(self) -> None:
        synth = MockSynthesizer()
        assert synth.synthesize("wind calm").audio == synth.synthesize("wind calm").audio

    def test_records_calls(self) -> None:
        synth = MockSynthesizer()
        synth.synthesize("hello", VoiceParameters(voice="uk-male"))

        assert synth.call_count == 1
        assert synth.synthesized_texts == ["hello"]
        assert synth.voices[0].voice == "uk-male"

        synth.clear()
        assert synth.call_count == 0

    def test_fail_with(self) -> None:
        synth = MockSynthesizer()
        synth.fail_with(NetworkError("down"))

        with pytest.raises(NetworkError):
            synth.synthesize("hello")
        assert synth.synthesize("hello").audio.data

"""Unit tests for command playback."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from wxvoice.audio.playback import CommandPlayback
from wxvoice.errors import PlaybackError

ASTERISK = 'asterisk -rx "rpt localplay {endpoint} {stem}"'


class TestBuildCommand:
    """Tests for command template expansion."""

    def test_default_player(self) -> None:
        assert CommandPlayback().build_command(Path("/tmp/wx.wav")) == ["play", "-q", "/tmp/wx.wav"]

    def test_asterisk_template(self) -> None:
        cmd = CommandPlayback(ASTERISK).build_command(Path("/tmp/wx.ulaw"), endpoint="65314")
        assert cmd == ["asterisk", "-rx", "rpt localplay 65314 /tmp/wx"]

    def test_endpoint_required(self) -> None:
        with pytest.raises(PlaybackError, match="endpoint"):
            CommandPlayback(ASTERISK).build_command(Path("/tmp/wx.ulaw"))

    def test_unknown_placeholder(self) -> None:
        with pytest.raises(PlaybackError):
            CommandPlayback("play {file}").build_command(Path("/tmp/wx.wav"))


class TestPlayFile:
    """Tests for running the playback command."""

    def test_runs_command(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout=b"", stderr=b"")
        with patch("wxvoice.audio.playback.subprocess.run", return_value=completed) as mock_run:
            CommandPlayback(timeout=9.0).play_file(Path("/tmp/wx.wav"))

        mock_run.assert_called_once()
        assert mock_run.call_args.args[0] == ["play", "-q", "/tmp/wx.wav"]
        assert mock_run.call_args.kwargs["timeout"] == 9.0

    def test_nonzero_exit(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=1, stdout=b"", stderr=b"no device")
        with (
            patch("wxvoice.audio.playback.subprocess.run", return_value=completed),
            pytest.raises(PlaybackError, match="no device"),
        ):
            CommandPlayback().play_file(Path("/tmp/wx.wav"))

    def test_missing_player(self) -> None:
        with (
            patch("wxvoice.audio.playback.subprocess.run", side_effect=FileNotFoundError()),
            pytest.raises(PlaybackError, match="not found") as exc_info,
        ):
            CommandPlayback().play_file(Path("/tmp/wx.wav"))
        assert exc_info.value.stage == "playback"

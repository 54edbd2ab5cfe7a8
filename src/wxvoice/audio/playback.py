"""Audio playback protocol and the command-based implementation.

Playback hands a finished audio file to an external system: a local
player, or a radio/telephony controller such as Asterisk app_rpt.
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Protocol

from ..errors import PlaybackError

logger = logging.getLogger(__name__)


class AudioPlayback(Protocol):
    """Interface for playing an audio file on an endpoint."""

    def play_file(self, path: Path, endpoint: str | None = None) -> None:
        """Play a file, blocking until the playback system accepts it.

        Args:
            path: Audio file to play
            endpoint: Target node or device, if the system needs one

        Raises:
            PlaybackError: If playback fails
        """
        ...


class CommandPlayback:
    """Plays files by running a configured command template.

    The template is split like a shell command line and each argument is
    formatted with ``{path}``, ``{stem}`` (path without extension) and
    ``{endpoint}``. No shell is involved.

    Example:
        player = CommandPlayback("asterisk -rx 'rpt localplay {endpoint} {stem}'")
        player.play_file(Path("/tmp/wx.ulaw"), endpoint="65314")
    """

    def __init__(self, command: str = "play -q {path}", timeout: float = 120.0) -> None:
        """Initialize command playback.

        Args:
            command: Command template
            timeout: Seconds to wait for the command
        """
        self._command = command
        self._timeout = timeout

    @property
    def command(self) -> str:
        return self._command

    def build_command(self, path: Path, endpoint: str | None = None) -> list[str]:
        """Expand the template into an argument list.

        Raises:
            PlaybackError: If the template needs an endpoint and none is given
        """
        path = Path(path)
        values = {
            "path": str(path),
            "stem": str(path.with_suffix("")),
            "endpoint": endpoint or "",
        }
        if "{endpoint}" in self._command and not endpoint:
            raise PlaybackError(f"playback command needs an endpoint: {self._command}")

        try:
            return [arg.format(**values) for arg in shlex.split(self._command)]
        except (KeyError, ValueError, IndexError) as e:
            raise PlaybackError(f"invalid playback command {self._command!r}: {e}") from e

    def play_file(self, path: Path, endpoint: str | None = None) -> None:
        cmd = self.build_command(path, endpoint)
        logger.info(f"Playing {path} via: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, timeout=self._timeout)
        except FileNotFoundError as e:
            raise PlaybackError(f"playback command not found: {cmd[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise PlaybackError(f"playback timed out after {self._timeout}s") from e
        except OSError as e:
            raise PlaybackError(f"failed to start playback: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise PlaybackError(f"playback exited with status {result.returncode}: {stderr}")


__all__ = ["AudioPlayback", "CommandPlayback"]

"""Writing encoded audio to files.

A file at the destination path is either the complete output or absent:
data goes to a temporary sibling first and is renamed into place.
"""

import logging
import os
import tempfile
from pathlib import Path

from ..errors import OutputError
from .formats import AudioData, AudioFormat

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o644


def write_audio_file(
    audio: AudioData,
    path: str | Path,
    mode: int = DEFAULT_FILE_MODE,
) -> Path:
    """Atomically write audio bytes to a file.

    Args:
        audio: Encoded audio to write
        path: Destination path; its directory must exist
        mode: Permission bits set on the finished file

    Returns:
        The destination path

    Raises:
        OutputError: If the file cannot be written
    """
    path = Path(path)
    temp_path = None

    try:
        with tempfile.NamedTemporaryFile(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".part",
            delete=False,
        ) as f:
            temp_path = Path(f.name)
            f.write(audio.data)
            f.flush()
            os.fsync(f.fileno())

        os.chmod(temp_path, mode)
        os.replace(temp_path, path)
    except OSError as e:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()
        raise OutputError(f"failed to write {path}: {e}") from e

    logger.info(f"Audio saved to: {path} ({len(audio.data)} bytes)")
    return path


def allocate_output_path(
    audio_format: AudioFormat,
    directory: str | Path | None = None,
    prefix: str = "wxvoice-",
) -> Path:
    """Create an empty, uniquely named file for one invocation's output.

    The caller owns the returned path until it hands it to playback.

    Args:
        audio_format: Format whose extension the file gets
        directory: Directory for the file (default: system temp dir)
        prefix: File name prefix

    Returns:
        Path of the new empty file
    """
    fd, name = tempfile.mkstemp(
        suffix=f".{audio_format.file_extension}",
        prefix=prefix,
        dir=directory,
    )
    os.close(fd)
    return Path(name)


def with_extension(path: str | Path, audio_format: AudioFormat) -> Path:
    """Append the format's extension to a path that has none."""
    path = Path(path)
    if path.suffix:
        return path
    return path.with_name(f"{path.name}.{audio_format.file_extension}")


__all__ = ["DEFAULT_FILE_MODE", "allocate_output_path", "with_extension", "write_audio_file"]

"""Audio formats, transcoding, file output and playback."""

from .formats import AudioData, AudioEncoding, AudioFormat, FormatProfile
from .output import allocate_output_path, with_extension, write_audio_file
from .playback import AudioPlayback, CommandPlayback
from .sox import SoxEncoder
from .transcoder import SUPPORTED_RATES, Transcoder, transcode

__all__ = [
    "AudioData",
    "AudioEncoding",
    "AudioFormat",
    "AudioPlayback",
    "CommandPlayback",
    "FormatProfile",
    "SUPPORTED_RATES",
    "SoxEncoder",
    "Transcoder",
    "allocate_output_path",
    "transcode",
    "with_extension",
    "write_audio_file",
]

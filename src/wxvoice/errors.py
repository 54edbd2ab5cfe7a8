"""Error types for the weather announcement pipeline.

Every error carries the pipeline stage it belongs to so the CLI can print a
single diagnostic naming the failing stage and the error kind.
"""


class WxVoiceError(Exception):
    """Base exception for all wxvoice errors."""

    stage = "pipeline"

    @property
    def kind(self) -> str:
        """Error class name, used in diagnostics."""
        return type(self).__name__


# Decode stage


class ReportError(WxVoiceError):
    """Base exception for raw report decoding failures."""

    stage = "decode"


class MalformedReportError(ReportError):
    """Raised when a mandatory group is missing or has an unknown shape."""

    def __init__(self, message: str, token: str | None = None) -> None:
        """Initialize malformed report error.

        Args:
            message: Error message.
            token: Offending token, if one was under the cursor.
        """
        super().__init__(message)
        self.token = token


class UnsupportedReportError(ReportError):
    """Raised when the report declares a type the decoder does not implement."""

    def __init__(self, message: str, report_type: str | None = None) -> None:
        """Initialize unsupported report error.

        Args:
            message: Error message.
            report_type: Declared report type (e.g. "TAF").
        """
        super().__init__(message)
        self.report_type = report_type


# Synthesis stage


class SynthesisError(WxVoiceError):
    """Base exception for speech synthesis failures."""

    stage = "synthesize"


class EngineUnavailableError(SynthesisError):
    """Raised when the local synthesis engine cannot be started."""

    pass


class EngineFailureError(SynthesisError):
    """Raised when a synthesis engine runs but produces no usable audio."""

    pass


class AuthenticationError(SynthesisError):
    """Raised when the remote credential is missing or rejected."""

    pass


class QuotaError(SynthesisError):
    """Raised when the remote service rejects a request for rate or quota."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize quota error.

        Args:
            message: Error message.
            status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code


class NetworkError(SynthesisError):
    """Raised on connection failures and timeouts. Eligible for retry."""

    def __init__(self, message: str, attempts: int = 1) -> None:
        """Initialize network error.

        Args:
            message: Error message.
            attempts: Number of attempts made before giving up.
        """
        super().__init__(message)
        self.attempts = attempts


# Transcode stage


class TranscodeError(WxVoiceError):
    """Base exception for audio transcoding failures."""

    stage = "transcode"


class UnsupportedConversionError(TranscodeError):
    """Raised when the source audio cannot be converted to the target."""

    pass


class EncoderError(TranscodeError):
    """Raised when the external audio encoder is missing or fails."""

    pass


# Everything around the core


class PipelineCancelledError(WxVoiceError):
    """Raised when a run is cancelled at a stage boundary."""

    stage = "pipeline"


class FeedError(WxVoiceError):
    """Raised when the weather feed returns no usable report."""

    stage = "fetch"


class PlaybackError(WxVoiceError):
    """Raised when the playback command fails."""

    stage = "playback"


class OutputError(WxVoiceError):
    """Raised when an output file cannot be written."""

    stage = "output"


class ConfigError(WxVoiceError):
    """Raised when configuration cannot be loaded."""

    stage = "config"


__all__ = [
    "AuthenticationError",
    "ConfigError",
    "EncoderError",
    "EngineFailureError",
    "EngineUnavailableError",
    "FeedError",
    "MalformedReportError",
    "NetworkError",
    "OutputError",
    "PipelineCancelledError",
    "PlaybackError",
    "QuotaError",
    "ReportError",
    "SynthesisError",
    "TranscodeError",
    "UnsupportedConversionError",
    "UnsupportedReportError",
    "WxVoiceError",
]

"""Announcement styles."""

from enum import Enum


class AnnouncementStyle(Enum):
    """Verbosity and register presets for announcement text.

    BRIEF: station and wind speed only
    DETAILED: every reported field, cardinal numbers
    AVIATION: radiotelephony phrasing, numbers read digit by digit
    SPEECH: natural full sentences
    """

    BRIEF = "brief"
    DETAILED = "detailed"
    AVIATION = "aviation"
    SPEECH = "speech"

    @classmethod
    def parse(cls, value: "str | AnnouncementStyle") -> "AnnouncementStyle":
        """Look up a style by name, case-insensitively.

        Raises:
            ValueError: If the name is not a known style
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            names = ", ".join(style.value for style in cls)
            raise ValueError(f"unknown announcement style {value!r} (choose from {names})") from None


__all__ = ["AnnouncementStyle"]

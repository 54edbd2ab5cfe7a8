"""Announcement text rendering for wxvoice."""

from .abbreviations import expand_abbreviations
from .formatter import (
    NOT_REPORTED,
    AnnouncementFormatter,
    aviation_height,
    celsius_to_fahrenheit,
    compass_point,
    format_announcement,
    phonetic_station,
    spell_station,
)
from .numbers import cardinal, clock, decimal, digits, fraction, ordinal
from .styles import AnnouncementStyle

__all__ = [
    "AnnouncementFormatter",
    "AnnouncementStyle",
    "NOT_REPORTED",
    "aviation_height",
    "cardinal",
    "celsius_to_fahrenheit",
    "clock",
    "compass_point",
    "decimal",
    "digits",
    "expand_abbreviations",
    "format_announcement",
    "fraction",
    "ordinal",
    "phonetic_station",
    "spell_station",
]

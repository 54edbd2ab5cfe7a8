"""Expansion of abbreviations found in station names.

Feed station names are written for display ("SAN JOSE INTL ARPT"); these
expansions make them speakable.
"""

import re

ABBREVIATIONS = {
    "AFB": "Air Force Base",
    "AP": "Airport",
    "ARPT": "Airport",
    "EXEC": "Executive",
    "FLD": "Field",
    "FT": "Fort",
    "HBR": "Harbor",
    "HTS": "Heights",
    "INTL": "International",
    "JCT": "Junction",
    "MEML": "Memorial",
    "MTN": "Mountain",
    "MUNI": "Municipal",
    "NAS": "Naval Air Station",
    "PK": "Park",
    "RGNL": "Regional",
    "SPGS": "Springs",
    "ST": "Saint",
    "STN": "Station",
    "VLY": "Valley",
}

_WORD = re.compile(r"[A-Za-z.]+")


def expand_abbreviations(text: str) -> str:
    """Replace known abbreviations word by word.

    Words are matched case-insensitively and ignoring a trailing period;
    everything between words is kept as is.

    Examples:
        >>> expand_abbreviations("San Jose Intl, CA, US")
        'San Jose International, CA, US'
    """

    def replace(match: re.Match[str]) -> str:
        word = match.group(0)
        return ABBREVIATIONS.get(word.rstrip(".").upper(), word)

    return _WORD.sub(replace, text)


__all__ = ["ABBREVIATIONS", "expand_abbreviations"]

"""METAR code tables.

Weather descriptor, phenomenon and cloud cover codes with the words used
when they are spoken.
"""

from enum import Enum


class Intensity(Enum):
    """Intensity or proximity prefix of a weather group."""

    LIGHT = "-"
    MODERATE = ""
    HEAVY = "+"
    VICINITY = "VC"

    @property
    def description(self) -> str:
        return _INTENSITY_WORDS[self]


class Descriptor(Enum):
    """Weather descriptor qualifiers."""

    SHALLOW = "MI"
    PATCHES = "BC"
    PARTIAL = "PR"
    LOW_DRIFTING = "DR"
    BLOWING = "BL"
    SHOWERS = "SH"
    THUNDERSTORM = "TS"
    FREEZING = "FZ"

    @property
    def description(self) -> str:
        return _DESCRIPTOR_WORDS[self]


class PhenomenonCode(Enum):
    """Precipitation, obscuration and other weather phenomena."""

    # Precipitation
    DRIZZLE = "DZ"
    RAIN = "RA"
    SNOW = "SN"
    SNOW_GRAINS = "SG"
    ICE_CRYSTALS = "IC"
    ICE_PELLETS = "PL"
    HAIL = "GR"
    SMALL_HAIL = "GS"
    UNKNOWN_PRECIPITATION = "UP"

    # Obscuration
    MIST = "BR"
    FOG = "FG"
    SMOKE = "FU"
    VOLCANIC_ASH = "VA"
    DUST = "DU"
    SAND = "SA"
    HAZE = "HZ"
    SPRAY = "PY"

    # Other
    DUST_WHIRLS = "PO"
    SQUALLS = "SQ"
    FUNNEL_CLOUD = "FC"
    SANDSTORM = "SS"
    DUSTSTORM = "DS"

    @property
    def description(self) -> str:
        return _PHENOMENON_WORDS[self]

    @property
    def is_precipitation(self) -> bool:
        return self in _PRECIPITATION


class SkyCover(Enum):
    """Sky cover amount of a cloud layer."""

    FEW = "FEW"
    SCATTERED = "SCT"
    BROKEN = "BKN"
    OVERCAST = "OVC"
    OBSCURED = "VV"
    CLEAR = "CLR"

    @property
    def description(self) -> str:
        return _COVER_WORDS[self]

    @property
    def is_ceiling(self) -> bool:
        """Broken, overcast and vertical visibility layers form a ceiling."""
        return self in (SkyCover.BROKEN, SkyCover.OVERCAST, SkyCover.OBSCURED)


class CloudType(Enum):
    """Significant convective cloud types."""

    CUMULONIMBUS = "CB"
    TOWERING_CUMULUS = "TCU"

    @property
    def description(self) -> str:
        return _CLOUD_TYPE_WORDS[self]


# All of these mean "no cloud" in the sky group position.
CLEAR_SKY_TOKENS = frozenset({"SKC", "CLR", "NSC", "NCD"})

_INTENSITY_WORDS = {
    Intensity.LIGHT: "light",
    Intensity.MODERATE: "",
    Intensity.HEAVY: "heavy",
    Intensity.VICINITY: "in the vicinity",
}

_DESCRIPTOR_WORDS = {
    Descriptor.SHALLOW: "shallow",
    Descriptor.PATCHES: "patches of",
    Descriptor.PARTIAL: "partial",
    Descriptor.LOW_DRIFTING: "low drifting",
    Descriptor.BLOWING: "blowing",
    Descriptor.SHOWERS: "showers",
    Descriptor.THUNDERSTORM: "thunderstorm",
    Descriptor.FREEZING: "freezing",
}

_PHENOMENON_WORDS = {
    PhenomenonCode.DRIZZLE: "drizzle",
    PhenomenonCode.RAIN: "rain",
    PhenomenonCode.SNOW: "snow",
    PhenomenonCode.SNOW_GRAINS: "snow grains",
    PhenomenonCode.ICE_CRYSTALS: "ice crystals",
    PhenomenonCode.ICE_PELLETS: "ice pellets",
    PhenomenonCode.HAIL: "hail",
    PhenomenonCode.SMALL_HAIL: "small hail",
    PhenomenonCode.UNKNOWN_PRECIPITATION: "unknown precipitation",
    PhenomenonCode.MIST: "mist",
    PhenomenonCode.FOG: "fog",
    PhenomenonCode.SMOKE: "smoke",
    PhenomenonCode.VOLCANIC_ASH: "volcanic ash",
    PhenomenonCode.DUST: "dust",
    PhenomenonCode.SAND: "sand",
    PhenomenonCode.HAZE: "haze",
    PhenomenonCode.SPRAY: "spray",
    PhenomenonCode.DUST_WHIRLS: "dust whirls",
    PhenomenonCode.SQUALLS: "squalls",
    PhenomenonCode.FUNNEL_CLOUD: "funnel cloud",
    PhenomenonCode.SANDSTORM: "sandstorm",
    PhenomenonCode.DUSTSTORM: "duststorm",
}

_PRECIPITATION = frozenset(
    {
        PhenomenonCode.DRIZZLE,
        PhenomenonCode.RAIN,
        PhenomenonCode.SNOW,
        PhenomenonCode.SNOW_GRAINS,
        PhenomenonCode.ICE_CRYSTALS,
        PhenomenonCode.ICE_PELLETS,
        PhenomenonCode.HAIL,
        PhenomenonCode.SMALL_HAIL,
        PhenomenonCode.UNKNOWN_PRECIPITATION,
    }
)

_COVER_WORDS = {
    SkyCover.FEW: "few clouds",
    SkyCover.SCATTERED: "scattered",
    SkyCover.BROKEN: "broken",
    SkyCover.OVERCAST: "overcast",
    SkyCover.OBSCURED: "sky obscured",
    SkyCover.CLEAR: "sky clear",
}

_CLOUD_TYPE_WORDS = {
    CloudType.CUMULONIMBUS: "cumulonimbus",
    CloudType.TOWERING_CUMULUS: "towering cumulus",
}

DESCRIPTOR_CODES = {d.value: d for d in Descriptor}
PHENOMENON_CODES = {p.value: p for p in PhenomenonCode}
COVER_CODES = {c.value: c for c in SkyCover if c is not SkyCover.CLEAR}
CLOUD_TYPE_CODES = {t.value: t for t in CloudType}


__all__ = [
    "CLEAR_SKY_TOKENS",
    "CLOUD_TYPE_CODES",
    "COVER_CODES",
    "CloudType",
    "DESCRIPTOR_CODES",
    "Descriptor",
    "Intensity",
    "PHENOMENON_CODES",
    "PhenomenonCode",
    "SkyCover",
]

"""Data classes for decoded weather observations.

An Observation is built once by the decoder from one raw report and is
never mutated afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from fractions import Fraction

from .codes import CloudType, Descriptor, Intensity, PhenomenonCode, SkyCover


class ReportType(Enum):
    """Routine or special observation."""

    METAR = "METAR"
    SPECI = "SPECI"


class WindKind(Enum):
    """How the wind direction is reported."""

    DIRECTIONAL = "directional"
    VARIABLE = "variable"
    CALM = "calm"


class SpeedUnit(Enum):
    """Wind speed units."""

    KNOTS = "KT"
    METERS_PER_SECOND = "MPS"
    KILOMETERS_PER_HOUR = "KMH"


class DistanceUnit(Enum):
    """Visibility distance units."""

    STATUTE_MILES = "SM"
    METERS = "M"


class VisibilityQualifier(Enum):
    """Bound qualifier on a reported visibility."""

    LESS_THAN = "M"
    GREATER_THAN = "P"


class PressureUnit(Enum):
    """Altimeter setting units."""

    INCHES_OF_MERCURY = "A"
    HECTOPASCALS = "Q"


@dataclass(frozen=True)
class Wind:
    """Surface wind.

    Attributes:
        kind: Directional, variable or calm
        direction: True direction in degrees (DIRECTIONAL only)
        speed: Sustained speed
        gust: Gust speed, if reported
        unit: Speed unit
        variable_from: Start of the direction variation sector, if reported
        variable_to: End of the direction variation sector, if reported
    """

    kind: WindKind
    speed: int
    unit: SpeedUnit = SpeedUnit.KNOTS
    direction: int | None = None
    gust: int | None = None
    variable_from: int | None = None
    variable_to: int | None = None

    def __post_init__(self) -> None:
        if self.kind == WindKind.DIRECTIONAL and self.direction is None:
            raise ValueError("directional wind requires a direction")
        if self.kind != WindKind.DIRECTIONAL and self.direction is not None:
            raise ValueError(f"{self.kind.value} wind cannot carry a direction")
        if self.kind == WindKind.CALM and (self.speed != 0 or self.gust is not None):
            raise ValueError("calm wind has no speed")


@dataclass(frozen=True)
class Visibility:
    """Prevailing visibility.

    Attributes:
        distance: Distance, None when unlimited
        unit: Distance unit
        unlimited: True for CAVOK or 9999 (10 km or more)
        qualifier: Less-than / greater-than bound, if any
    """

    distance: Fraction | None
    unit: DistanceUnit = DistanceUnit.STATUTE_MILES
    unlimited: bool = False
    qualifier: VisibilityQualifier | None = None

    def __post_init__(self) -> None:
        if self.distance is None and not self.unlimited:
            raise ValueError("visibility needs a distance unless unlimited")
        if self.distance is not None and self.distance < 0:
            raise ValueError(f"negative visibility: {self.distance}")


@dataclass(frozen=True)
class WeatherPhenomenon:
    """One present-weather group, e.g. "-SHRA" or "VCTS"."""

    intensity: Intensity = Intensity.MODERATE
    descriptor: Descriptor | None = None
    codes: tuple[PhenomenonCode, ...] = ()


@dataclass(frozen=True)
class SkyLayer:
    """One sky cover group.

    A CLEAR layer has no height. An OBSCURED layer's height is the
    vertical visibility.
    """

    cover: SkyCover
    height_ft: int | None = None
    cloud_type: CloudType | None = None


@dataclass(frozen=True)
class Altimeter:
    """Altimeter setting.

    For inches of mercury ``value`` is in hundredths (3012 = 30.12 inHg);
    for hectopascals it is whole hPa.
    """

    value: int
    unit: PressureUnit = PressureUnit.INCHES_OF_MERCURY

    @property
    def digits(self) -> str:
        """The setting as written in the report, without the unit letter."""
        return f"{self.value:04d}"

    @property
    def inches(self) -> float | None:
        if self.unit != PressureUnit.INCHES_OF_MERCURY:
            return None
        return self.value / 100


@dataclass(frozen=True)
class Observation:
    """A decoded weather observation."""

    station: str
    observed_at: datetime
    wind: Wind
    report_type: ReportType = ReportType.METAR
    automated: bool = False
    corrected: bool = False
    visibility: Visibility | None = None
    cavok: bool = False
    phenomena: tuple[WeatherPhenomenon, ...] = ()
    sky: tuple[SkyLayer, ...] = ()
    temperature: int | None = None
    dew_point: int | None = None
    altimeter: Altimeter | None = None
    remarks: str | None = None
    unparsed: tuple[str, ...] = ()
    raw: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if (
            self.temperature is not None
            and self.dew_point is not None
            and self.dew_point > self.temperature
        ):
            raise ValueError(
                f"dew point {self.dew_point} is above temperature {self.temperature}"
            )

        heights = [layer.height_ft for layer in self.sky if layer.height_ft is not None]
        if heights != sorted(heights):
            raise ValueError(f"sky layers are not in ascending order: {heights}")

    @property
    def ceiling(self) -> SkyLayer | None:
        """Lowest broken, overcast or obscured layer."""
        for layer in self.sky:
            if layer.cover.is_ceiling:
                return layer
        return None


__all__ = [
    "Altimeter",
    "DistanceUnit",
    "Observation",
    "PressureUnit",
    "ReportType",
    "SkyLayer",
    "SpeedUnit",
    "Visibility",
    "VisibilityQualifier",
    "WeatherPhenomenon",
    "Wind",
    "WindKind",
]

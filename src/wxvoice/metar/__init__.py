"""METAR decoding for wxvoice.

Turns a raw aviation routine weather report into an immutable Observation:

    >>> obs = decode("KSJC 011853Z 28010KT 10SM CLR 22/14 A3012")
    >>> obs.wind.direction, obs.temperature
    (280, 22)
"""

from .codes import CloudType, Descriptor, Intensity, PhenomenonCode, SkyCover
from .decoder import MetarDecoder, decode
from .encoder import encode
from .models import (
    Altimeter,
    DistanceUnit,
    Observation,
    PressureUnit,
    ReportType,
    SkyLayer,
    SpeedUnit,
    Visibility,
    VisibilityQualifier,
    WeatherPhenomenon,
    Wind,
    WindKind,
)

__all__ = [
    "Altimeter",
    "CloudType",
    "Descriptor",
    "DistanceUnit",
    "Intensity",
    "MetarDecoder",
    "Observation",
    "PhenomenonCode",
    "PressureUnit",
    "ReportType",
    "SkyCover",
    "SkyLayer",
    "SpeedUnit",
    "Visibility",
    "VisibilityQualifier",
    "WeatherPhenomenon",
    "Wind",
    "WindKind",
    "decode",
    "encode",
]

"""Serialize an Observation back into METAR report text.

The output is canonical rather than a copy of the original text: clear sky
is always written as CLR and speeds use two digits unless they need three.
Decoding the result gives back the same structured values.
"""

from fractions import Fraction

from .codes import SkyCover
from .models import (
    DistanceUnit,
    Observation,
    ReportType,
    SkyLayer,
    Visibility,
    WeatherPhenomenon,
    Wind,
    WindKind,
)


def encode(observation: Observation) -> str:
    """Render an Observation as METAR text.

    Args:
        observation: Observation to serialize

    Returns:
        Report text, e.g. "KSJC 011853Z 28010KT 10SM CLR 22/14 A3012"
    """
    groups: list[str] = []

    if observation.report_type == ReportType.SPECI:
        groups.append("SPECI")

    stamp = observation.observed_at
    groups.append(observation.station)
    groups.append(f"{stamp.day:02d}{stamp.hour:02d}{stamp.minute:02d}Z")

    if observation.automated:
        groups.append("AUTO")
    if observation.corrected:
        groups.append("COR")

    groups.extend(_wind_groups(observation.wind))

    if observation.cavok:
        groups.append("CAVOK")
    elif observation.visibility is not None:
        groups.append(_visibility_group(observation.visibility))

    groups.extend(_weather_group(phenomenon) for phenomenon in observation.phenomena)
    groups.extend(_sky_group(layer) for layer in observation.sky)

    if observation.temperature is not None:
        dew_point = (
            _signed(observation.dew_point) if observation.dew_point is not None else ""
        )
        groups.append(f"{_signed(observation.temperature)}/{dew_point}")

    if observation.altimeter is not None:
        groups.append(f"{observation.altimeter.unit.value}{observation.altimeter.digits}")

    groups.extend(observation.unparsed)

    if observation.remarks:
        groups.append(f"RMK {observation.remarks}")

    return " ".join(groups)


def _wind_groups(wind: Wind) -> list[str]:
    unit = wind.unit.value
    if wind.kind == WindKind.CALM:
        groups = [f"00000{unit}"]
    else:
        direction = "VRB" if wind.kind == WindKind.VARIABLE else f"{wind.direction:03d}"
        gust = f"G{wind.gust:02d}" if wind.gust is not None else ""
        groups = [f"{direction}{wind.speed:02d}{gust}{unit}"]

    if wind.variable_from is not None and wind.variable_to is not None:
        groups.append(f"{wind.variable_from:03d}V{wind.variable_to:03d}")
    return groups


def _visibility_group(visibility: Visibility) -> str:
    if visibility.unit == DistanceUnit.METERS:
        if visibility.unlimited or visibility.distance is None:
            return "9999"
        return f"{int(visibility.distance):04d}"

    prefix = visibility.qualifier.value if visibility.qualifier else ""
    distance = visibility.distance or Fraction(0)
    whole = distance.numerator // distance.denominator
    part = distance - whole

    if part == 0:
        return f"{prefix}{whole}SM"
    if whole == 0:
        return f"{prefix}{part.numerator}/{part.denominator}SM"
    return f"{prefix}{whole} {part.numerator}/{part.denominator}SM"


def _weather_group(phenomenon: WeatherPhenomenon) -> str:
    descriptor = phenomenon.descriptor.value if phenomenon.descriptor else ""
    codes = "".join(code.value for code in phenomenon.codes)
    return f"{phenomenon.intensity.value}{descriptor}{codes}"


def _sky_group(layer: SkyLayer) -> str:
    if layer.cover == SkyCover.CLEAR:
        return "CLR"
    height = f"{layer.height_ft // 100:03d}" if layer.height_ft is not None else "///"
    cloud_type = layer.cloud_type.value if layer.cloud_type else ""
    return f"{layer.cover.value}{height}{cloud_type}"


def _signed(value: int) -> str:
    if value < 0:
        return f"M{-value:02d}"
    return f"{value:02d}"


__all__ = ["encode"]

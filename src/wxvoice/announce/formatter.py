"""Render decoded observations as announcement text.

Field inclusion per style:

    field            brief       detailed    aviation         speech
    station/time     id only     id + time   id + time        full sentence
    wind             speed only  dir/spd/gst digit by digit   natural phrase
    visibility       -           yes         digit by digit   natural phrase
    weather/sky      -           yes         yes              natural phrase
    temp/dew point   -           both        both             natural phrase
    altimeter        -           yes         digit by digit   natural phrase
    remarks          -           -           -                -

A field the style includes but the observation lacks is spoken as
"not reported". Optional parts of a field (gust, variation sector, present
weather) are left out when absent.
"""

import logging

from ..metar.codes import Descriptor, Intensity, PhenomenonCode, SkyCover
from ..metar.models import (
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
from .abbreviations import expand_abbreviations
from .numbers import cardinal, clock, decimal, digits, fraction, ordinal
from .styles import AnnouncementStyle

logger = logging.getLogger(__name__)

NOT_REPORTED = "not reported"

PHONETIC_ALPHABET = {
    "A": "Alfa",
    "B": "Bravo",
    "C": "Charlie",
    "D": "Delta",
    "E": "Echo",
    "F": "Foxtrot",
    "G": "Golf",
    "H": "Hotel",
    "I": "India",
    "J": "Juliett",
    "K": "Kilo",
    "L": "Lima",
    "M": "Mike",
    "N": "November",
    "O": "Oscar",
    "P": "Papa",
    "Q": "Quebec",
    "R": "Romeo",
    "S": "Sierra",
    "T": "Tango",
    "U": "Uniform",
    "V": "Victor",
    "W": "Whiskey",
    "X": "X-ray",
    "Y": "Yankee",
    "Z": "Zulu",
}

COMPASS_POINTS = [
    "north",
    "north-northeast",
    "northeast",
    "east-northeast",
    "east",
    "east-southeast",
    "southeast",
    "south-southeast",
    "south",
    "south-southwest",
    "southwest",
    "west-southwest",
    "west",
    "west-northwest",
    "northwest",
    "north-northwest",
]

MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

_SPEED_UNITS = {
    SpeedUnit.KNOTS: ("knot", "knots"),
    SpeedUnit.METERS_PER_SECOND: ("meter per second", "meters per second"),
    SpeedUnit.KILOMETERS_PER_HOUR: ("kilometer per hour", "kilometers per hour"),
}

_ATIS_COVER = {
    SkyCover.FEW: "few clouds",
    SkyCover.SCATTERED: "scattered",
    SkyCover.BROKEN: "broken",
    SkyCover.OVERCAST: "overcast",
}

_NATURAL_COVER = {
    SkyCover.FEW: "a few clouds",
    SkyCover.SCATTERED: "scattered clouds",
    SkyCover.BROKEN: "broken clouds",
    SkyCover.OVERCAST: "an overcast layer",
}


class AnnouncementFormatter:
    """Turns an Observation into text for speech synthesis."""

    def format(
        self,
        observation: Observation,
        style: AnnouncementStyle | str,
        station_name: str | None = None,
    ) -> str:
        """Render an observation in the given style.

        Args:
            observation: Decoded observation
            style: Announcement style (or its name)
            station_name: Optional station display name, spoken by the
                detailed and speech styles

        Returns:
            Announcement text
        """
        style = AnnouncementStyle.parse(style)
        name = expand_abbreviations(station_name) if station_name else None

        if style == AnnouncementStyle.BRIEF:
            sentences = self._brief(observation)
        elif style == AnnouncementStyle.DETAILED:
            sentences = self._detailed(observation, name)
        elif style == AnnouncementStyle.AVIATION:
            sentences = self._aviation(observation)
        else:
            sentences = self._speech(observation, name)

        text = " ".join(_sentence(part) for part in sentences if part)
        logger.debug(f"{observation.station} ({style.value}): {text}")
        return text

    # Styles

    def _brief(self, obs: Observation) -> list[str]:
        wind = obs.wind
        if wind.kind == WindKind.CALM:
            wind_text = "wind calm"
        else:
            wind_text = f"wind {_speed(wind.speed, wind.unit)}"
        return [f"weather for {spell_station(obs.station)}", wind_text]

    def _detailed(self, obs: Observation, name: str | None) -> list[str]:
        stamp = obs.observed_at
        kind = "special weather report" if obs.report_type == ReportType.SPECI else "weather report"
        header = f"{kind} for {spell_station(obs.station)}"
        if name:
            header += f", {name}"
        header += (
            f", observed {MONTHS[stamp.month - 1]} {ordinal(stamp.day)}"
            f" at {clock(stamp.hour, stamp.minute)} UTC"
        )
        if obs.automated:
            header += ", automated observation"

        sentences = [header, self._detailed_wind(obs.wind)]

        if obs.cavok:
            sentences.append("ceiling and visibility OK")
        else:
            sentences.append(self._detailed_visibility(obs.visibility))

        if obs.phenomena:
            sentences.append("present weather " + _join(_phenomenon(p) for p in obs.phenomena))

        if not obs.cavok:
            sentences.append(self._detailed_sky(obs.sky))

        sentences.append(
            f"temperature {_celsius(obs.temperature, 'degrees Celsius')}, "
            f"dew point {_celsius(obs.dew_point, 'degrees Celsius')}"
        )
        sentences.append(self._detailed_altimeter(obs.altimeter))
        return sentences

    def _aviation(self, obs: Observation) -> list[str]:
        stamp = obs.observed_at
        kind = "special observation" if obs.report_type == ReportType.SPECI else "observation"
        if obs.automated:
            kind = "automated " + kind
        header = (
            f"{phonetic_station(obs.station)} {kind} at "
            f"{digits(f'{stamp.hour:02d}{stamp.minute:02d}')} zulu"
        )

        sentences = [header, self._aviation_wind(obs.wind)]

        if obs.cavok:
            sentences.append("CAVOK")
        else:
            sentences.append(self._aviation_visibility(obs.visibility))

        if obs.phenomena:
            sentences.append(", ".join(_phenomenon(p) for p in obs.phenomena))

        if not obs.cavok:
            sentences.append(self._aviation_sky(obs.sky))

        sentences.append(
            f"temperature {_celsius(obs.temperature)}, dew point {_celsius(obs.dew_point)}"
        )
        sentences.append(self._aviation_altimeter(obs.altimeter))
        return sentences

    def _speech(self, obs: Observation, name: str | None) -> list[str]:
        stamp = obs.observed_at
        where = name or spell_station(obs.station)
        sentences = [
            f"here is the current weather for {where}, "
            f"as of {clock(stamp.hour, stamp.minute)} UTC"
        ]

        sentences.append(self._speech_wind(obs.wind))

        if obs.cavok:
            sentences.append("visibility is unlimited and there are no significant clouds")
        else:
            sentences.append(self._speech_visibility(obs.visibility))

        if obs.phenomena:
            sentences.append("there is " + _join(_phenomenon(p) for p in obs.phenomena))

        if not obs.cavok:
            sentences.append(self._speech_sky(obs.sky))

        sentences.append(self._speech_temperature(obs.temperature, obs.dew_point))
        sentences.append(self._speech_altimeter(obs.altimeter))
        return sentences

    # Wind

    def _detailed_wind(self, wind: Wind) -> str:
        if wind.kind == WindKind.CALM:
            text = "wind calm"
        elif wind.kind == WindKind.VARIABLE:
            text = f"wind variable at {_speed(wind.speed, wind.unit)}"
        else:
            text = (
                f"wind from {cardinal(wind.direction)} degrees "
                f"at {_speed(wind.speed, wind.unit)}"
            )
        if wind.gust is not None:
            text += f", gusting to {_speed(wind.gust, wind.unit)}"
        if wind.variable_from is not None and wind.variable_to is not None:
            text += (
                f", varying between {cardinal(wind.variable_from)} "
                f"and {cardinal(wind.variable_to)} degrees"
            )
        return text

    def _aviation_wind(self, wind: Wind) -> str:
        if wind.kind == WindKind.CALM:
            return "wind calm"

        unit = "" if wind.unit == SpeedUnit.KNOTS else " " + _SPEED_UNITS[wind.unit][1]
        if wind.kind == WindKind.VARIABLE:
            text = f"wind variable at {digits(wind.speed)}{unit}"
        else:
            text = f"wind {digits(f'{wind.direction:03d}')} at {digits(wind.speed)}{unit}"
        if wind.gust is not None:
            text += f", gusts {digits(wind.gust)}"
        if wind.variable_from is not None and wind.variable_to is not None:
            text += (
                f", variable between {digits(f'{wind.variable_from:03d}')} "
                f"and {digits(f'{wind.variable_to:03d}')}"
            )
        return text

    def _speech_wind(self, wind: Wind) -> str:
        if wind.kind == WindKind.CALM:
            return "the wind is calm"
        if wind.kind == WindKind.VARIABLE:
            text = f"the wind is variable at {_speed(wind.speed, wind.unit)}"
        else:
            text = (
                f"the wind is from the {compass_point(wind.direction)} "
                f"at {_speed(wind.speed, wind.unit)}"
            )
        if wind.gust is not None:
            text += f", with gusts up to {cardinal(wind.gust)}"
        return text

    # Visibility

    def _detailed_visibility(self, visibility: Visibility | None) -> str:
        if visibility is None:
            return f"visibility {NOT_REPORTED}"
        return f"visibility {_distance(visibility, 'statute')}"

    def _aviation_visibility(self, visibility: Visibility | None) -> str:
        if visibility is None:
            return f"visibility {NOT_REPORTED}"
        if visibility.unlimited:
            return f"visibility {digits(10)} kilometers or more"

        qualifier = _qualifier_words(visibility.qualifier)
        distance = visibility.distance
        whole = distance.numerator // distance.denominator
        part = distance - whole

        if visibility.unit == DistanceUnit.METERS:
            return f"visibility {qualifier}{digits(whole)} meters"
        if part == 0:
            return f"visibility {qualifier}{digits(whole)}"
        return f"visibility {qualifier}{fraction(distance)}"

    def _speech_visibility(self, visibility: Visibility | None) -> str:
        if visibility is None:
            return f"visibility is {NOT_REPORTED}"
        if visibility.unlimited:
            return "visibility is unlimited"
        return f"visibility is {_distance(visibility)}"

    # Sky

    def _detailed_sky(self, sky: tuple[SkyLayer, ...]) -> str:
        if not sky:
            return f"sky condition {NOT_REPORTED}"
        return "sky condition " + _join(_layer(layer) for layer in sky)

    def _aviation_sky(self, sky: tuple[SkyLayer, ...]) -> str:
        if not sky:
            return f"sky condition {NOT_REPORTED}"

        parts = []
        ceiling_named = False
        for layer in sky:
            if layer.cover == SkyCover.CLEAR:
                parts.append("sky clear")
                continue
            height = aviation_height(layer.height_ft) if layer.height_ft is not None else "height unknown"
            if layer.cover == SkyCover.OBSCURED:
                parts.append(f"indefinite ceiling {height}")
                ceiling_named = True
                continue
            text = f"{height} {_ATIS_COVER[layer.cover]}"
            if layer.cover.is_ceiling and not ceiling_named:
                text = "ceiling " + text
                ceiling_named = True
            if layer.cloud_type is not None:
                text += f" {layer.cloud_type.description}"
            parts.append(text)
        return ", ".join(parts)

    def _speech_sky(self, sky: tuple[SkyLayer, ...]) -> str:
        if not sky:
            return f"the sky condition is {NOT_REPORTED}"
        if all(layer.cover == SkyCover.CLEAR for layer in sky):
            return "skies are clear"

        clouds = []
        obscured = None
        for layer in sky:
            if layer.cover == SkyCover.CLEAR:
                continue
            if layer.cover == SkyCover.OBSCURED:
                obscured = "the sky is obscured"
                if layer.height_ft is not None:
                    obscured += f" with vertical visibility of {_feet(layer.height_ft)}"
                continue
            text = _NATURAL_COVER[layer.cover]
            if layer.height_ft is not None:
                text += f" at {_feet(layer.height_ft)}"
            if layer.cloud_type is not None:
                text += f" with {layer.cloud_type.description}"
            clouds.append(text)

        if not clouds:
            return obscured
        text = "the sky has " + _join(clouds)
        if obscured:
            text = f"{obscured}, {text}"
        return text

    # Temperature and pressure

    def _speech_temperature(self, temperature: int | None, dew_point: int | None) -> str:
        if temperature is None:
            text = f"the temperature is {NOT_REPORTED}"
        else:
            text = (
                f"the temperature is {cardinal(temperature)} degrees Celsius, "
                f"{cardinal(celsius_to_fahrenheit(temperature))} Fahrenheit"
            )
        if dew_point is None:
            return text + f", and the dew point is {NOT_REPORTED}"
        return text + f", with a dew point of {cardinal(dew_point)}"

    def _detailed_altimeter(self, altimeter: Altimeter | None) -> str:
        if altimeter is None:
            return f"altimeter {NOT_REPORTED}"
        if altimeter.unit == PressureUnit.HECTOPASCALS:
            return f"QNH {cardinal(altimeter.value)} hectopascals"
        return f"altimeter {decimal(altimeter.inches)} inches of mercury"

    def _aviation_altimeter(self, altimeter: Altimeter | None) -> str:
        if altimeter is None:
            return f"altimeter {NOT_REPORTED}"
        if altimeter.unit == PressureUnit.HECTOPASCALS:
            return f"QNH {digits(altimeter.digits)}"
        return f"altimeter {digits(altimeter.digits)}"

    def _speech_altimeter(self, altimeter: Altimeter | None) -> str:
        if altimeter is None:
            return f"the altimeter setting is {NOT_REPORTED}"
        if altimeter.unit == PressureUnit.HECTOPASCALS:
            return f"the pressure is {cardinal(altimeter.value)} hectopascals"
        return f"the altimeter setting is {decimal(altimeter.inches)} inches of mercury"


_default_formatter = AnnouncementFormatter()


def format_announcement(
    observation: Observation,
    style: AnnouncementStyle | str,
    station_name: str | None = None,
) -> str:
    """Render an observation as announcement text.

    Args:
        observation: Decoded observation
        style: Announcement style (or its name)
        station_name: Optional station display name

    Returns:
        Announcement text
    """
    return _default_formatter.format(observation, style, station_name=station_name)


def spell_station(station: str) -> str:
    """Spell a station identifier letter by letter ("K S J C")."""
    return " ".join(digits(char) if char.isdigit() else char for char in station.upper())


def phonetic_station(station: str) -> str:
    """Spell a station identifier in the ICAO spelling alphabet."""
    return " ".join(
        digits(char) if char.isdigit() else PHONETIC_ALPHABET.get(char, char)
        for char in station.upper()
    )


def compass_point(direction: int) -> str:
    """Name the 16-point compass direction nearest to a heading."""
    return COMPASS_POINTS[round(direction / 22.5) % 16]


def aviation_height(feet: int) -> str:
    """Read a cloud height the radiotelephony way ("one two thousand five hundred")."""
    thousands, rest = divmod(feet, 1000)
    hundreds = rest // 100
    parts = []
    if thousands:
        parts.append(f"{digits(thousands)} thousand")
    if hundreds:
        parts.append(f"{cardinal(hundreds)} hundred")
    return " ".join(parts) or "zero"


def celsius_to_fahrenheit(celsius: int) -> int:
    return round(celsius * 9 / 5 + 32)


def _sentence(text: str) -> str:
    text = text.strip()
    return text[0].upper() + text[1:] + "."


def _join(items) -> str:
    items = list(items)
    if len(items) <= 1:
        return "".join(items)
    return ", ".join(items[:-1]) + " and " + items[-1]


def _speed(value: int, unit: SpeedUnit) -> str:
    singular, plural = _SPEED_UNITS[unit]
    return f"{cardinal(value)} {singular if value == 1 else plural}"


def _celsius(value: int | None, unit: str = "") -> str:
    if value is None:
        return NOT_REPORTED
    return f"{cardinal(value)} {unit}".rstrip()


def _feet(height: int) -> str:
    return f"{cardinal(height)} feet"


def _qualifier_words(qualifier: VisibilityQualifier | None) -> str:
    if qualifier == VisibilityQualifier.LESS_THAN:
        return "less than "
    if qualifier == VisibilityQualifier.GREATER_THAN:
        return "greater than "
    return ""


def _distance(visibility: Visibility, miles_prefix: str = "") -> str:
    if visibility.unlimited:
        return "ten kilometers or more" if visibility.unit == DistanceUnit.METERS else "unlimited"

    qualifier = _qualifier_words(visibility.qualifier)
    if visibility.unit == DistanceUnit.METERS:
        return f"{qualifier}{cardinal(int(visibility.distance))} meters"

    unit = "mile" if visibility.distance <= 1 else "miles"
    if miles_prefix:
        unit = f"{miles_prefix} {unit}"
    return f"{qualifier}{fraction(visibility.distance)} {unit}"


def _phenomenon(phenomenon: WeatherPhenomenon) -> str:
    codes = _join(code.description for code in phenomenon.codes)

    if phenomenon.intensity == Intensity.HEAVY and PhenomenonCode.FUNNEL_CLOUD in phenomenon.codes:
        return "tornado or waterspout"

    descriptor = phenomenon.descriptor
    if descriptor == Descriptor.SHOWERS:
        text = f"{codes} showers" if codes else "showers"
    elif descriptor == Descriptor.THUNDERSTORM:
        text = f"thunderstorm with {codes}" if codes else "thunderstorm"
    elif descriptor is not None:
        text = f"{descriptor.description} {codes}".strip()
    else:
        text = codes

    if phenomenon.intensity in (Intensity.LIGHT, Intensity.HEAVY):
        text = f"{phenomenon.intensity.description} {text}"
    elif phenomenon.intensity == Intensity.VICINITY:
        text = f"{text} {phenomenon.intensity.description}"
    return text


def _layer(layer: SkyLayer) -> str:
    if layer.cover == SkyCover.CLEAR:
        return "clear"
    if layer.cover == SkyCover.OBSCURED:
        if layer.height_ft is None:
            return "sky obscured"
        return f"sky obscured, vertical visibility {_feet(layer.height_ft)}"

    text = layer.cover.description
    if layer.cover in (SkyCover.SCATTERED, SkyCover.BROKEN):
        text += " clouds"
    if layer.height_ft is not None:
        text += f" at {_feet(layer.height_ft)}"
    else:
        text += ", height unknown"
    if layer.cloud_type is not None:
        text += f" {layer.cloud_type.description}"
    return text


__all__ = [
    "AnnouncementFormatter",
    "NOT_REPORTED",
    "aviation_height",
    "celsius_to_fahrenheit",
    "compass_point",
    "format_announcement",
    "phonetic_station",
    "spell_station",
]

"""METAR/SPECI decoder.

Walks the whitespace-separated groups of a raw report with a token cursor
and a fixed sequence of states. Each state either accepts the token under
the cursor or yields to the next state without consuming it, so an optional
group that is missing is simply absent. Only the station, time and wind
groups are mandatory; a token they cannot accept is a malformed report.
"""

import calendar
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from fractions import Fraction

from ..errors import MalformedReportError, UnsupportedReportError
from .codes import (
    CLEAR_SKY_TOKENS,
    CLOUD_TYPE_CODES,
    COVER_CODES,
    DESCRIPTOR_CODES,
    PHENOMENON_CODES,
    Intensity,
    SkyCover,
)
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

logger = logging.getLogger(__name__)

# Report types that share the leading position with METAR/SPECI but use a
# different encoding altogether.
UNSUPPORTED_REPORT_TYPES = frozenset({"TAF", "SYNOP", "AAXX", "BBXX", "UA", "UUA", "PIREP"})

_REMARKS = re.compile(r"(?:^|\s)RMK(?=\s|$)")

_STATION = re.compile(r"[A-Z][A-Z0-9]{3}")
_TIME = re.compile(r"(\d{2})(\d{2})(\d{2})Z")
_WIND = re.compile(r"(\d{3}|VRB)(\d{2,3})(?:G(\d{2,3}))?(KT|MPS|KMH)")
_WIND_VARIATION = re.compile(r"(\d{3})V(\d{3})")
_VIS_METERS = re.compile(r"(\d{4})(?:NDV)?")
_VIS_MILES = re.compile(r"([MP])?(\d{1,2})SM")
_VIS_FRACTION = re.compile(r"([MP])?(\d)/(\d{1,2})SM")
_VIS_WHOLE = re.compile(r"\d{1,2}")
_RUNWAY_RANGE = re.compile(r"R\d{2}[LCR]?/\S+")
_WEATHER = re.compile(r"(-|\+|VC)?(MI|BC|PR|DR|BL|SH|TS|FZ)?((?:[A-Z]{2})*)")
_SKY = re.compile(r"(FEW|SCT|BKN|OVC)(\d{3}|///)(CB|TCU|///)?")
_VERTICAL_VISIBILITY = re.compile(r"VV(\d{3}|///)")
_TEMPERATURE = re.compile(r"(M?\d{2})/(M?\d{2}|//)?")
_ALTIMETER = re.compile(r"([AQ])(\d{4})")


class _State(Enum):
    REPORT_TYPE = auto()
    STATION = auto()
    TIME = auto()
    MODIFIERS = auto()
    WIND = auto()
    WIND_VARIATION = auto()
    VISIBILITY = auto()
    RUNWAY_RANGE = auto()
    WEATHER = auto()
    SKY = auto()
    TEMPERATURE = auto()
    ALTIMETER = auto()
    DONE = auto()


_ORDER = list(_State)

_MANDATORY = {
    _State.STATION: "station identifier",
    _State.TIME: "observation time",
    _State.WIND: "wind",
}

# States that may accept several consecutive tokens.
_REPEATABLE = frozenset({_State.MODIFIERS, _State.RUNWAY_RANGE, _State.WEATHER, _State.SKY})


class _Cursor:
    """Read position over the body tokens."""

    def __init__(self, tokens: list[str]) -> None:
        self._tokens = tokens
        self._index = 0

    def peek(self, offset: int = 0) -> str | None:
        index = self._index + offset
        if index < len(self._tokens):
            return self._tokens[index]
        return None

    def advance(self, count: int = 1) -> None:
        self._index += count

    @property
    def at_end(self) -> bool:
        return self._index >= len(self._tokens)


@dataclass
class _Fields:
    """Mutable scratch record filled in while walking the tokens."""

    report_type: ReportType = ReportType.METAR
    station: str | None = None
    timestamp: tuple[int, int, int] | None = None
    automated: bool = False
    corrected: bool = False
    wind: Wind | None = None
    variation: tuple[int, int] | None = None
    visibility: Visibility | None = None
    cavok: bool = False
    phenomena: list[WeatherPhenomenon] = field(default_factory=list)
    sky: list[SkyLayer] = field(default_factory=list)
    temperature: int | None = None
    dew_point: int | None = None
    altimeter: Altimeter | None = None
    unparsed: list[str] = field(default_factory=list)


class MetarDecoder:
    """Decoder for METAR and SPECI reports.

    Args:
        reference: Time used to resolve the month and year of the report's
            day-of-month timestamp. Defaults to the current UTC time at each
            decode call.
    """

    def __init__(self, reference: datetime | None = None) -> None:
        self._reference = reference
        self._handlers = {
            _State.REPORT_TYPE: self._accept_report_type,
            _State.STATION: self._accept_station,
            _State.TIME: self._accept_time,
            _State.MODIFIERS: self._accept_modifier,
            _State.WIND: self._accept_wind,
            _State.WIND_VARIATION: self._accept_wind_variation,
            _State.VISIBILITY: self._accept_visibility,
            _State.RUNWAY_RANGE: self._accept_runway_range,
            _State.WEATHER: self._accept_weather,
            _State.SKY: self._accept_sky,
            _State.TEMPERATURE: self._accept_temperature,
            _State.ALTIMETER: self._accept_altimeter,
        }

    def decode(self, raw: str) -> Observation:
        """Decode a raw report.

        Args:
            raw: Raw METAR or SPECI text

        Returns:
            Decoded Observation

        Raises:
            MalformedReportError: If a mandatory group is absent or malformed
            UnsupportedReportError: If the report is not a METAR/SPECI
        """
        text = raw.strip().rstrip("=").rstrip()
        if not text:
            raise MalformedReportError("empty report")

        body, remarks = _split_remarks(text)
        fields = _Fields()
        cursor = _Cursor(body.split())

        self._walk(cursor, fields)

        if fields.variation is not None and fields.wind is not None:
            fields.wind = Wind(
                kind=fields.wind.kind,
                speed=fields.wind.speed,
                unit=fields.wind.unit,
                direction=fields.wind.direction,
                gust=fields.wind.gust,
                variable_from=fields.variation[0],
                variable_to=fields.variation[1],
            )

        observed_at = self._resolve_timestamp(*fields.timestamp)

        if (
            fields.temperature is not None
            and fields.dew_point is not None
            and fields.dew_point > fields.temperature
        ):
            raise MalformedReportError(
                f"dew point {fields.dew_point} is above temperature {fields.temperature}"
            )

        # CLEAR and unknown-height layers sort first; real reports are already ordered.
        sky = sorted(fields.sky, key=lambda layer: layer.height_ft or 0)

        if fields.unparsed:
            logger.debug(f"{fields.station}: unparsed groups {fields.unparsed}")

        return Observation(
            station=fields.station,
            observed_at=observed_at,
            wind=fields.wind,
            report_type=fields.report_type,
            automated=fields.automated,
            corrected=fields.corrected,
            visibility=fields.visibility,
            cavok=fields.cavok,
            phenomena=tuple(fields.phenomena),
            sky=tuple(sky),
            temperature=fields.temperature,
            dew_point=fields.dew_point,
            altimeter=fields.altimeter,
            remarks=remarks,
            unparsed=tuple(fields.unparsed),
            raw=raw,
        )

    def _walk(self, cursor: _Cursor, fields: _Fields) -> None:
        """Run the state machine until every token is consumed."""
        state = _State.REPORT_TYPE
        resume = _State.REPORT_TYPE

        while True:
            if state == _State.DONE:
                if cursor.at_end:
                    return
                # No remaining group accepts this token: keep it and carry on
                # from the group after the last one accepted.
                fields.unparsed.append(cursor.peek())
                cursor.advance()
                state = resume
                continue

            token = cursor.peek()
            if token is None:
                if state in _MANDATORY:
                    raise MalformedReportError(f"missing {_MANDATORY[state]}")
                state = _next(state)
                continue

            if self._handlers[state](cursor, fields):
                resume = state if state in _REPEATABLE else _next(state)
                state = resume
                continue

            if state in _MANDATORY:
                raise MalformedReportError(
                    f"unrecognized {_MANDATORY[state]} group: {token!r}", token=token
                )
            state = _next(state)

    def _resolve_timestamp(self, day: int, hour: int, minute: int) -> datetime:
        reference = self._reference or datetime.now(timezone.utc)
        if not 1 <= day <= 31:
            raise MalformedReportError(f"invalid observation time: day {day} {hour:02d}:{minute:02d}")

        # A day later than the reference belongs to the most recent month that has it
        year, month = reference.year, reference.month
        if day > reference.day:
            year, month = _previous_month(year, month)
            while day > calendar.monthrange(year, month)[1]:
                year, month = _previous_month(year, month)
        try:
            return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
        except ValueError as e:
            raise MalformedReportError(
                f"invalid observation time: day {day} {hour:02d}:{minute:02d}"
            ) from e

    # Group handlers. Each returns True when it consumed the token(s).

    def _accept_report_type(self, cursor: _Cursor, fields: _Fields) -> bool:
        token = cursor.peek()
        if token in UNSUPPORTED_REPORT_TYPES:
            raise UnsupportedReportError(
                f"{token} reports are not supported", report_type=token
            )
        if token in ("METAR", "SPECI"):
            fields.report_type = ReportType(token)
            cursor.advance()
            return True
        return False

    def _accept_station(self, cursor: _Cursor, fields: _Fields) -> bool:
        token = cursor.peek()
        if not _STATION.fullmatch(token):
            return False
        fields.station = token
        cursor.advance()
        return True

    def _accept_time(self, cursor: _Cursor, fields: _Fields) -> bool:
        match = _TIME.fullmatch(cursor.peek())
        if not match:
            return False
        day, hour, minute = (int(group) for group in match.groups())
        if not 1 <= day <= 31 or hour > 23 or minute > 59:
            raise MalformedReportError(
                f"invalid observation time: {cursor.peek()!r}", token=cursor.peek()
            )
        fields.timestamp = (day, hour, minute)
        cursor.advance()
        return True

    def _accept_modifier(self, cursor: _Cursor, fields: _Fields) -> bool:
        token = cursor.peek()
        if token == "NIL":
            raise UnsupportedReportError(
                f"{fields.station} report is NIL (missing)", report_type="NIL"
            )
        if token == "AUTO":
            fields.automated = True
        elif token in ("COR", "CCA", "CCB", "CCC"):
            fields.corrected = True
        else:
            return False
        cursor.advance()
        return True

    def _accept_wind(self, cursor: _Cursor, fields: _Fields) -> bool:
        token = cursor.peek()
        match = _WIND.fullmatch(token)
        if not match:
            return False
        direction_text, speed_text, gust_text, unit_text = match.groups()
        speed = int(speed_text)
        gust = int(gust_text) if gust_text else None
        unit = SpeedUnit(unit_text)

        if speed == 0 and gust is None and direction_text in ("000", "VRB"):
            wind = Wind(kind=WindKind.CALM, speed=0, unit=unit)
        elif direction_text == "VRB":
            wind = Wind(kind=WindKind.VARIABLE, speed=speed, unit=unit, gust=gust)
        else:
            direction = int(direction_text)
            if direction > 360:
                raise MalformedReportError(f"wind direction out of range: {token!r}", token=token)
            wind = Wind(
                kind=WindKind.DIRECTIONAL,
                speed=speed,
                unit=unit,
                direction=direction,
                gust=gust,
            )

        fields.wind = wind
        cursor.advance()
        return True

    def _accept_wind_variation(self, cursor: _Cursor, fields: _Fields) -> bool:
        match = _WIND_VARIATION.fullmatch(cursor.peek())
        if not match:
            return False
        low, high = int(match.group(1)), int(match.group(2))
        if low > 360 or high > 360:
            return False
        fields.variation = (low, high)
        cursor.advance()
        return True

    def _accept_visibility(self, cursor: _Cursor, fields: _Fields) -> bool:
        token = cursor.peek()

        if token == "CAVOK":
            fields.cavok = True
            fields.visibility = Visibility(
                distance=None, unit=DistanceUnit.METERS, unlimited=True
            )
            cursor.advance()
            return True

        match = _VIS_METERS.fullmatch(token)
        if match:
            meters = int(match.group(1))
            if meters == 9999:
                fields.visibility = Visibility(
                    distance=None, unit=DistanceUnit.METERS, unlimited=True
                )
            else:
                fields.visibility = Visibility(
                    distance=Fraction(meters), unit=DistanceUnit.METERS
                )
            cursor.advance()
            return True

        match = _VIS_MILES.fullmatch(token)
        if match:
            fields.visibility = Visibility(
                distance=Fraction(int(match.group(2))),
                qualifier=_qualifier(match.group(1)),
            )
            cursor.advance()
            return True

        match = _VIS_FRACTION.fullmatch(token)
        if match:
            fields.visibility = Visibility(
                distance=_fraction(match, token),
                qualifier=_qualifier(match.group(1)),
            )
            cursor.advance()
            return True

        # Whole and fractional miles split over two groups: "1 1/2SM"
        following = cursor.peek(1)
        if _VIS_WHOLE.fullmatch(token) and following is not None:
            match = _VIS_FRACTION.fullmatch(following)
            if match and match.group(1) is None:
                fraction = _fraction(match, following)
                fields.visibility = Visibility(distance=int(token) + fraction)
                cursor.advance(2)
                return True

        return False

    def _accept_runway_range(self, cursor: _Cursor, fields: _Fields) -> bool:
        token = cursor.peek()
        if not _RUNWAY_RANGE.fullmatch(token):
            return False
        # Runway visual range is not announced; keep it with the unparsed groups.
        fields.unparsed.append(token)
        cursor.advance()
        return True

    def _accept_weather(self, cursor: _Cursor, fields: _Fields) -> bool:
        token = cursor.peek()
        match = _WEATHER.fullmatch(token)
        if not match:
            return False
        intensity_text, descriptor_text, codes_text = match.groups()
        if not descriptor_text and not codes_text:
            return False

        pairs = [codes_text[i : i + 2] for i in range(0, len(codes_text), 2)]
        if any(pair not in PHENOMENON_CODES for pair in pairs):
            return False

        fields.phenomena.append(
            WeatherPhenomenon(
                intensity=Intensity(intensity_text or ""),
                descriptor=DESCRIPTOR_CODES[descriptor_text] if descriptor_text else None,
                codes=tuple(PHENOMENON_CODES[pair] for pair in pairs),
            )
        )
        cursor.advance()
        return True

    def _accept_sky(self, cursor: _Cursor, fields: _Fields) -> bool:
        token = cursor.peek()

        if token in CLEAR_SKY_TOKENS:
            fields.sky.append(SkyLayer(cover=SkyCover.CLEAR))
            cursor.advance()
            return True

        match = _VERTICAL_VISIBILITY.fullmatch(token)
        if match:
            fields.sky.append(
                SkyLayer(cover=SkyCover.OBSCURED, height_ft=_height(match.group(1)))
            )
            cursor.advance()
            return True

        match = _SKY.fullmatch(token)
        if match:
            cover_text, height_text, type_text = match.groups()
            fields.sky.append(
                SkyLayer(
                    cover=COVER_CODES[cover_text],
                    height_ft=_height(height_text),
                    cloud_type=CLOUD_TYPE_CODES.get(type_text) if type_text else None,
                )
            )
            cursor.advance()
            return True

        return False

    def _accept_temperature(self, cursor: _Cursor, fields: _Fields) -> bool:
        match = _TEMPERATURE.fullmatch(cursor.peek())
        if not match:
            return False
        temperature_text, dew_point_text = match.groups()
        fields.temperature = _signed(temperature_text)
        if dew_point_text and dew_point_text != "//":
            fields.dew_point = _signed(dew_point_text)
        cursor.advance()
        return True

    def _accept_altimeter(self, cursor: _Cursor, fields: _Fields) -> bool:
        match = _ALTIMETER.fullmatch(cursor.peek())
        if not match:
            return False
        unit = PressureUnit(match.group(1))
        fields.altimeter = Altimeter(value=int(match.group(2)), unit=unit)
        cursor.advance()
        return True


def decode(raw: str, reference: datetime | None = None) -> Observation:
    """Decode a raw METAR/SPECI report into an Observation.

    Args:
        raw: Raw report text, e.g. "KSJC 011853Z 28010KT 10SM CLR 22/14 A3012"
        reference: Time used to resolve the report's month and year
            (defaults to now, UTC)

    Returns:
        Decoded Observation

    Raises:
        MalformedReportError: If station, time or wind is absent or malformed
        UnsupportedReportError: If the report type is not METAR/SPECI
    """
    return MetarDecoder(reference=reference).decode(raw)


def _split_remarks(text: str) -> tuple[str, str | None]:
    match = _REMARKS.search(text)
    if not match:
        return text, None
    remarks = text[match.end() :].strip()
    return text[: match.start()], remarks or None


def _next(state: _State) -> _State:
    return _ORDER[_ORDER.index(state) + 1]


def _fraction(match: re.Match, token: str) -> Fraction:
    denominator = int(match.group(3))
    if denominator == 0:
        raise MalformedReportError(f"zero denominator in visibility: {token!r}", token=token)
    return Fraction(int(match.group(2)), denominator)


def _previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def _qualifier(prefix: str | None) -> VisibilityQualifier | None:
    return VisibilityQualifier(prefix) if prefix else None


def _height(text: str) -> int | None:
    if text == "///":
        return None
    return int(text) * 100


def _signed(text: str) -> int:
    if text.startswith("M"):
        return -int(text[1:])
    return int(text)


__all__ = ["MetarDecoder", "UNSUPPORTED_REPORT_TYPES", "decode"]

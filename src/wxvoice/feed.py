"""Aviation weather feed client.

Fetches the latest raw report for a station from the aviationweather.gov
data API. One request per call, no caching.

API docs: https://aviationweather.gov/data/api/
"""

import logging
from dataclasses import dataclass

import httpx

from .errors import FeedError

logger = logging.getLogger(__name__)

AVIATION_WEATHER_URL = "https://aviationweather.gov/api/data/metar"
FEED_TIMEOUT = 10.0  # seconds


@dataclass(frozen=True)
class StationReport:
    """Latest report for one station.

    Attributes:
        icao: Station identifier as returned by the feed
        raw: Raw report text
        name: Station display name, if the feed has one
    """

    icao: str
    raw: str
    name: str | None = None


class AviationWeatherClient:
    """Client for the aviationweather.gov METAR endpoint."""

    def __init__(
        self,
        url: str = AVIATION_WEATHER_URL,
        timeout: float = FEED_TIMEOUT,
        user_agent: str = "wxvoice",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the feed client.

        Args:
            url: METAR endpoint
            timeout: Request timeout in seconds
            user_agent: User-Agent header value
            transport: Optional httpx transport (replaced in tests)
        """
        self._url = url
        self._timeout = timeout
        self._user_agent = user_agent
        self._transport = transport

    def fetch(self, icao: str) -> StationReport:
        """Fetch the latest report for a station.

        Args:
            icao: Station identifier, e.g. "KSJC"

        Returns:
            StationReport for the station

        Raises:
            FeedError: On transport errors, empty or invalid responses, or
                when the feed has no report for the station
        """
        icao = icao.strip().upper()
        params = {"ids": icao, "format": "json"}
        headers = {"User-Agent": self._user_agent}

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(self._url, params=params, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FeedError(f"weather feed returned HTTP {e.response.status_code} for {icao}") from e
        except httpx.HTTPError as e:
            raise FeedError(f"weather feed request failed: {e}") from e

        if not response.content.strip():
            raise FeedError(
                f"empty response for ICAO '{icao}'; the code may be invalid or have no "
                "current report (US airports usually need the 'K' prefix)"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise FeedError(f"failed to parse feed JSON: {e}") from e

        if not isinstance(data, list) or not data:
            raise FeedError(f"no weather data found for ICAO: {icao}")

        entry = data[0]
        raw = entry.get("rawOb") if isinstance(entry, dict) else None
        if not raw:
            raise FeedError(f"feed entry for {icao} has no raw report")

        report = StationReport(
            icao=entry.get("icaoId") or icao,
            raw=raw.strip(),
            name=entry.get("name") or None,
        )
        logger.info(f"Fetched report for {report.icao}: {report.raw}")
        return report


__all__ = ["AVIATION_WEATHER_URL", "AviationWeatherClient", "StationReport"]

"""METAR retrieval from AWC with NOAA fallback.

Each fetch makes one attempt against the AWC JSON API and, if that fails,
one attempt against the NOAA tgftp text report. There are no retries.

Typical usage:
    from c172perf.weather.client import MetarClient

    with MetarClient() as client:
        observations = client.fetch("EGLL")
"""

import logging
from typing import Any

import requests

from c172perf.weather.metar import MetarObservation, normalize_awc, parse_noaa_text

logger = logging.getLogger(__name__)

DEFAULT_AWC_URL = "https://aviationweather.gov/api/data/metar"
DEFAULT_NOAA_URL = "https://tgftp.nws.noaa.gov/data/observations/metar/stations/{icao}.TXT"
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_USER_AGENT = "C172M-Perf/1.0"


class MetarError(RuntimeError):
    """Raised when no upstream source could provide a METAR."""


class InvalidStationError(MetarError, ValueError):
    """Raised for station codes that are not 4-character ICAO identifiers."""


def normalize_station(icao: str | None) -> str:
    """Validate and upper-case an ICAO station code.

    Raises:
        InvalidStationError: If the code is not exactly 4 characters.
    """
    code = (icao or "").strip().upper()
    if len(code) != 4:
        raise InvalidStationError(f"Provide a 4-letter ICAO station code, got {icao!r}")
    return code


class MetarClient:
    """HTTP client for current METAR observations.

    Examples:
        >>> client = MetarClient(timeout_s=5)
        >>> obs = client.fetch("KPAO")[0]
        >>> print(obs.station, obs.temperature_c)
    """

    def __init__(
        self,
        awc_url: str = DEFAULT_AWC_URL,
        noaa_url: str = DEFAULT_NOAA_URL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            awc_url: AWC METAR endpoint (ids and format are passed as params).
            noaa_url: NOAA report URL template with an {icao} placeholder.
            timeout_s: Per-request timeout in seconds.
            user_agent: User-Agent header sent upstream.
            session: Session to use; one is created when omitted.
        """
        self.awc_url = awc_url
        self.noaa_url = noaa_url
        self.timeout_s = timeout_s
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_settings(cls, settings: Any, session: requests.Session | None = None) -> "MetarClient":
        """Build a client from the "weather" section of the settings.

        Args:
            settings: ConfigLoader (or anything with a dot-notation get()).
            session: Optional session to reuse.
        """
        return cls(
            awc_url=settings.get("weather.awc_url", DEFAULT_AWC_URL),
            noaa_url=settings.get("weather.noaa_url", DEFAULT_NOAA_URL),
            timeout_s=float(settings.get("weather.timeout_s", DEFAULT_TIMEOUT_S)),
            user_agent=settings.get("weather.user_agent", DEFAULT_USER_AGENT),
            session=session,
        )

    def fetch(self, icao: str) -> list[MetarObservation]:
        """Fetch the latest METAR for a station.

        Args:
            icao: 4-letter ICAO station code (case-insensitive).

        Returns:
            Normalized observations; AWC may return several, NOAA returns one.

        Raises:
            InvalidStationError: If the code is malformed.
            MetarError: If both AWC and NOAA fail.
        """
        code = normalize_station(icao)

        try:
            observations = self.fetch_awc(code)
            logger.info("AWC returned %d METAR(s) for %s", len(observations), code)
            return observations
        except (requests.RequestException, ValueError) as awc_error:
            logger.warning("AWC failed for %s: %s", code, awc_error)
            awc_failure = awc_error

        try:
            observations = self.fetch_noaa(code)
        except requests.RequestException as noaa_error:
            logger.warning("NOAA TXT failed for %s: %s", code, noaa_error)
            raise MetarError(
                f"Both AWC and NOAA failed for {code}: AWC: {awc_failure}; NOAA: {noaa_error}"
            ) from noaa_error

        logger.info("NOAA fallback used for %s", code)
        return observations

    def fetch_awc(self, icao: str) -> list[MetarObservation]:
        """Fetch and normalize the AWC JSON response.

        Raises:
            requests.RequestException: On transport or HTTP status errors.
            ValueError: If the body is not a JSON object or array of objects.
        """
        response = self._session.get(
            self.awc_url,
            params={"ids": icao, "format": "json"},
            headers={"Accept": "application/json"},
            timeout=self.timeout_s,
        )
        response.raise_for_status()
        data = response.json()

        items = data if isinstance(data, list) else [data]
        if not all(isinstance(item, dict) for item in items):
            raise ValueError("Unexpected AWC response shape")
        return [normalize_awc(item) for item in items]

    def fetch_noaa(self, icao: str) -> list[MetarObservation]:
        """Fetch and normalize the NOAA text report.

        Raises:
            requests.RequestException: On transport or HTTP status errors.
        """
        response = self._session.get(
            self.noaa_url.format(icao=icao),
            headers={"Accept": "text/plain"},
            timeout=self.timeout_s,
        )
        response.raise_for_status()
        return [parse_noaa_text(response.text)]

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> "MetarClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

"""METAR report parsing and normalization.

Two upstream shapes are normalized into MetarObservation:
- AWC JSON items (aviationweather.gov), whose field names vary between API
  versions, topped up from the raw report when a field is missing
- NOAA tgftp text files: a timestamp line followed by the raw report

Parsing is best effort. A field that cannot be found is None, never an error.

Typical usage:
    from c172perf.weather.metar import parse_noaa_text

    obs = parse_noaa_text("2025/09/22 10:20\\nEGLL 221020Z 24008KT 9999 13/07 Q1027")
    print(obs.temperature_c, obs.altimeter_in_hg)
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

SOURCE_AWC = "awc-json"
SOURCE_NOAA = "noaa-txt"

IN_HG_PER_HPA = 0.0295299831

_WIND_RE = re.compile(r"\b(\d{3}|VRB)(\d{2,3})(G(\d{2,3}))?KT\b")
_TEMP_RE = re.compile(r"(?:^|\s)(M?\d{1,2})/(M?\d{1,2}|///?)(?=\s|$)")
_TEMP_TOKEN_RE = re.compile(r"^(M?\d{1,2})/(M?\d{1,2}|///?)$")
_T_GROUP_RE = re.compile(r"\bT(\d{8})\b")
_QNH_RE = re.compile(r"\bQ(\d{4})\b")
_ALTIMETER_RE = re.compile(r"\bA(\d{4})\b")
_STATION_RE = re.compile(r"^[A-Z]{4}\b")
_NOAA_TIME_RE = re.compile(r"\b(\d{4})/(\d{2})/(\d{2}) (\d{2}):(\d{2})\b")


@dataclass(frozen=True)
class MetarObservation:
    """Normalized METAR observation.

    Attributes:
        source: "awc-json" or "noaa-txt"
        station: ICAO station identifier
        obs_time: Observation time, epoch seconds UTC
        temperature_c: Temperature (deg C)
        altimeter_in_hg: Altimeter setting (inHg)
        wind_dir_degrees: Wind direction (deg true), None when variable
        wind_speed_kt: Wind speed (kt)
        wind_gust_kt: Gust speed (kt)
        raw: Raw report text
    """

    source: str
    station: str | None = None
    obs_time: int | None = None
    temperature_c: float | None = None
    altimeter_in_hg: float | None = None
    wind_dir_degrees: float | None = None
    wind_speed_kt: float | None = None
    wind_gust_kt: float | None = None
    raw: str | None = None

    @property
    def observed_at(self) -> datetime | None:
        """Observation time as an aware UTC datetime."""
        if self.obs_time is None:
            return None
        return datetime.fromtimestamp(self.obs_time, tz=timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping for JSON output."""
        return {
            "source": self.source,
            "station": self.station,
            "obsTime": self.obs_time,
            "tempC": self.temperature_c,
            "altim_in_hg": self.altimeter_in_hg,
            "wind_dir_degrees": self.wind_dir_degrees,
            "wind_speed_kt": self.wind_speed_kt,
            "wind_gust_kt": self.wind_gust_kt,
            "raw": self.raw,
        }


@dataclass(frozen=True)
class RawMetarFields:
    """Values scraped from a raw report."""

    temperature_c: float | None = None
    altimeter_in_hg: float | None = None
    wind_dir_degrees: float | None = None
    wind_speed_kt: float | None = None
    wind_gust_kt: float | None = None


def _to_number(value: Any) -> float | None:
    """Coerce a JSON value to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _signed_temperature(text: str) -> int:
    return -int(text[1:]) if text.startswith("M") else int(text)


def extract_temperature_c(raw: str | None) -> float | None:
    """Find the temperature in a raw report.

    Tries, in order: the TT/DD group (dewpoint may be missing as // or ///),
    a token-by-token scan for feeds with odd whitespace, then the US remarks
    T-group (tenths of a degree, rounded to whole degrees).

    Examples:
        >>> extract_temperature_c("EGLL 221020Z 24008KT 9999 M02/M05 Q1027")
        -2
        >>> extract_temperature_c("KXYZ 221020Z 00000KT 10SM CLR A2992 RMK T01280067")
        13
    """
    if not raw or not isinstance(raw, str):
        return None

    match = _TEMP_RE.search(raw)
    if match:
        return _signed_temperature(match.group(1))

    for token in raw.split():
        token_match = _TEMP_TOKEN_RE.match(token)
        if token_match:
            return _signed_temperature(token_match.group(1))

    t_group = _T_GROUP_RE.search(raw)
    if t_group:
        digits = t_group.group(1)
        sign = -1 if digits[0] == "1" else 1
        tenths = int(digits[1:4])
        return math.floor(sign * tenths / 10 + 0.5)

    return None


def parse_raw_metar(raw: str | None) -> RawMetarFields:
    """Scrape wind, temperature and altimeter from a raw report.

    A QNH group (hPa) wins over an A group (hundredths of inHg). The
    altimeter is returned in inHg rounded to two decimals.

    Args:
        raw: Raw METAR text.

    Returns:
        RawMetarFields with None for anything not found.
    """
    if not raw or not isinstance(raw, str):
        return RawMetarFields()

    wind_dir = None
    wind_speed = None
    wind_gust = None
    wind_match = _WIND_RE.search(raw)
    if wind_match:
        direction = wind_match.group(1)
        wind_dir = None if direction == "VRB" else float(direction)
        wind_speed = float(wind_match.group(2))
        if wind_match.group(4):
            wind_gust = float(wind_match.group(4))

    altimeter = None
    qnh_match = _QNH_RE.search(raw)
    altimeter_match = _ALTIMETER_RE.search(raw)
    if qnh_match:
        altimeter = round(int(qnh_match.group(1)) * IN_HG_PER_HPA, 2)
    elif altimeter_match:
        altimeter = round(int(altimeter_match.group(1)) / 100, 2)

    return RawMetarFields(
        temperature_c=extract_temperature_c(raw),
        altimeter_in_hg=altimeter,
        wind_dir_degrees=wind_dir,
        wind_speed_kt=wind_speed,
        wind_gust_kt=wind_gust,
    )


def parse_noaa_text(text: str) -> MetarObservation:
    """Normalize a NOAA tgftp station file.

    Args:
        text: File body, e.g. "2025/09/22 10:20\\nEGLL 221020Z ...".

    Returns:
        MetarObservation built from the last non-blank line.
    """
    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
    raw = lines[-1] if lines else ""

    station_match = _STATION_RE.match(raw)
    station = station_match.group(0) if station_match else None

    obs_time = None
    time_match = _NOAA_TIME_RE.search(lines[0]) if lines else None
    if time_match:
        year, month, day, hour, minute = (int(part) for part in time_match.groups())
        try:
            obs_time = int(datetime(year, month, day, hour, minute, tzinfo=timezone.utc).timestamp())
        except ValueError:
            obs_time = None

    fields = parse_raw_metar(raw)
    return MetarObservation(
        source=SOURCE_NOAA,
        station=station,
        obs_time=obs_time,
        temperature_c=fields.temperature_c,
        altimeter_in_hg=fields.altimeter_in_hg,
        wind_dir_degrees=fields.wind_dir_degrees,
        wind_speed_kt=fields.wind_speed_kt,
        wind_gust_kt=fields.wind_gust_kt,
        raw=raw,
    )


def _dig(item: dict[str, Any], *path: str) -> Any:
    value: Any = item
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _first_number(item: dict[str, Any], *paths: tuple[str, ...]) -> float | None:
    for path in paths:
        number = _to_number(_dig(item, *path))
        if number is not None:
            return number
    return None


def _first_present(item: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value is not None:
            return value
    return None


def _parse_obs_time(value: Any) -> int | None:
    """Epoch seconds from seconds, milliseconds or an ISO-8601 string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value // 1000) if value > 1e12 else int(value)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return int(parsed.timestamp())
    return None


def normalize_awc(item: dict[str, Any]) -> MetarObservation:
    """Normalize one AWC JSON METAR item.

    Field names differ between AWC API versions; the first one present wins.
    Whatever is still missing is filled from the raw report.

    Args:
        item: One element of the AWC JSON response.

    Returns:
        MetarObservation with source "awc-json".
    """
    station = _first_present(item, "station_id", "station", "icaoId")
    raw = _first_present(item, "raw_text", "raw", "rawOb")

    time_value = _first_present(item, "obsTime", "observation_time", "time")
    if time_value is None:
        time_value = _dig(item, "meta", "obsTime")
    obs_time = _parse_obs_time(time_value)

    temperature = _first_number(item, ("temp",), ("temperature",), ("obs", "temp"))
    altimeter = _first_number(item, ("altim_in_hg",), ("altimeter", "in"))
    wind_dir = _first_number(item, ("wind_dir_degrees",), ("wind_dir",), ("wind", "degrees"))
    wind_speed = _first_number(
        item, ("wind_speed_kt",), ("wind", "speed_kts"), ("wind", "speed_kt")
    )
    wind_gust = _first_number(item, ("wind_gust_kt",), ("wgst",))

    if raw:
        fields = parse_raw_metar(raw)
        if temperature is None:
            temperature = fields.temperature_c
        if altimeter is None:
            altimeter = fields.altimeter_in_hg
        if wind_dir is None:
            wind_dir = fields.wind_dir_degrees
        if wind_speed is None:
            wind_speed = fields.wind_speed_kt
        if wind_gust is None:
            wind_gust = fields.wind_gust_kt

    return MetarObservation(
        source=SOURCE_AWC,
        station=str(station) if station is not None else None,
        obs_time=obs_time,
        temperature_c=temperature,
        altimeter_in_hg=altimeter,
        wind_dir_degrees=wind_dir,
        wind_speed_kt=wind_speed,
        wind_gust_kt=wind_gust,
        raw=str(raw) if raw is not None else None,
    )

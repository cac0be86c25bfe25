"""Current weather for pre-filling takeoff conditions.

Typical usage:
    from c172perf.weather import MetarClient

    with MetarClient() as client:
        obs = client.fetch("EGLL")[0]
"""

from c172perf.weather.client import InvalidStationError, MetarClient, MetarError
from c172perf.weather.metar import (
    MetarObservation,
    extract_temperature_c,
    normalize_awc,
    parse_noaa_text,
    parse_raw_metar,
)

__all__ = [
    "InvalidStationError",
    "MetarClient",
    "MetarError",
    "MetarObservation",
    "extract_temperature_c",
    "normalize_awc",
    "parse_noaa_text",
    "parse_raw_metar",
]

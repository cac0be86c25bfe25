"""Derive calculator inputs from a METAR and the departure runway.

Pressure altitude comes from field elevation and the altimeter setting
(1000 ft per inHg from standard 29.92). The wind component is the projection
of the reported wind onto the runway heading, positive for headwind.

A variable (VRB) wind has no direction to project, so its component is taken
as zero. This is a modeling simplification kept on purpose.
"""

import math
from dataclasses import dataclass

from c172perf.airports.database import Airport, RunwayEnd
from c172perf.performance.interpolation import round_half_up
from c172perf.weather.metar import MetarObservation

STANDARD_ALTIMETER_IN_HG = 29.92
FEET_PER_IN_HG = 1000.0


@dataclass(frozen=True)
class ConditionSeed:
    """Calculator inputs derived from an observation.

    Attributes:
        station: Station the observation came from
        oat_c: Outside air temperature (deg C, rounded)
        pressure_altitude_ft: Pressure altitude (ft, rounded)
        wind_kt: Runway wind component, + headwind / - tailwind (kt, rounded)
        runway: Runway end ident the wind was resolved against
        observation: Source observation
    """

    station: str | None
    oat_c: int | None
    pressure_altitude_ft: int | None
    wind_kt: int | None
    runway: str | None
    observation: MetarObservation


def pressure_altitude_ft(elevation_ft: float, altimeter_in_hg: float) -> int:
    """Pressure altitude from field elevation and altimeter setting.

    Examples:
        >>> pressure_altitude_ft(500, 29.92)
        500
        >>> pressure_altitude_ft(500, 30.12)
        300
    """
    return round_half_up(
        elevation_ft + (STANDARD_ALTIMETER_IN_HG - altimeter_in_hg) * FEET_PER_IN_HG
    )


def normalize_angle(delta_deg: float) -> float:
    """Wrap an angle difference into [-180, 180)."""
    return (delta_deg + 180.0) % 360.0 - 180.0


def headwind_component(
    wind_dir_deg: float | None,
    wind_speed_kt: float | None,
    runway_heading_deg: float,
) -> int | None:
    """Signed wind component along a runway.

    Args:
        wind_dir_deg: Direction the wind blows from (deg true), None for VRB.
        wind_speed_kt: Wind speed (kt).
        runway_heading_deg: Runway true heading (deg).

    Returns:
        Rounded component, positive for headwind, negative for tailwind;
        0 for a variable wind; None when the speed is unknown.

    Examples:
        >>> headwind_component(310, 10, 310)
        10
        >>> headwind_component(130, 10, 310)
        -10
    """
    if wind_speed_kt is None:
        return None
    if wind_dir_deg is None:
        return 0

    delta = normalize_angle(wind_dir_deg - runway_heading_deg)
    return round_half_up(wind_speed_kt * math.cos(math.radians(delta)))


def seed_conditions(
    observation: MetarObservation,
    airport: Airport | None = None,
    runway: RunwayEnd | None = None,
) -> ConditionSeed:
    """Build calculator inputs from an observation.

    Args:
        observation: Normalized METAR.
        airport: Departure airport, needed for pressure altitude.
        runway: Departure runway end, needed for the wind component.

    Returns:
        ConditionSeed; any input that cannot be derived is None.
    """
    oat = None
    if observation.temperature_c is not None:
        oat = round_half_up(observation.temperature_c)

    pressure_altitude = None
    if airport is not None and observation.altimeter_in_hg is not None:
        pressure_altitude = pressure_altitude_ft(airport.elevation_ft, observation.altimeter_in_hg)

    wind = None
    if runway is not None:
        wind = headwind_component(
            observation.wind_dir_degrees,
            observation.wind_speed_kt,
            runway.heading_deg_true,
        )

    return ConditionSeed(
        station=observation.station,
        oat_c=oat,
        pressure_altitude_ft=pressure_altitude,
        wind_kt=wind,
        runway=runway.ident if runway is not None else None,
        observation=observation,
    )

"""Takeoff distance calculation from the POH table.

Given a request (pressure altitude, OAT, weight, wind component, surface) the
calculator blends the two bracketing weight rows, interpolates the blended
grids at (pressure altitude, OAT), then applies the handbook wind and dry
grass corrections.

Out-of-range inputs never raise. They come back as None fields plus a note,
so a display can show placeholders:

- weight outside the table: every field None
- altitude/temperature off-grid, or a blank POH cell among the corners:
  distances None, speeds still set
- pressure altitude below the lowest row: clamped, computation continues
- NaN or infinite weight: rejected like an out-of-range weight; NaN or
  infinite altitude/temperature: treated as off-grid; NaN wind: distances None

Typical usage:
    from c172perf.performance import CalcRequest, calculate, load_table

    table = load_table("data/performance/c172m_takeoff.json")
    result = calculate(table, CalcRequest(
        pressure_altitude_ft=1500, oat_c=22, weight_lb=2200, wind_kt=6, dry_grass=False
    ))
    print(result.ground_roll_ft, result.to_clear_50ft_ft)
"""

import logging
import math
from dataclasses import dataclass

from c172perf.performance.interpolation import (
    bilinear,
    blend_fraction,
    blend_grids,
    lerp,
    round_half_up,
)
from c172perf.performance.table import PerformanceTable, WeightRow

logger = logging.getLogger(__name__)

# Handbook corrections
HEADWIND_REDUCTION_PER_9KT = 0.10
HEADWIND_MIN_FACTOR = 0.5
TAILWIND_INCREASE = 0.10
TAILWIND_CAP_KT = 10.0
DRY_GRASS_GROUND_ROLL_INCREMENT = 0.15

EXTRAPOLATION_NOTE = "Requested conditions require extrapolation beyond POH grid or hit a null cell."
INVALID_WIND_NOTE = "Wind component is not a number; distances not computed."


@dataclass(frozen=True)
class CalcRequest:
    """Takeoff conditions.

    Attributes:
        pressure_altitude_ft: Pressure altitude (ft), may be below the table
        oat_c: Outside air temperature (deg C)
        weight_lb: Takeoff weight (lb)
        wind_kt: Wind component along the runway, + headwind / - tailwind (kt)
        dry_grass: True for a dry grass runway, False for paved
    """

    pressure_altitude_ft: float
    oat_c: float
    weight_lb: float
    wind_kt: float = 0.0
    dry_grass: bool = False


@dataclass(frozen=True)
class CalcResult:
    """Takeoff distances and speeds.

    None means "cannot be computed", never zero.

    Attributes:
        ground_roll_ft: Ground roll (ft)
        to_clear_50ft_ft: Total distance to clear a 50 ft obstacle (ft)
        liftoff_kias: Liftoff speed (KIAS)
        at_50ft_kias: Speed at 50 ft (KIAS)
        notes: Advisories in the order they were raised
    """

    ground_roll_ft: int | None
    to_clear_50ft_ft: int | None
    liftoff_kias: int | None
    at_50ft_kias: int | None
    notes: tuple[str, ...] = ()

    @property
    def has_distances(self) -> bool:
        """True when both distances were computed."""
        return self.ground_roll_ft is not None and self.to_clear_50ft_ft is not None


def bracket_weight_rows(table: PerformanceTable, weight_lb: float) -> tuple[WeightRow, WeightRow]:
    """Find the adjacent weight rows enclosing a weight.

    Args:
        table: Performance table (rows sorted by weight).
        weight_lb: Weight within [min_weight_lb, max_weight_lb].

    Returns:
        (lower, upper) rows with lower.weight_lb <= weight_lb <= upper.weight_lb.
        The first matching pair wins, so a weight equal to a tabulated row
        other than the heaviest uses that row as the lower bound.
    """
    rows = table.weight_rows
    for lower, upper in zip(rows, rows[1:]):
        if lower.weight_lb <= weight_lb <= upper.weight_lb:
            return lower, upper
    return rows[0], rows[-1]


def wind_factor(wind_kt: float) -> float:
    """Distance multiplier for a signed wind component.

    Headwind reduces distances 10% per 9 kt, never below half. Tailwind
    increases them up to 10%, reached at 10 kt and held beyond.

    Examples:
        >>> wind_factor(9.0)
        0.9
        >>> wind_factor(-5.0)
        1.05
    """
    if wind_kt > 0:
        return max(1.0 - (wind_kt / 9.0) * HEADWIND_REDUCTION_PER_9KT, HEADWIND_MIN_FACTOR)
    if wind_kt < 0:
        tailwind = min(abs(wind_kt), TAILWIND_CAP_KT)
        return 1.0 + (tailwind / TAILWIND_CAP_KT) * TAILWIND_INCREASE
    return 1.0


def _format_weight(weight: float, w_min: float, w_max: float) -> str:
    """Format a rejected weight so it never reads as inside the range."""
    if math.isfinite(weight):
        rounded = round_half_up(weight)
        if rounded < w_min or rounded > w_max:
            return str(rounded)
    return f"{weight:g}"


def calculate(table: PerformanceTable, request: CalcRequest) -> CalcResult:
    """Compute takeoff distances and reference speeds.

    Args:
        table: Validated performance table.
        request: Takeoff conditions.

    Returns:
        CalcResult. Never raises for out-of-range conditions; see the module
        docstring for how each case is reported.
    """
    w_min = table.min_weight_lb
    w_max = table.max_weight_lb
    weight = request.weight_lb

    if not math.isfinite(weight) or weight < w_min or weight > w_max:
        logger.debug("Weight %g lb rejected, table covers %g-%g lb", weight, w_min, w_max)
        return CalcResult(
            ground_roll_ft=None,
            to_clear_50ft_ft=None,
            liftoff_kias=None,
            at_50ft_kias=None,
            notes=(
                f"Weight {_format_weight(weight, w_min, w_max)} lb outside table range "
                f"{w_min:g}-{w_max:g} lb.",
            ),
        )

    lower, upper = bracket_weight_rows(table, weight)
    t_w = blend_fraction(weight, lower.weight_lb, upper.weight_lb)

    liftoff_kias = round_half_up(lerp(lower.liftoff_kias, upper.liftoff_kias, t_w))
    at_50ft_kias = round_half_up(lerp(lower.at_50ft_kias, upper.at_50ft_kias, t_w))

    roll_grid = blend_grids(lower.ground_roll_ft, upper.ground_roll_ft, t_w)
    clear_grid = blend_grids(lower.to_clear_50ft_ft, upper.to_clear_50ft_ft, t_w)

    notes: list[str] = []

    altitudes = table.pressure_altitudes_ft
    pa_min = altitudes[0]
    pressure_altitude = request.pressure_altitude_ft
    if math.isfinite(pressure_altitude) and pressure_altitude < pa_min:
        notes.append(
            f"Pressure altitude {pressure_altitude:g} ft below POH grid; "
            f"clamped to sea level ({pa_min:g} ft)."
        )
        logger.debug("Pressure altitude %g ft clamped to %g ft", pressure_altitude, pa_min)
        pressure_altitude = pa_min

    temperatures = table.temperatures_c
    ground_roll = bilinear(pressure_altitude, request.oat_c, altitudes, temperatures, roll_grid)
    clear_50 = bilinear(pressure_altitude, request.oat_c, altitudes, temperatures, clear_grid)

    if ground_roll is None or clear_50 is None:
        logger.debug(
            "No POH coverage at PA %g ft, OAT %g C, %.0f lb",
            pressure_altitude,
            request.oat_c,
            weight,
        )
        notes.append(EXTRAPOLATION_NOTE)
        return CalcResult(
            ground_roll_ft=None,
            to_clear_50ft_ft=None,
            liftoff_kias=liftoff_kias,
            at_50ft_kias=at_50ft_kias,
            notes=tuple(notes),
        )

    if math.isnan(request.wind_kt):
        notes.append(INVALID_WIND_NOTE)
        return CalcResult(
            ground_roll_ft=None,
            to_clear_50ft_ft=None,
            liftoff_kias=liftoff_kias,
            at_50ft_kias=at_50ft_kias,
            notes=tuple(notes),
        )

    factor = wind_factor(request.wind_kt)
    ground_roll *= factor
    clear_50 *= factor

    # Grass increment comes from the wind-corrected ground roll and is added
    # to both distances unchanged
    if request.dry_grass:
        increment = ground_roll * DRY_GRASS_GROUND_ROLL_INCREMENT
        ground_roll += increment
        clear_50 += increment

    result = CalcResult(
        ground_roll_ft=round_half_up(ground_roll),
        to_clear_50ft_ft=round_half_up(clear_50),
        liftoff_kias=liftoff_kias,
        at_50ft_kias=at_50ft_kias,
        notes=tuple(notes),
    )

    logger.debug(
        "Takeoff at %.0f lb, PA %g ft, OAT %g C, wind %+g kt%s: roll=%d ft, 50ft=%d ft",
        weight,
        pressure_altitude,
        request.oat_c,
        request.wind_kt,
        ", dry grass" if request.dry_grass else "",
        result.ground_roll_ft,
        result.to_clear_50ft_ft,
    )
    return result


class TakeoffCalculator:
    """Calculator bound to one performance table.

    The table is loaded once and shared read-only by every call.

    Examples:
        >>> calc = TakeoffCalculator(load_table("data/performance/c172m_takeoff.json"))
        >>> result = calc.calculate(CalcRequest(0, 15, 2300))
        >>> print(f"Ground roll: {result.ground_roll_ft} ft")
    """

    def __init__(self, table: PerformanceTable) -> None:
        """Initialize with a validated table.

        Args:
            table: Performance table to compute against.
        """
        self.table = table
        logger.info(
            "TakeoffCalculator initialized: %s, weights %g-%g lb",
            table.metadata.aircraft or "unnamed table",
            table.min_weight_lb,
            table.max_weight_lb,
        )

    def calculate(self, request: CalcRequest) -> CalcResult:
        """Compute takeoff performance for a request."""
        return calculate(self.table, request)

    def weight_range_lb(self) -> tuple[float, float]:
        """Lightest and heaviest accepted weights (lb)."""
        return self.table.min_weight_lb, self.table.max_weight_lb

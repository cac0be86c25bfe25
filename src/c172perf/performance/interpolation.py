"""Linear and bilinear interpolation over POH grids with absent cells.

A cell value of None means the POH publishes no figure for that combination.
Absence always propagates: any interpolation touching a None cell yields None.
Nothing here extrapolates, a target outside an axis yields None as well.
"""

import math
from collections.abc import Sequence

MaybeFloat = float | None
Grid = tuple[tuple[MaybeFloat, ...], ...]


def lerp(a: float, b: float, t: float) -> float:
    """Blend linearly from a (t=0) to b (t=1)."""
    return a + (b - a) * t


def blend_fraction(x: float, x0: float, x1: float) -> float:
    """Position of x between x0 and x1 as a fraction.

    Returns 0 for a zero-width interval instead of dividing by zero.
    """
    if x1 == x0:
        return 0.0
    return (x - x0) / (x1 - x0)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up.

    Matches the usual handbook rounding (2.5 -> 3, -2.5 -> -2) rather than
    Python's round-half-to-even.
    """
    return math.floor(value + 0.5)


def bracket_index(x: float, axis: Sequence[float]) -> int | None:
    """Find the lower bracketing index of x on a strictly increasing axis.

    Args:
        x: Target value.
        axis: Strictly increasing axis values.

    Returns:
        First index i with axis[i] <= x <= axis[i + 1], or None when x lies
        outside [axis[0], axis[-1]] or is not finite. For a single-value
        axis the only valid target is that value, bracketed at index 0.

    Examples:
        >>> bracket_index(15.0, [0, 10, 20, 30])
        1
        >>> bracket_index(20.0, [0, 10, 20, 30])
        1
        >>> bracket_index(-1.0, [0, 10]) is None
        True
        >>> bracket_index(float("nan"), [0, 10]) is None
        True
    """
    if not math.isfinite(x):
        return None
    if not axis or x < axis[0] or x > axis[-1]:
        return None

    i = 0
    while i + 1 < len(axis) and x > axis[i + 1]:
        i += 1
    return i


def blend_grids(lower: Grid, upper: Grid, t: float) -> Grid:
    """Blend two equally shaped grids cell by cell.

    Args:
        lower: Grid at blend fraction 0.
        upper: Grid at blend fraction 1.
        t: Blend fraction.

    Returns:
        New grid; a cell is None when either source cell is None.
    """
    return tuple(
        tuple(
            None if a is None or b is None else lerp(a, b, t)
            for a, b in zip(lower_row, upper_row, strict=True)
        )
        for lower_row, upper_row in zip(lower, upper, strict=True)
    )


def bilinear(
    x: float,
    y: float,
    xs: Sequence[float],
    ys: Sequence[float],
    grid: Grid,
) -> MaybeFloat:
    """Interpolate a grid at (x, y).

    Rows of the grid follow xs (pressure altitude), columns follow ys
    (temperature). The y direction is interpolated first on both bracketing
    rows, then the two results along x.

    Args:
        x: Row-axis target.
        y: Column-axis target.
        xs: Row axis, strictly increasing.
        ys: Column axis, strictly increasing.
        grid: Values shaped (len(xs), len(ys)).

    Returns:
        Interpolated value, or None when a target is off-grid or any of the
        four corner cells is None.
    """
    i = bracket_index(x, xs)
    j = bracket_index(y, ys)
    if i is None or j is None:
        return None

    i1 = min(i + 1, len(xs) - 1)
    j1 = min(j + 1, len(ys) - 1)

    q00 = grid[i][j]
    q01 = grid[i][j1]
    q10 = grid[i1][j]
    q11 = grid[i1][j1]
    if q00 is None or q01 is None or q10 is None or q11 is None:
        return None

    tx = blend_fraction(x, xs[i], xs[i1])
    ty = blend_fraction(y, ys[j], ys[j1])

    r0 = lerp(q00, q01, ty)
    r1 = lerp(q10, q11, ty)
    return lerp(r0, r1, tx)

"""Unit conversions for presenting POH figures in metric.

The POH tables are imperial. Conversions happen only at the edges (input
parsing and display), never inside the calculation.
"""

import math

LB_PER_KG = 2.20462262185
M_PER_FT = 0.3048


def lb_from_kg(kg: float) -> float:
    """Convert kilograms to pounds."""
    return kg * LB_PER_KG


def kg_from_lb(lb: float) -> float:
    """Convert pounds to kilograms."""
    return lb / LB_PER_KG


def m_from_ft(ft: float | None) -> int | None:
    """Convert feet to whole meters, passing None through.

    Examples:
        >>> m_from_ft(1000)
        305
        >>> m_from_ft(None) is None
        True
    """
    if ft is None:
        return None
    return math.floor(ft * M_PER_FT + 0.5)

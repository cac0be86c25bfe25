"""Aviation units and conversions.

Typical usage:
    from c172perf.aviation import lb_from_kg, m_from_ft

    weight_lb = lb_from_kg(950)
"""

from c172perf.aviation.units import LB_PER_KG, M_PER_FT, kg_from_lb, lb_from_kg, m_from_ft

__all__ = [
    "LB_PER_KG",
    "M_PER_FT",
    "kg_from_lb",
    "lb_from_kg",
    "m_from_ft",
]

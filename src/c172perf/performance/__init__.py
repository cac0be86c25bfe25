"""Takeoff performance from digitized POH tables.

This package provides:
- The immutable performance table and its JSON loader
- Weight, temperature and altitude interpolation with blank-cell handling
- Wind and dry grass corrections
- Seeding calculator inputs from a METAR and runway

Typical usage:
    from c172perf.performance import CalcRequest, calculate, load_table

    table = load_table("data/performance/c172m_takeoff.json")
    result = calculate(table, CalcRequest(pressure_altitude_ft=0, oat_c=15, weight_lb=2300))
"""

from c172perf.performance.calculator import (
    CalcRequest,
    CalcResult,
    TakeoffCalculator,
    calculate,
    wind_factor,
)
from c172perf.performance.conditions import (
    ConditionSeed,
    headwind_component,
    pressure_altitude_ft,
    seed_conditions,
)
from c172perf.performance.table import (
    PerformanceTable,
    TableError,
    TableMetadata,
    WeightRow,
    load_table,
)

__all__ = [
    "CalcRequest",
    "CalcResult",
    "ConditionSeed",
    "PerformanceTable",
    "TableError",
    "TableMetadata",
    "TakeoffCalculator",
    "WeightRow",
    "calculate",
    "headwind_component",
    "load_table",
    "pressure_altitude_ft",
    "seed_conditions",
    "wind_factor",
]

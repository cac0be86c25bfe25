"""Digitized POH takeoff performance table.

The table holds a pressure-altitude axis, a temperature axis and one row per
tested weight. Each weight row carries the reference speeds and two grids
(ground roll, total distance over a 50 ft obstacle) indexed
[altitude][temperature]. Cells the handbook leaves blank are None.

Typical usage:
    from c172perf.performance.table import load_table

    table = load_table("data/performance/c172m_takeoff.json")
    print(table.min_weight_lb, table.max_weight_lb)
"""

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from c172perf.performance.interpolation import Grid

logger = logging.getLogger(__name__)

SEA_LEVEL = "SL"


class TableError(ValueError):
    """Raised when a performance table violates its structural invariants."""


def normalize_pressure_altitude(value: Any) -> float:
    """Convert a pressure-altitude axis entry to feet.

    Args:
        value: Altitude in feet, or "SL" for sea level.

    Returns:
        Altitude in feet ("SL" becomes 0).

    Raises:
        TableError: If the entry is neither a number nor "SL".

    Examples:
        >>> normalize_pressure_altitude("SL")
        0.0
        >>> normalize_pressure_altitude(2000)
        2000.0
    """
    if isinstance(value, str) and value.strip().upper() == SEA_LEVEL:
        return 0.0
    return _as_number(value, "pressure altitude")


def _as_number(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TableError(f"Invalid {what}: {value!r}")
    if not math.isfinite(value):
        raise TableError(f"Invalid {what}: {value!r}")
    return float(value)


def _check_increasing(axis: tuple[float, ...], name: str) -> None:
    if not axis:
        raise TableError(f"{name} axis is empty")
    for a, b in zip(axis, axis[1:]):
        if b <= a:
            raise TableError(f"{name} axis must be strictly increasing, got {a:g} then {b:g}")


@dataclass(frozen=True)
class WeightRow:
    """POH data for one tested weight.

    Attributes:
        weight_lb: Gross weight (lb)
        liftoff_kias: Liftoff speed (KIAS)
        at_50ft_kias: Speed at 50 ft (KIAS)
        ground_roll_ft: Ground roll grid [altitude][temperature] (ft or None)
        to_clear_50ft_ft: Total distance over 50 ft grid, same shape (ft or None)
    """

    weight_lb: float
    liftoff_kias: float
    at_50ft_kias: float
    ground_roll_ft: Grid
    to_clear_50ft_ft: Grid

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WeightRow":
        """Build a weight row from its JSON mapping.

        Raises:
            TableError: If a field is missing or a value is not numeric.
        """
        try:
            weight = _as_number(data["weight_lb"], "weight")
            speeds = data["speeds_kias"]
            liftoff = _as_number(speeds["liftoff"], f"liftoff speed at {weight:g} lb")
            at_50ft = _as_number(speeds["at_50ft"], f"50 ft speed at {weight:g} lb")
            ground_roll = _parse_grid(data["ground_roll_ft"], f"ground roll at {weight:g} lb")
            clear_50 = _parse_grid(data["to_clear_50ft_ft"], f"50 ft distance at {weight:g} lb")
        except (KeyError, TypeError) as e:
            raise TableError(f"Malformed weight entry: missing {e}") from e

        return cls(
            weight_lb=weight,
            liftoff_kias=liftoff,
            at_50ft_kias=at_50ft,
            ground_roll_ft=ground_roll,
            to_clear_50ft_ft=clear_50,
        )


def _parse_grid(rows: Any, what: str) -> Grid:
    if not isinstance(rows, list):
        raise TableError(f"{what} grid must be a list of rows")

    grid = []
    for row in rows:
        if not isinstance(row, list):
            raise TableError(f"{what} grid must be a list of rows")
        grid.append(tuple(None if cell is None else _as_number(cell, f"{what} cell") for cell in row))
    return tuple(grid)


@dataclass(frozen=True)
class TableMetadata:
    """Descriptive information carried alongside the grids.

    None of these fields feed the calculation; they document where the
    numbers came from and what the handbook assumes.
    """

    schema_version: str = ""
    aircraft: str = ""
    poh_edition_year: int | None = None
    units: dict[str, str] = field(default_factory=dict)
    assumptions: dict[str, str] = field(default_factory=dict)
    adjustments: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TableMetadata":
        """Extract metadata from the top level of the table JSON."""
        return cls(
            schema_version=str(data.get("schema_version", "")),
            aircraft=str(data.get("aircraft", "")),
            poh_edition_year=data.get("poh_edition_year"),
            units=dict(data.get("units") or {}),
            assumptions=dict(data.get("assumptions") or {}),
            adjustments=dict(data.get("adjustments") or {}),
        )


@dataclass(frozen=True)
class PerformanceTable:
    """Immutable POH takeoff table.

    Weight rows are kept sorted by weight. Construction validates the
    invariants the interpolation relies on and raises TableError otherwise.

    Attributes:
        pressure_altitudes_ft: Altitude axis (ft), strictly increasing
        temperatures_c: Temperature axis (deg C), strictly increasing
        weight_rows: At least two rows with distinct weights
        metadata: Descriptive information
    """

    pressure_altitudes_ft: tuple[float, ...]
    temperatures_c: tuple[float, ...]
    weight_rows: tuple[WeightRow, ...]
    metadata: TableMetadata = field(default_factory=TableMetadata)

    def __post_init__(self) -> None:
        _check_increasing(self.pressure_altitudes_ft, "Pressure altitude")
        _check_increasing(self.temperatures_c, "Temperature")

        rows = tuple(sorted(self.weight_rows, key=lambda row: row.weight_lb))
        if len(rows) < 2:
            raise TableError("Table needs at least two weight rows")
        for a, b in zip(rows, rows[1:]):
            if a.weight_lb == b.weight_lb:
                raise TableError(f"Duplicate weight row: {a.weight_lb:g} lb")

        shape = (len(self.pressure_altitudes_ft), len(self.temperatures_c))
        for row in rows:
            for name, grid in (
                ("ground roll", row.ground_roll_ft),
                ("50 ft distance", row.to_clear_50ft_ft),
            ):
                if len(grid) != shape[0] or any(len(r) != shape[1] for r in grid):
                    raise TableError(
                        f"{name} grid at {row.weight_lb:g} lb does not match axes "
                        f"{shape[0]}x{shape[1]}"
                    )

        object.__setattr__(self, "weight_rows", rows)

    @property
    def min_weight_lb(self) -> float:
        """Lightest tabulated weight (lb)."""
        return self.weight_rows[0].weight_lb

    @property
    def max_weight_lb(self) -> float:
        """Heaviest tabulated weight (lb)."""
        return self.weight_rows[-1].weight_lb

    @property
    def weights_lb(self) -> tuple[float, ...]:
        """All tabulated weights in ascending order."""
        return tuple(row.weight_lb for row in self.weight_rows)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PerformanceTable":
        """Build a table from the parsed JSON schema.

        Args:
            data: Mapping with a "grid" section holding pressure_altitudes_ft,
                temperatures_c and weights, plus optional metadata keys.

        Returns:
            Validated PerformanceTable.

        Raises:
            TableError: If the mapping does not describe a valid table.
        """
        if not isinstance(data, dict):
            raise TableError("Table root must be a mapping")

        try:
            grid = data["grid"]
            altitudes = tuple(normalize_pressure_altitude(pa) for pa in grid["pressure_altitudes_ft"])
            temperatures = tuple(_as_number(t, "temperature") for t in grid["temperatures_c"])
            weights = grid["weights"]
        except (KeyError, TypeError) as e:
            raise TableError(f"Malformed grid section: missing {e}") from e

        if not isinstance(weights, list):
            raise TableError("grid.weights must be a list")

        return cls(
            pressure_altitudes_ft=altitudes,
            temperatures_c=temperatures,
            weight_rows=tuple(WeightRow.from_dict(entry) for entry in weights),
            metadata=TableMetadata.from_dict(data),
        )


def load_table(path: str | Path) -> PerformanceTable:
    """Load and validate a performance table from a JSON file.

    Args:
        path: JSON file following the table schema.

    Returns:
        Validated PerformanceTable.

    Raises:
        TableError: If the file cannot be read, is not JSON, or violates the
            table invariants.
    """
    path = Path(path)

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise TableError(f"Failed to load performance table {path}: {e}") from e

    table = PerformanceTable.from_dict(data)
    logger.info(
        "Loaded %s table from %s: %d weights (%g-%g lb), %d altitudes, %d temperatures",
        table.metadata.aircraft or "performance",
        path,
        len(table.weight_rows),
        table.min_weight_lb,
        table.max_weight_lb,
        len(table.pressure_altitudes_ft),
        len(table.temperatures_c),
    )
    return table

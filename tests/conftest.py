"""Pytest configuration and fixtures for all tests."""

import copy
from collections.abc import Callable
from typing import Any

import pytest

from c172perf.performance.table import PerformanceTable

TOY_TABLE: dict[str, Any] = {
    "schema_version": "1.0",
    "aircraft": "Toy",
    "grid": {
        "pressure_altitudes_ft": ["SL", 2000],
        "temperatures_c": [0, 20],
        "weights": [
            {
                "weight_lb": 900,
                "speeds_kias": {"liftoff": 45, "at_50ft": 52},
                "ground_roll_ft": [[500, 500], [600, 600]],
                "to_clear_50ft_ft": [[1000, 1000], [1200, 1200]],
            },
            {
                "weight_lb": 1000,
                "speeds_kias": {"liftoff": 47, "at_50ft": 54},
                "ground_roll_ft": [[550, 550], [660, 660]],
                "to_clear_50ft_ft": [[1100, 1100], [1320, 1320]],
            },
        ],
    },
}


@pytest.fixture
def toy_table_data() -> dict[str, Any]:
    """Two-weight, two-altitude, two-temperature table as parsed JSON.

    Distances are temperature-invariant so results are easy to check by hand.
    """
    return copy.deepcopy(TOY_TABLE)


@pytest.fixture
def make_table(toy_table_data: dict[str, Any]) -> Callable[..., PerformanceTable]:
    """Factory building a PerformanceTable from the toy data.

    ``cells`` maps (weight index, grid name, row, col) to an override value.
    """

    def _make(cells: dict[tuple[int, str, int, int], Any] | None = None) -> PerformanceTable:
        data = copy.deepcopy(toy_table_data)
        for (w, name, row, col), value in (cells or {}).items():
            data["grid"]["weights"][w][name][row][col] = value
        return PerformanceTable.from_dict(data)

    return _make


@pytest.fixture
def toy_table(make_table: Callable[..., PerformanceTable]) -> PerformanceTable:
    """Fully populated toy table."""
    return make_table()

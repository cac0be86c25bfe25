"""Tests for the interpolation primitives."""

import math

import pytest

from c172perf.performance.interpolation import (
    bilinear,
    blend_fraction,
    blend_grids,
    bracket_index,
    lerp,
    round_half_up,
)


class TestLinear:
    """Tests for lerp and blend_fraction."""

    def test_lerp_endpoints(self) -> None:
        """Test lerp returns the endpoints at 0 and 1."""
        assert lerp(10, 20, 0) == 10
        assert lerp(10, 20, 1) == 20
        assert lerp(10, 20, 0.25) == 12.5

    def test_blend_fraction(self) -> None:
        """Test fraction along an interval."""
        assert blend_fraction(15, 10, 20) == 0.5
        assert blend_fraction(10, 10, 20) == 0.0

    def test_blend_fraction_zero_width(self) -> None:
        """Test a zero-width interval gives 0 instead of dividing by zero."""
        assert blend_fraction(5, 5, 5) == 0.0

    @pytest.mark.parametrize(
        "value,expected",
        [(2.5, 3), (2.4999, 2), (-2.5, -2), (-2.6, -3), (0.5, 1), (7, 7)],
    )
    def test_round_half_up(self, value: float, expected: int) -> None:
        """Test halves round toward positive infinity."""
        assert round_half_up(value) == expected


class TestBracketIndex:
    """Tests for axis bracketing."""

    def test_interior_value(self) -> None:
        """Test a value between axis points."""
        assert bracket_index(15, [0, 10, 20, 30]) == 1

    def test_exact_axis_value_uses_lower_pair(self) -> None:
        """Test an interior axis value is the upper end of the earlier pair."""
        assert bracket_index(20, [0, 10, 20, 30]) == 1

    def test_endpoints(self) -> None:
        """Test both endpoints are inside the axis."""
        assert bracket_index(0, [0, 10, 20]) == 0
        assert bracket_index(20, [0, 10, 20]) == 1

    @pytest.mark.parametrize("value", [-0.1, 30.1])
    def test_outside_axis(self, value: float) -> None:
        """Test values outside the axis give None."""
        assert bracket_index(value, [0, 10, 20, 30]) is None

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_value(self, value: float) -> None:
        """Test NaN and infinities are never bracketed."""
        assert bracket_index(value, [0, 10, 20, 30]) is None

    def test_single_value_axis(self) -> None:
        """Test a one-point axis brackets only its own value."""
        assert bracket_index(5, [5]) == 0
        assert bracket_index(6, [5]) is None

    def test_empty_axis(self) -> None:
        """Test an empty axis never brackets."""
        assert bracket_index(0, []) is None


class TestBlendGrids:
    """Tests for cell-by-cell grid blending."""

    def test_blend_values(self) -> None:
        """Test each cell is blended independently."""
        lower = ((100.0, 200.0),)
        upper = ((200.0, 400.0),)
        assert blend_grids(lower, upper, 0.5) == ((150.0, 300.0),)

    def test_none_in_either_grid(self) -> None:
        """Test a blank cell on either side blanks the result cell."""
        lower = ((None, 200.0, 300.0),)
        upper = ((200.0, None, 300.0),)
        assert blend_grids(lower, upper, 0.5) == ((None, None, 300.0),)

    def test_shape_mismatch_raises(self) -> None:
        """Test grids of different shapes are rejected."""
        with pytest.raises(ValueError):
            blend_grids(((1.0, 2.0),), ((1.0,),), 0.5)


class TestBilinear:
    """Tests for bilinear interpolation."""

    @pytest.fixture
    def grid(self):
        """2x2 grid with distinct corners."""
        return ((100.0, 200.0), (300.0, 500.0))

    def test_corners(self, grid) -> None:
        """Test each corner is reproduced exactly."""
        xs, ys = (0, 1000), (0, 20)
        assert bilinear(0, 0, xs, ys, grid) == 100
        assert bilinear(0, 20, xs, ys, grid) == 200
        assert bilinear(1000, 0, xs, ys, grid) == 300
        assert bilinear(1000, 20, xs, ys, grid) == 500

    def test_center(self, grid) -> None:
        """Test the center is the mean of the corners."""
        assert bilinear(500, 10, (0, 1000), (0, 20), grid) == pytest.approx(275)

    def test_off_grid(self, grid) -> None:
        """Test targets outside either axis give None."""
        assert bilinear(1001, 10, (0, 1000), (0, 20), grid) is None
        assert bilinear(500, -1, (0, 1000), (0, 20), grid) is None

    def test_null_corner(self) -> None:
        """Test a blank corner blanks the result."""
        grid = ((100.0, 200.0), (300.0, None))
        assert bilinear(500, 10, (0, 1000), (0, 20), grid) is None

    def test_last_row_and_column(self) -> None:
        """Test the top corner of a larger grid is reachable."""
        grid = ((1.0, 2.0, 3.0), (4.0, 5.0, 6.0), (7.0, 8.0, 9.0))
        assert bilinear(2000, 40, (0, 1000, 2000), (0, 20, 40), grid) == 9.0

    def test_single_value_axes(self) -> None:
        """Test degenerate one-point axes return the single cell."""
        assert bilinear(0, 15, (0,), (15,), ((42.0,),)) == 42.0

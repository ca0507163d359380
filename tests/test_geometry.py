from __future__ import annotations

import pytest

from ubvff.entities import Point
from ubvff.geometry import TYPE1_SCALE, TYPE2_SCALE, format_coord, format_fixed, round_bounds, round_int, to_float


@pytest.mark.parametrize("scale", [TYPE1_SCALE, TYPE2_SCALE])
def test_round_int_quarter_boundary(scale):
    quarter = scale // 4
    assert round_int(0, scale) == 0
    assert round_int(quarter - 1, scale) == 0
    assert round_int(quarter, scale) == 1
    assert round_int(3 * scale + quarter - 1, scale) == 3
    assert round_int(3 * scale + quarter, scale) == 4
    assert round_int(5 * scale, scale) == 5


@pytest.mark.parametrize("scale", [TYPE1_SCALE, TYPE2_SCALE])
def test_round_int_negative_values(scale):
    quarter = scale // 4
    assert round_int(-scale, scale) == -1
    # -2 + (quarter - 1): floor is -2 and the rest is under a quarter.
    assert round_int(-2 * scale + quarter - 1, scale) == -2
    assert round_int(-2 * scale + quarter, scale) == -3


def test_format_fixed_uses_six_decimals():
    assert format_fixed(TYPE1_SCALE, TYPE1_SCALE) == "1.000000"
    assert format_fixed(-TYPE2_SCALE // 2, TYPE2_SCALE) == "-0.500000"
    assert format_fixed(0, TYPE2_SCALE) == "0.000000"


def test_format_coord_is_column_aligned():
    assert format_coord(TYPE1_SCALE, TYPE1_SCALE) == "   1.000000 "
    assert len(format_coord(-123 * TYPE2_SCALE, TYPE2_SCALE)) == 12


def test_round_bounds():
    s = TYPE2_SCALE
    assert round_bounds((0, -s, 2 * s, 3 * s + s // 2), s) == (0, -1, 2, 4)


def test_fixed_point_to_float():
    assert to_float(3 * TYPE1_SCALE // 2, TYPE1_SCALE) == 1.5
    assert Point(-TYPE2_SCALE, 2 * TYPE2_SCALE).scaled(TYPE2_SCALE) == (-1.0, 2.0)

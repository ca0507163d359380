from __future__ import annotations

from typing import Tuple

TYPE1_SCALE = 0x8000
TYPE2_SCALE = 0x10000


def round_int(value: int, divisor: int) -> int:
    """Round a fixed-point value to whole units.

    Anything within a quarter of a unit above a whole number rounds down to
    it; everything else rounds one step away from zero.
    """

    whole, rest = divmod(value, divisor)
    if rest < divisor // 4:
        return whole
    if whole >= 0:
        return whole + 1
    return whole - 1


def to_float(value: int, scale: int) -> float:
    return value / scale


def format_fixed(value: int, scale: int) -> str:
    return f"{to_float(value, scale):.6f}"


def format_coord(value: int, scale: int) -> str:
    # Column-aligned form used by the command listings.
    return f"{to_float(value, scale): 11.6f} "


def round_bounds(bounds: Tuple[int, int, int, int], scale: int) -> Tuple[int, int, int, int]:
    return tuple(round_int(value, scale) for value in bounds)  # type: ignore[return-value]

"""
Byte-order normalizing reads for the UBVFF containers.

Type 1 files and assembly files are plain big endian. Type 2 files store
16-bit words big endian, but each 32-bit point coordinate is written as two
big-endian halves with the *low* half first.  The swap helpers below mirror
what a host has to do to its native reads to recover those values, so the
reader can emulate either host byte order.
"""

from __future__ import annotations

import struct
import sys
from dataclasses import dataclass
from typing import BinaryIO, List, Sequence, Tuple

LAYOUT_BIG = "big"
LAYOUT_MIXED = "mixed"
NATIVE_LITTLE_ENDIAN = sys.byteorder == "little"

_CODES = {1: "B", 2: "H", 4: "I"}
READ_BLOCK = 0x10000


def reverse_byte_order2(value: int) -> int:
    return ((value & 0xFF) << 8) | ((value & 0xFF00) >> 8)


def reverse_byte_order4(value: int) -> int:
    return (
        ((value & 0x000000FF) << 24)
        | ((value & 0x0000FF00) << 8)
        | ((value & 0x00FF0000) >> 8)
        | ((value & 0xFF000000) >> 24)
    )


def reverse_byte_mixed(value: int) -> int:
    """Swap the bytes inside each 16-bit half, keeping the halves in place."""

    return (
        ((value & 0x000000FF) << 8)
        | ((value & 0x0000FF00) >> 8)
        | ((value & 0x00FF0000) << 8)
        | ((value & 0xFF000000) >> 8)
    )


def reverse_halves(value: int) -> int:
    """Rotate a 32-bit value by 16 bits."""

    return ((value & 0x0000FFFF) << 16) | ((value & 0xFFFF0000) >> 16)


def to_signed32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def to_signed16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


@dataclass
class ViewBounds:
    """Running min/max of every coordinate seen, in raw fixed-point units."""

    min_x: int = 0
    min_y: int = 0
    max_x: int = 0x10000
    max_y: int = 0x10000

    def update_words(self, values: Sequence[int]) -> None:
        # Even slots are X, odd slots are Y. A new maximum short-circuits the
        # minimum check for that value.
        for idx, value in enumerate(values):
            if idx % 2 == 0:
                if value > self.max_x:
                    self.max_x = value
                elif value < self.min_x:
                    self.min_x = value
            else:
                if value > self.max_y:
                    self.max_y = value
                elif value < self.min_y:
                    self.min_y = value

    def fold(self, other: Tuple[int, int, int, int]) -> None:
        x1, y1, x2, y2 = other
        self.min_x = min(self.min_x, x1)
        self.min_y = min(self.min_y, y1)
        self.max_x = max(self.max_x, x2)
        self.max_y = max(self.max_y, y2)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.min_x, self.min_y, self.max_x, self.max_y


class ByteOrderReader:
    """Read fixed-size records from ``stream`` and normalize their byte order.

    ``little_endian`` describes the host whose native reads are emulated; the
    values handed back are the same either way.  When ``bounds`` is given,
    every 4-byte read is treated as point data and folded into it.
    """

    def __init__(
        self,
        stream: BinaryIO,
        *,
        layout: str = LAYOUT_BIG,
        bounds: ViewBounds | None = None,
        little_endian: bool = NATIVE_LITTLE_ENDIAN,
    ) -> None:
        if layout not in (LAYOUT_BIG, LAYOUT_MIXED):
            raise ValueError(f"unknown byte layout {layout!r}")
        self.stream = stream
        self.layout = layout
        self.bounds = bounds
        self.little_endian = little_endian

    def _swap(self, size: int, value: int) -> int:
        if size == 2:
            return reverse_byte_order2(value) if self.little_endian else value
        if size == 4:
            if self.layout == LAYOUT_MIXED:
                return reverse_byte_mixed(value) if self.little_endian else reverse_halves(value)
            return reverse_byte_order4(value) if self.little_endian else value
        return value

    def read(self, size: int, count: int) -> List[int]:
        """Return up to ``count`` unsigned records; fewer means a short read."""

        if size not in _CODES:
            raise ValueError(f"unsupported record size {size}")
        # Counts come from the file; never ask the stream for more than a
        # block at a time so a corrupt count ends as a short read.
        wanted = size * count
        chunks: List[bytes] = []
        while wanted > 0:
            chunk = self.stream.read(min(wanted, READ_BLOCK))
            if not chunk:
                break
            chunks.append(chunk)
            wanted -= len(chunk)
        data = b"".join(chunks)
        complete = len(data) // size
        if complete == 0:
            return []
        host = "<" if self.little_endian else ">"
        raw = struct.unpack(f"{host}{complete}{_CODES[size]}", data[: complete * size])
        values = [self._swap(size, value) for value in raw]
        if complete != count:
            return values
        if size == 4 and self.bounds is not None:
            self.bounds.update_words([to_signed32(value) for value in values])
        return values

    def read_signed(self, count: int) -> List[int]:
        return [to_signed32(value) for value in self.read(4, count)]

    def seek(self, offset: int, whence: int = 0) -> int:
        return self.stream.seek(offset, whence)

    def at_end(self) -> bool:
        return self.stream.read(1) == b""

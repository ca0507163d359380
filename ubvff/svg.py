"""
SVG writer shared by both UBVFF variants.

The writer is a small state machine: every operation checks the current
state against the set that may legally precede it and raises
``EmitterStateError`` *before* anything is written.  The two variants only
differ in whether layer groups exist, whether a bare ``Z`` may directly
follow a move, and whether the viewBox is known up front; ``EmitterProfile``
captures those switches so there is exactly one machine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO, Dict, FrozenSet, Tuple

from .entities import Color, Cubic, Point
from .errors import EmitterStateError, FormatValidationError
from .geometry import TYPE1_SCALE, TYPE2_SCALE, format_fixed, round_int

SVG_OPEN_TAIL = '" version="1.1" baseProfile="full" xmlns="http://www.w3.org/2000/svg">\n'
SVG_OPEN_HEAD = '<svg viewBox="'
SVG_CLOSE = "</svg>\n"

# The placeholder (quotes included) starts at byte 13 of the document and the
# assembler reads finished viewBoxes back from byte 14. Keep SVG_OPEN_HEAD in
# sync with both offsets.
VIEWBOX_PLACEHOLDER = '"VIEWBOX_PLACEHOLDER_1234"'
VIEWBOX_OFFSET = len(SVG_OPEN_HEAD) - 1
VIEWBOX_VALUE_OFFSET = len(SVG_OPEN_HEAD)
VIEWBOX_WIDTH = len(VIEWBOX_PLACEHOLDER)

STROKE_STYLE = 'stroke-linecap="butt" stroke-linejoin="miter" stroke-miterlimit="10" '


class EmitterState(IntEnum):
    BEGIN = 0
    AFTER_HEADER = 1
    AFTER_START_LAYER = 2
    AFTER_START_PATH = 3
    AFTER_LINE = 4
    AFTER_CLOSE_PATH = 5
    AFTER_END_PATH = 6
    AFTER_END_LAYER = 7
    AFTER_FOOTER = 8


@dataclass(frozen=True)
class EmitterProfile:
    name: str
    scale: int
    layered: bool
    close_after_start: bool
    deferred_viewbox: bool

    def transitions(self) -> Dict[str, FrozenSet[EmitterState]]:
        S = EmitterState
        opener = S.AFTER_START_LAYER if self.layered else S.AFTER_HEADER
        table = {
            "header": frozenset({S.BEGIN}),
            "start_path": frozenset({opener, S.AFTER_END_PATH, S.AFTER_CLOSE_PATH, S.AFTER_LINE}),
            "line": frozenset({S.AFTER_START_PATH, S.AFTER_LINE}),
            "cubic": frozenset({S.AFTER_START_PATH, S.AFTER_LINE}),
            "close_path": frozenset(
                {S.AFTER_LINE, S.AFTER_START_PATH} if self.close_after_start else {S.AFTER_LINE}
            ),
            "end_path": frozenset({S.AFTER_LINE, S.AFTER_CLOSE_PATH}),
            "footer": frozenset({S.AFTER_END_LAYER if self.layered else S.AFTER_END_PATH}),
        }
        if self.layered:
            table["start_layer"] = frozenset({S.AFTER_HEADER, S.AFTER_END_LAYER})
            table["end_layer"] = frozenset({S.AFTER_END_PATH, S.AFTER_START_LAYER})
        return table


TYPE1_PROFILE = EmitterProfile("type1", TYPE1_SCALE, layered=True, close_after_start=False, deferred_viewbox=False)
TYPE2_PROFILE = EmitterProfile("type2", TYPE2_SCALE, layered=False, close_after_start=True, deferred_viewbox=True)


def svg_open_tag(viewbox: str) -> str:
    return f"{SVG_OPEN_HEAD}{viewbox}{SVG_OPEN_TAIL}"


def placeholder_open_tag() -> str:
    return SVG_OPEN_HEAD[:-1] + VIEWBOX_PLACEHOLDER + SVG_OPEN_TAIL[1:]


def patch_viewbox(sink: BinaryIO, bounds: Tuple[int, int, int, int]) -> None:
    """Overwrite the placeholder in ``sink`` and return to the current position."""

    text = '"{} {} {} {}"'.format(*bounds)
    if len(text) > VIEWBOX_WIDTH:
        raise FormatValidationError(f"viewBox {text} does not fit the {VIEWBOX_WIDTH}-byte placeholder")
    sink.flush()
    position = sink.tell()
    sink.seek(VIEWBOX_OFFSET)
    sink.write(text.ljust(VIEWBOX_WIDTH).encode("ascii"))
    sink.seek(position)


class SvgEmitter:
    def __init__(self, sink: BinaryIO, profile: EmitterProfile) -> None:
        self.sink = sink
        self.profile = profile
        self.state = EmitterState.BEGIN
        self._allowed = profile.transitions()

    def _check(self, operation: str) -> None:
        allowed = self._allowed.get(operation)
        if allowed is None or self.state not in allowed:
            raise EmitterStateError(operation, self.state)

    def _emit(self, text: str, state: EmitterState) -> None:
        self.sink.write(text.encode("ascii"))
        self.state = state

    def _xy(self, point: Point) -> str:
        scale = self.profile.scale
        return f"{format_fixed(point.x, scale)} {format_fixed(point.y, scale)}"

    @property
    def finished(self) -> bool:
        return self.state == EmitterState.AFTER_FOOTER

    def header(self, width: int = 0, height: int = 0) -> None:
        """Open the document.

        ``width``/``height`` are fixed-point extents; deferred profiles ignore
        them and write the placeholder instead.
        """

        self._check("header")
        if self.profile.deferred_viewbox:
            text = placeholder_open_tag()
        else:
            scale = self.profile.scale
            text = svg_open_tag(f"0 0 {round_int(width, scale)} {round_int(height, scale)}")
        self._emit(text, EmitterState.AFTER_HEADER)

    def start_layer(self) -> None:
        self._check("start_layer")
        self._emit("<g>\n", EmitterState.AFTER_START_LAYER)

    def start_path(self, point: Point) -> None:
        self._check("start_path")
        if self.state in (EmitterState.AFTER_CLOSE_PATH, EmitterState.AFTER_LINE):
            base = "M "
        else:
            base = '<path d="M '
        self._emit(f"{base}{self._xy(point)} ", EmitterState.AFTER_START_PATH)

    def line(self, point: Point) -> None:
        self._check("line")
        self._emit(f"L {self._xy(point)} ", EmitterState.AFTER_LINE)

    def cubic(self, cubic: Cubic) -> None:
        self._check("cubic")
        p0, p1, p2 = cubic.points
        self._emit(f"C {self._xy(p0)}, {self._xy(p1)}, {self._xy(p2)} ", EmitterState.AFTER_LINE)

    def close_path(self) -> None:
        self._check("close_path")
        self._emit("Z ", EmitterState.AFTER_CLOSE_PATH)

    def end_path(self, fill: Color | None, stroke: Color | None, stroke_width: int) -> None:
        self._check("end_path")
        fill_attr = 'fill="none" ' if fill is None else f'fill="{fill.as_rgb()}" '
        if stroke is None:
            stroke_attr = 'stroke="none" '
        else:
            width = format_fixed(stroke_width, self.profile.scale)
            stroke_attr = f'stroke="{stroke.as_rgb()}" stroke-width="{width}" {STROKE_STYLE}'
        self._emit(f'" {fill_attr}{stroke_attr}/>\n', EmitterState.AFTER_END_PATH)

    def end_layer(self) -> None:
        self._check("end_layer")
        self._emit("</g>\n", EmitterState.AFTER_END_LAYER)

    def footer(self) -> None:
        self._check("footer")
        self._emit(SVG_CLOSE, EmitterState.AFTER_FOOTER)

    def set_viewbox(self, bounds: Tuple[int, int, int, int]) -> None:
        """Patch the placeholder with ``bounds`` (fixed-point, rounded here)."""

        if not self.profile.deferred_viewbox:
            raise FormatValidationError(f"{self.profile.name} documents carry their viewBox in the header")
        scale = self.profile.scale
        patch_viewbox(self.sink, tuple(round_int(value, scale) for value in bounds))

from __future__ import annotations

from typing import List, Tuple

from .entities import Color, Cubic, PathEntity, Point


class PathRecorder:
    """Collect the drawing events of a decode as ``PathEntity`` records.

    It accepts the same calls as ``SvgEmitter`` but does no state checking;
    the decoders always drive the emitter first when one is attached.
    """

    def __init__(self) -> None:
        self.paths: List[PathEntity] = []
        self.layer = 0
        self._ops: List[Tuple[str, Tuple[Point, ...]]] = []

    def header(self, *_args) -> None:
        pass

    def footer(self) -> None:
        pass

    @property
    def pending_close(self) -> bool:
        """True when the open path ends in a ``Z`` that was never finished."""

        return bool(self._ops) and self._ops[-1][0] == "Z"

    def start_layer(self) -> None:
        self.layer += 1

    def end_layer(self) -> None:
        pass

    def start_path(self, point: Point) -> None:
        self._ops.append(("M", (point,)))

    def line(self, point: Point) -> None:
        self._ops.append(("L", (point,)))

    def cubic(self, cubic: Cubic) -> None:
        self._ops.append(("C", cubic.points))

    def close_path(self) -> None:
        self._ops.append(("Z", ()))

    def end_path(self, fill: Color | None, stroke: Color | None, stroke_width: int) -> None:
        if not self._ops:
            return
        self.paths.append(
            PathEntity(
                ops=tuple(self._ops),
                fill=fill,
                stroke=stroke,
                stroke_width=stroke_width,
                layer=self.layer,
            )
        )
        self._ops = []

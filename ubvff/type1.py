"""
Decoder for UBVFF Type 1 files.

A Type 1 file is a single big-endian stream of 32-bit opcodes, each followed
by its own payload.  Geometry is nested implicitly: layers contain paths,
paths contain a move followed by line/cubic runs, and one of the END_PATH
opcodes decides how the finished path is painted using whatever colors and
stroke width were set most recently.
"""

from __future__ import annotations

from typing import BinaryIO, Callable, Dict, List

from .byteorder import LAYOUT_BIG, NATIVE_LITTLE_ENDIAN, ByteOrderReader, to_signed32
from .commands import (
    T1_CLOSE_PATH,
    T1_CUBIC,
    T1_END_FILE,
    T1_END_LAYER,
    T1_END_PATH_FO,
    T1_END_PATH_SF,
    T1_END_PATH_SO,
    T1_FILL_COLOR,
    T1_LAYER_SEP,
    T1_LINE,
    T1_NOP,
    T1_START_FILE,
    T1_START_LAYER,
    T1_START_PATH,
    T1_STROKE_COLOR,
    T1_STROKE_WIDTH,
    T1_UNKNOWN_FLAG1,
    T1_UNKNOWN_FLAG2,
    TYPE1_COMMANDS,
    VARIABLE,
    CommandInfo,
)
from .decoding import DecodeResult, Drawing
from .entities import Color, Cubic, DrawContext, Point, Type1Header
from .errors import FormatValidationError, NameTooLongError, TruncatedStreamError
from .geometry import TYPE1_SCALE, format_coord, round_int
from .logging import CommandLogger
from .naming import escape_string, unpack_padded_string
from .svg import TYPE1_PROFILE, SvgEmitter

TITLE_CAPACITY = 64


class Type1Decoder:
    def __init__(
        self,
        stream: BinaryIO,
        *,
        svg: BinaryIO | None = None,
        logger: CommandLogger | None = None,
        little_endian: bool = NATIVE_LITTLE_ENDIAN,
    ) -> None:
        self.reader = ByteOrderReader(stream, layout=LAYOUT_BIG, little_endian=little_endian)
        self.logger = logger or CommandLogger()
        self.draw = Drawing(SvgEmitter(svg, TYPE1_PROFILE) if svg is not None else None)
        self.context = DrawContext(stroke_width=TYPE1_SCALE)
        self.header = Type1Header()
        self.result = DecodeResult(variant="type1", scale=TYPE1_SCALE)
        self._header_written = False
        self._handlers: Dict[int, Callable[[List[int]], str]] = {
            T1_LAYER_SEP: self._nothing,
            T1_START_LAYER: self._start_layer,
            T1_END_LAYER: self._end_layer,
            T1_START_FILE: self._start_file,
            T1_STROKE_COLOR: self._stroke_color,
            T1_FILL_COLOR: self._fill_color,
            T1_START_PATH: self._start_path,
            T1_LINE: self._line,
            T1_CUBIC: self._cubic,
            T1_END_PATH_SO: lambda words: self._end_path(fill=False, stroke=True),
            T1_END_PATH_FO: lambda words: self._end_path(fill=True, stroke=False),
            T1_END_PATH_SF: lambda words: self._end_path(fill=True, stroke=True),
            T1_NOP: self._nothing,
            T1_CLOSE_PATH: self._close_path,
            T1_UNKNOWN_FLAG1: self._flag,
            T1_UNKNOWN_FLAG2: self._flag,
            T1_STROKE_WIDTH: self._stroke_width,
            T1_END_FILE: self._end_file,
        }

    def _words(self, count: int, what: str) -> List[int]:
        values = self.reader.read(4, count)
        if len(values) != count:
            raise TruncatedStreamError(f"read failed ({what})")
        return values

    def _points(self, count: int, what: str) -> List[Point]:
        values = [to_signed32(value) for value in self._words(count * 2, what)]
        return [Point(values[idx], values[idx + 1]) for idx in range(0, len(values), 2)]

    def _payload(self, info: CommandInfo) -> List[int]:
        """Read a fixed-arity payload; variable payloads are read by their handler."""

        if info.arity is VARIABLE or info.arity == 0:
            return []
        return self._words(info.arity, f"{info.name} payload")

    def _nothing(self, words: List[int]) -> str:
        return ""

    def _start_layer(self, words: List[int]) -> str:
        (length,) = self._words(1, "title size")
        if length > TITLE_CAPACITY:
            raise NameTooLongError("title string overflow")
        title = unpack_padded_string(self._words(length, "layer name"))
        self.result.layers.append(title)
        if not self._header_written:
            self.draw("header", self.header.x2, self.header.y2)
            self._header_written = True
        self.draw("start_layer")
        return f'"{escape_string(title)}"'

    def _end_layer(self, words: List[int]) -> str:
        if self.draw.recorder.pending_close:
            self._warn("missing END_PATH before END_LAYER")
            self.draw("end_path", None, None, self.context.stroke_width)
        self.draw("end_layer")
        return ""

    def _start_file(self, words: List[int]) -> str:
        values = [to_signed32(value) for value in words]
        self.header = Type1Header(*values)
        self.result.header = self.header
        return "".join(format_coord(value, TYPE1_SCALE) for value in values[:4]) + str(values[4])

    def _stroke_color(self, words: List[int]) -> str:
        (word,) = words
        self.context.stroke_color = Color.from_word(word)
        return self.context.stroke_color.as_rgb()

    def _fill_color(self, words: List[int]) -> str:
        (word,) = words
        self.context.fill_color = Color.from_word(word)
        return self.context.fill_color.as_rgb()

    def _start_path(self, words: List[int]) -> str:
        point = Point(to_signed32(words[0]), to_signed32(words[1]))
        self.draw("start_path", point)
        return self.logger.points([point], TYPE1_SCALE)

    def _line(self, words: List[int]) -> str:
        (count,) = self._words(1, "line pcount")
        points = self._points(count, "line point")
        for point in points:
            self.draw("line", point)
        return self.logger.points(points, TYPE1_SCALE)

    def _cubic(self, words: List[int]) -> str:
        (count,) = self._words(1, "cubic pcount")
        if count % 3 != 0:
            raise FormatValidationError(f"cubic point count {count} is not a multiple of 3")
        points = self._points(count, "cubic")
        for idx in range(0, len(points), 3):
            self.draw("cubic", Cubic.from_points(points[idx : idx + 3]))
        return self.logger.points(points, TYPE1_SCALE)

    def _end_path(self, *, fill: bool, stroke: bool) -> str:
        self.draw(
            "end_path",
            self.context.fill_color if fill else None,
            self.context.stroke_color if stroke else None,
            self.context.stroke_width,
        )
        return ""

    def _close_path(self, words: List[int]) -> str:
        self.draw("close_path")
        return ""

    def _flag(self, words: List[int]) -> str:
        (value,) = words
        return f"0x{value:08X}"

    def _stroke_width(self, words: List[int]) -> str:
        (value,) = words
        self.context.stroke_width = to_signed32(value)
        return format_coord(self.context.stroke_width, TYPE1_SCALE)

    def _end_file(self, words: List[int]) -> str:
        self.draw("footer")
        self.result.reached_end = True
        return ""

    def _warn(self, message: str) -> None:
        self.result.warnings.append(message)
        self.logger.warning(message)

    def run(self) -> DecodeResult:
        result = self.result
        while not result.reached_end:
            opcode = self.reader.read(4, 1)
            if not opcode:
                break
            info = TYPE1_COMMANDS.lookup(opcode[0])
            result.commands += 1
            handler = self._handlers.get(info.opcode)
            # Unknown opcodes carry no declared payload; keep reading opcodes.
            text = handler(self._payload(info)) if handler is not None else ""
            self.logger.command(info.name, text, known=info.known)

        if result.reached_end and not self.reader.at_end():
            self._warn("additional data past CMD_15_END_FILE marker")
        result.header = self.header
        result.paths = self.draw.recorder.paths
        result.viewbox = (0, 0, round_int(self.header.x2, TYPE1_SCALE), round_int(self.header.y2, TYPE1_SCALE))
        result.final_state = self.draw.state
        return result


def decode_type1(
    stream: BinaryIO,
    *,
    svg: BinaryIO | None = None,
    logger: CommandLogger | None = None,
    little_endian: bool = NATIVE_LITTLE_ENDIAN,
) -> DecodeResult:
    """Decode one Type 1 stream, writing SVG to ``svg`` when given."""

    return Type1Decoder(stream, svg=svg, logger=logger, little_endian=little_endian).run()

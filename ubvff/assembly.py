"""
Assemble multi-layer Type 2 images from their per-layer SVG files.

Some Type 2 images are not drawn directly: their "command" file is an
assembly file that either names one (file, layer) pair or includes other
assembly files.  The assembler walks that tree, collects every leaf, sorts
the leaves by layer number and stitches the already-converted
``NNNNN.svg`` files together, one ``<g>`` per layer.

Assembly file header (three big-endian int32)::

    h0 == 1            leaf: h1 must be 0, h2 = file_number << 16 | layer
    otherwise          group: h0 is roughly a command count and h1 == h2 == 0;
                       three more int32 follow, then int16 commands where
                       3/4 are followed by an int16 include number
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, List, Tuple

from .byteorder import LAYOUT_BIG, ByteOrderReader, ViewBounds, to_signed16, to_signed32
from .entities import LayerRef
from .errors import AssemblyRejected, FormatValidationError, TruncatedStreamError
from .logging import CommandLogger
from .naming import layer_prefix, numbered_file
from .svg import SVG_CLOSE, VIEWBOX_VALUE_OFFSET, patch_viewbox, placeholder_open_tag

MAX_DEPTH = 10
MAX_DUMP_LIST = 100
HEADER_PROBE = 150
LEAF_MARKER = 1
RESERVED_MARKER = 0x48
INCLUDE_COMMANDS = (3, 4)
COPY_BLOCK = 4096

_VIEWBOX_RE = re.compile(rb"\s*([+-]?\d+)\s+([+-]?\d+)\s+([+-]?\d+)\s+([+-]?\d+)")


def read_fragment_viewbox(head: bytes) -> Tuple[int, int, int, int]:
    """Parse the four integers written at the fixed viewBox offset."""

    match = _VIEWBOX_RE.match(head, VIEWBOX_VALUE_OFFSET)
    if match is None:
        raise FormatValidationError("unable to read viewBox")
    return tuple(int(value) for value in match.groups())  # type: ignore[return-value]


@dataclass
class AssemblyResult:
    source: str
    refs: List[LayerRef] = field(default_factory=list)
    written: bool = False
    shallow: bool = False
    bounds: Tuple[int, int, int, int] | None = None
    warnings: List[str] = field(default_factory=list)


class LayerAssembler:
    def __init__(self, source: str, *, logger: CommandLogger | None = None) -> None:
        self.source = str(source)
        self.prefix = layer_prefix(self.source)
        self.logger = logger or CommandLogger()
        self.refs: List[LayerRef] = []
        self.bounds = ViewBounds(0, 0, 1, 1)
        self.result = AssemblyResult(source=self.source)

    def _say(self, depth: int, message: str) -> None:
        self.logger.say(f"{'    ' * depth}{message}")

    def _warn(self, message: str) -> None:
        self.result.warnings.append(message)
        self.logger.warning(message)

    def add_ref(self, ref: LayerRef) -> None:
        self.refs.append(ref)
        if len(self.refs) >= MAX_DUMP_LIST:
            raise FormatValidationError("dumpList overload")

    def collect(self, name: str, depth: int = 0) -> None:
        """Walk ``name`` and everything it includes, filling ``self.refs``."""

        if depth == MAX_DEPTH:
            self._warn("MAX DEPTH reached, not going deeper")
            return
        with open(name, "rb") as handle:
            reader = ByteOrderReader(handle, layout=LAYOUT_BIG)
            header = [to_signed32(value) for value in reader.read(4, 3)]
            if len(header) != 3:
                raise TruncatedStreamError(f"read failed (header): {name}")
            kind, param, data = header

            if kind == LEAF_MARKER:
                if param != 0:
                    raise AssemblyRejected("weird_header", name)
                if depth == 0:
                    self._say(depth, "skip.shallow")
                    self.result.shallow = True
                    return
                data &= 0xFFFFFFFF
                ref = LayerRef(file_number=data >> 16, layer_number=data & 0xFFFF)
                self._say(depth, f"load layer {ref.layer_number} from {ref.file_number:05d}.svg")
                self.add_ref(ref)
                return
            if kind < 3 or kind >= MAX_DUMP_LIST:
                reason = "type"
            elif kind == 3 and depth == 0:
                reason = "three"
            elif param == RESERVED_MARKER:
                reason = "0x48"
            elif param != 0 or data != 0:
                reason = "not_group"
            else:
                reason = None
            if reason is not None:
                self._say(depth, f"skip.{reason}")
                raise AssemblyRejected(reason, name)

            if len(reader.read(4, 3)) != 3:
                raise TruncatedStreamError(f"read failed (header part 2): {name}")
            self._walk_group(reader, depth)
        self._say(depth, "end file")

    def _walk_group(self, reader: ByteOrderReader, depth: int) -> None:
        while True:
            words = reader.read(2, 1)
            if not words:
                return
            cmd = to_signed16(words[0])
            if cmd not in INCLUDE_COMMANDS:
                continue
            params = reader.read(2, 1)
            if not params:
                raise TruncatedStreamError("read failed (params)")
            child = numbered_file(self.prefix, params[0], ".bin")
            self._say(depth, f"include {child}")
            self.collect(child, depth + 1)

    def sorted_refs(self) -> List[LayerRef]:
        return sorted(self.refs, key=lambda ref: ref.layer_number)

    def _copy_fragment(self, ref: LayerRef, out: BinaryIO) -> None:
        name = numbered_file(self.prefix, ref.file_number, ".svg")
        path = Path(name)
        if not path.is_file():
            self._warn(f"unable to open input file '{name}'")
            return
        with path.open("rb") as fin:
            size = fin.seek(0, 2)
            fin.seek(0)
            head = fin.read(HEADER_PROBE)
            self.bounds.fold(read_fragment_viewbox(head))
            newline = head.find(b"\n")
            if newline == -1:
                raise FormatValidationError(f"reading header of {name}")
            start = newline + 1
            remaining = size - len(SVG_CLOSE) - start
            fin.seek(start)
            out.write(b"<g>\n")
            while remaining > 0:
                block = fin.read(min(COPY_BLOCK, remaining))
                if not block:
                    raise TruncatedStreamError(f"read failed while copying {name}")
                out.write(block)
                remaining -= len(block)
            out.write(b"</g>\n")

    def write_composite(self, out: BinaryIO) -> None:
        out.write(placeholder_open_tag().encode("ascii"))
        for ref in self.sorted_refs():
            self._copy_fragment(ref, out)
        patch_viewbox(out, self.bounds.as_tuple())
        out.write(SVG_CLOSE.encode("ascii"))

    def assemble(self, destination: str | Path) -> AssemblyResult:
        self.collect(self.source)
        result = self.result
        result.refs = self.sorted_refs()
        if result.shallow:
            return result
        with open(destination, "w+b") as out:
            self.logger.progress(f"writing to {destination}")
            self.write_composite(out)
        result.written = True
        result.bounds = self.bounds.as_tuple()
        return result


def assemble_layers(
    source: str | Path,
    destination: str | Path,
    *,
    logger: CommandLogger | None = None,
) -> AssemblyResult:
    return LayerAssembler(str(source), logger=logger).assemble(destination)

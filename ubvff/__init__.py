"""
Readers for the two "Unusual Binary Vector File Format" variants, their SVG
writer, and the layer assembler, split into modules for reuse.
"""

from .assembly import AssemblyResult, LayerAssembler, assemble_layers, read_fragment_viewbox
from .byteorder import (
    ByteOrderReader,
    ViewBounds,
    reverse_byte_mixed,
    reverse_byte_order2,
    reverse_byte_order4,
    reverse_halves,
)
from .commands import TYPE1_COMMANDS, TYPE2_COMMANDS, CommandInfo, CommandTable
from .decoding import DecodeResult
from .entities import Color, Cubic, DrawContext, LayerRef, PathEntity, Point, Type1Header, Type2Footer, Type2Header
from .errors import (
    AssemblyRejected,
    EmitterStateError,
    FormatValidationError,
    NameTooLongError,
    NamingError,
    TruncatedStreamError,
    UbvffError,
)
from .geometry import TYPE1_SCALE, TYPE2_SCALE, format_fixed, round_int
from .logging import CommandLogger
from .svg import TYPE1_PROFILE, TYPE2_PROFILE, EmitterProfile, EmitterState, SvgEmitter, patch_viewbox
from .type1 import decode_type1
from .type2 import decode_stroke_width, decode_type2, read_type2_preamble

__all__ = [
    "AssemblyResult",
    "LayerAssembler",
    "assemble_layers",
    "read_fragment_viewbox",
    "ByteOrderReader",
    "ViewBounds",
    "reverse_byte_mixed",
    "reverse_byte_order2",
    "reverse_byte_order4",
    "reverse_halves",
    "TYPE1_COMMANDS",
    "TYPE2_COMMANDS",
    "CommandInfo",
    "CommandTable",
    "DecodeResult",
    "Color",
    "Cubic",
    "DrawContext",
    "LayerRef",
    "PathEntity",
    "Point",
    "Type1Header",
    "Type2Footer",
    "Type2Header",
    "AssemblyRejected",
    "EmitterStateError",
    "FormatValidationError",
    "NameTooLongError",
    "NamingError",
    "TruncatedStreamError",
    "UbvffError",
    "TYPE1_SCALE",
    "TYPE2_SCALE",
    "format_fixed",
    "round_int",
    "CommandLogger",
    "TYPE1_PROFILE",
    "TYPE2_PROFILE",
    "EmitterProfile",
    "EmitterState",
    "SvgEmitter",
    "patch_viewbox",
    "decode_type1",
    "decode_stroke_width",
    "decode_type2",
    "read_type2_preamble",
]

"""
Opcode tables for both UBVFF variants.

Type 1 opcodes are 32-bit words followed by an opcode-specific payload of
32-bit words; the decoder reads every fixed-arity payload from this table
and leaves ``VARIABLE`` payloads to the opcode handler.  Type 2 opcodes are
the first word of a fixed five-word record; their bulk data lives in the
separate points file, so the arity recorded there is the number of *points*
consumed and serves the listing only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

VARIABLE = None


@dataclass(frozen=True)
class CommandInfo:
    opcode: int
    name: str
    arity: int | None = 0
    known: bool = True


class CommandTable:
    def __init__(self, entries: Iterable[CommandInfo], *, unknown_width: int) -> None:
        self._entries: Dict[int, CommandInfo] = {entry.opcode: entry for entry in entries}
        self.unknown_width = unknown_width

    def lookup(self, opcode: int) -> CommandInfo:
        entry = self._entries.get(opcode)
        if entry is not None:
            return entry
        return CommandInfo(
            opcode=opcode,
            name=f"UNKNOWN 0x{opcode:0{self.unknown_width}X}",
            arity=0,
            known=False,
        )

    def __contains__(self, opcode: int) -> bool:
        return opcode in self._entries

    def __iter__(self):
        return iter(sorted(self._entries.values(), key=lambda entry: entry.opcode))

    def __len__(self) -> int:
        return len(self._entries)


# Type 1: arity counts 32-bit payload words.
T1_LAYER_SEP = 0x00
T1_START_LAYER = 0x01
T1_END_LAYER = 0x02
T1_START_FILE = 0x03
T1_STROKE_COLOR = 0x04
T1_FILL_COLOR = 0x05
T1_START_PATH = 0x06
T1_LINE = 0x07
T1_CUBIC = 0x08
T1_END_PATH_SO = 0x09
T1_END_PATH_FO = 0x0A
T1_END_PATH_SF = 0x0B
T1_NOP = 0x0C
T1_CLOSE_PATH = 0x0D
T1_UNKNOWN_FLAG1 = 0x0E
T1_UNKNOWN_FLAG2 = 0x0F
T1_STROKE_WIDTH = 0x10
T1_END_FILE = 0x15

TYPE1_COMMANDS = CommandTable(
    [
        CommandInfo(T1_LAYER_SEP, "CMD_00_LAYER_SEP", 0),
        CommandInfo(T1_START_LAYER, "CMD_01_START_LAYER", VARIABLE),
        CommandInfo(T1_END_LAYER, "CMD_02_END_LAYER", 0),
        CommandInfo(T1_START_FILE, "CMD_03_START_FILE", 5),
        CommandInfo(T1_STROKE_COLOR, "CMD_04_STROKE_COLOR", 1),
        CommandInfo(T1_FILL_COLOR, "CMD_05_FILL_COLOR", 1),
        CommandInfo(T1_START_PATH, "CMD_06_START_PATH", 2),
        CommandInfo(T1_LINE, "CMD_07_LINE", VARIABLE),
        CommandInfo(T1_CUBIC, "CMD_08_CUBIC", VARIABLE),
        CommandInfo(T1_END_PATH_SO, "CMD_09_END_PATH_SO", 0),
        CommandInfo(T1_END_PATH_FO, "CMD_0A_END_PATH_FO", 0),
        CommandInfo(T1_END_PATH_SF, "CMD_0B_END_PATH_SF", 0),
        CommandInfo(T1_NOP, "CMD_0C_NOP", 0),
        CommandInfo(T1_CLOSE_PATH, "CMD_0D_CLOSE_PATH", 0),
        CommandInfo(T1_UNKNOWN_FLAG1, "CMD_0E_UNKNOWN_FLAG1", 1),
        CommandInfo(T1_UNKNOWN_FLAG2, "CMD_0F_UNKNOWN_FLAG2", 1),
        CommandInfo(T1_STROKE_WIDTH, "CMD_10_STROKE_WIDTH", 1),
        CommandInfo(T1_END_FILE, "CMD_15_END_FILE", 0),
    ],
    unknown_width=8,
)

# Type 2: arity counts points pulled from the points file.
T2_END_FILE = 0x01
T2_MOVE_TO = 0x02
T2_POINTS_LINES = 0x03
T2_POINTS_CUBICS = 0x04
T2_STROKE_COLOR = 0x05
T2_FILL_COLOR = 0x06
T2_END_PATH = 0x07
T2_STROKE_FLAG_A = 0x08
T2_STROKE_FLAG_B = 0x09
T2_STROKE_WIDTH = 0x0A

TYPE2_RECORD_WORDS = 5

TYPE2_COMMANDS = CommandTable(
    [
        CommandInfo(T2_END_FILE, "END_FILE", 0),
        CommandInfo(T2_MOVE_TO, "MOVE_TO", 1),
        CommandInfo(T2_POINTS_LINES, "POINTS_LINES", VARIABLE),
        CommandInfo(T2_POINTS_CUBICS, "POINTS_CUBICS", VARIABLE),
        CommandInfo(T2_STROKE_COLOR, "STROKE_COLOR", 0),
        CommandInfo(T2_FILL_COLOR, "FILL_COLOR", 0),
        CommandInfo(T2_END_PATH, "END_PATH", 0),
        CommandInfo(T2_STROKE_FLAG_A, "STROKE_FLAG_A", 0),
        CommandInfo(T2_STROKE_FLAG_B, "STROKE_FLAG_B", 0),
        CommandInfo(T2_STROKE_WIDTH, "STROKE_WIDTH", 0),
    ],
    unknown_width=4,
)

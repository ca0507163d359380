from __future__ import annotations

import io

from ubvff.commands import TYPE1_COMMANDS, TYPE2_COMMANDS, VARIABLE
from ubvff.entities import Point
from ubvff.geometry import TYPE1_SCALE
from ubvff.logging import DETAIL_ALL, DETAIL_COMMANDS, DETAIL_SUMMARY, CommandLogger


def test_known_opcodes_resolve():
    info = TYPE1_COMMANDS.lookup(0x15)
    assert info.name == "CMD_15_END_FILE"
    assert info.known
    assert TYPE1_COMMANDS.lookup(0x07).arity is VARIABLE
    assert TYPE2_COMMANDS.lookup(0x07).name == "END_PATH"
    assert len(TYPE1_COMMANDS) == 18
    assert len(TYPE2_COMMANDS) == 10


def test_unknown_opcodes_fall_back():
    info = TYPE1_COMMANDS.lookup(0x11)
    assert not info.known
    assert info.name == "UNKNOWN 0x00000011"
    assert TYPE2_COMMANDS.lookup(0x0B).name == "UNKNOWN 0x000B"
    assert 0x11 not in TYPE1_COMMANDS
    assert 0x10 in TYPE1_COMMANDS


def test_tables_iterate_in_opcode_order():
    opcodes = [info.opcode for info in TYPE2_COMMANDS]
    assert opcodes == sorted(opcodes)
    assert opcodes[0] == 0x01


def test_logger_hides_known_commands_below_detail_two():
    stream = io.StringIO()
    logger = CommandLogger(detail=DETAIL_SUMMARY, stream=stream)
    logger.command("CMD_0C_NOP", "")
    logger.command("UNKNOWN 0x000B", "0x0001", known=False)
    assert stream.getvalue() == "UNKNOWN 0x000B          0x0001\n"


def test_logger_prefixes():
    stream = io.StringIO()
    logger = CommandLogger(stream=stream)
    logger.progress("a")
    logger.info("b")
    logger.warning("c")
    logger.error("d")
    assert stream.getvalue().splitlines() == ["[+] a", "[i] b", "[!] warning : c", "[!] error : d"]


def test_point_listing_elides_below_full_detail():
    points = [Point(i * TYPE1_SCALE, 0) for i in range(5)]
    short = CommandLogger(detail=DETAIL_COMMANDS, stream=io.StringIO()).points(points, TYPE1_SCALE)
    full = CommandLogger(detail=DETAIL_ALL, stream=io.StringIO()).points(points, TYPE1_SCALE)
    assert short.endswith("...")
    assert "4.000000" not in short
    assert "4.000000" in full
    assert full.count("\n") == 1

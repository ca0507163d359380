from __future__ import annotations

import pytest

from ubvff.errors import NameTooLongError, NamingError
from ubvff.naming import (
    assembly_svg_name,
    auto_svg_name,
    escape_string,
    layer_prefix,
    numbered_file,
    points_file_name,
    unpack_padded_string,
)


@pytest.mark.parametrize(
    "source, expected",
    [
        ("tscp001.BIN", "tscp001.svg"),
        ("data/00053.bin", "data/00053.svg"),
        ("dir.v2/file", "dir.v2/file.svg"),
        ("a.b", "a.b.svg"),
        ("archive.tar.gz", "archive.tar.svg"),
        ("drawing.x/y", "drawing.x/y.svg"),
    ],
)
def test_auto_svg_name(source, expected):
    assert auto_svg_name(source) == expected


def test_auto_svg_name_rejects_long_input():
    with pytest.raises(NameTooLongError):
        auto_svg_name("x" * 400)


def test_points_file_name_keeps_directory():
    assert points_file_name("data/00053.bin", 52) == "data/00052.bin"
    assert points_file_name("cmds.dat", 7) == "00007.bin"
    assert layer_prefix("00100.bin") == ""


def test_numbered_file():
    assert numbered_file("tmp/", 89, ".svg") == "tmp/00089.svg"


def test_assembly_svg_name():
    assert assembly_svg_name("x/00100.bin") == "x/00100.svg"
    with pytest.raises(NamingError):
        assembly_svg_name("abc")


def test_padded_string_and_escape():
    assert unpack_padded_string([0x4C, 0x3100, 0x31]) == "L\x001"
    assert escape_string("L\x001") == "L\\x001"
    assert escape_string('say "hi"') == "say \\x22hi\\x22"

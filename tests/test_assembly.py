from __future__ import annotations

import io
from pathlib import Path

import pytest

from ubvff.assembly import MAX_DUMP_LIST, LayerAssembler, assemble_layers, read_fragment_viewbox
from ubvff.entities import LayerRef
from ubvff.errors import AssemblyRejected, FormatValidationError
from ubvff.logging import CommandLogger
from ubvff.svg import placeholder_open_tag, svg_open_tag
from tests.helpers.streams import assembly_group, assembly_leaf, be32


def fragment(viewbox: str, marker: str) -> bytes:
    return (svg_open_tag(viewbox) + f'<path id="{marker}" />\n' + "</svg>\n").encode("ascii")


def quiet(stream=None) -> CommandLogger:
    return CommandLogger(stream=stream or io.StringIO())


@pytest.fixture()
def layered(tmp_path: Path) -> Path:
    (tmp_path / "00089.bin").write_bytes(assembly_leaf(1, 3))
    (tmp_path / "00093.bin").write_bytes(assembly_leaf(2, 1))
    (tmp_path / "00097.bin").write_bytes(assembly_leaf(3, 2))
    (tmp_path / "00100.bin").write_bytes(assembly_group([89, 93, 97]))
    (tmp_path / "00001.svg").write_bytes(fragment("0 0 5 6", "f1"))
    (tmp_path / "00002.svg").write_bytes(fragment("-2 0 3 3", "f2"))
    (tmp_path / "00003.svg").write_bytes(fragment("0 -1 9 7", "f3"))
    return tmp_path


def test_three_layers_are_sorted_and_wrapped(layered: Path):
    out = layered / "00100.svg"
    result = assemble_layers(layered / "00100.bin", out, logger=quiet())
    assert result.written
    assert result.refs == [LayerRef(2, 1), LayerRef(3, 2), LayerRef(1, 3)]
    assert result.bounds == (-2, -1, 9, 7)
    expected = (
        placeholder_open_tag().replace('"VIEWBOX_PLACEHOLDER_1234"', '"-2 -1 9 7"'.ljust(26))
        + '<g>\n<path id="f2" />\n</g>\n'
        + '<g>\n<path id="f3" />\n</g>\n'
        + '<g>\n<path id="f1" />\n</g>\n'
        + "</svg>\n"
    )
    assert out.read_text(encoding="ascii") == expected


def test_progress_listing_is_indented(layered: Path):
    stream = io.StringIO()
    assemble_layers(layered / "00100.bin", layered / "out.svg", logger=quiet(stream))
    lines = stream.getvalue().splitlines()
    assert lines[0] == f"include {layered}/00089.bin"
    assert lines[1] == "    load layer 3 from 00001.svg"
    assert lines[-2] == "end file"


def test_leaf_at_top_level_is_shallow(layered: Path):
    stream = io.StringIO()
    out = layered / "shallow.svg"
    result = assemble_layers(layered / "00089.bin", out, logger=quiet(stream))
    assert result.shallow
    assert not result.written
    assert not out.exists()
    assert "skip.shallow" in stream.getvalue()


@pytest.mark.parametrize(
    "header, reason",
    [
        (be32(2, 0, 0, 0, 0, 0), "type"),
        (be32(100, 0, 0, 0, 0, 0), "type"),
        (be32(3, 0, 0, 0, 0, 0), "three"),
        (be32(5, 0x48, 0, 0, 0, 0), "0x48"),
        (be32(5, 1, 0, 0, 0, 0), "not_group"),
        (be32(5, 0, 7, 0, 0, 0), "not_group"),
        (be32(1, 7, 0), "weird_header"),
    ],
)
def test_rejected_headers(tmp_path: Path, header: bytes, reason: str):
    source = tmp_path / "00100.bin"
    source.write_bytes(header)
    out = tmp_path / "00100.svg"
    with pytest.raises(AssemblyRejected) as excinfo:
        assemble_layers(source, out, logger=quiet())
    assert excinfo.value.reason == reason
    assert not out.exists()


def test_rejection_inside_include_stops_assembly(layered: Path):
    (layered / "00093.bin").write_bytes(be32(5, 0x48, 0, 0, 0, 0))
    with pytest.raises(AssemblyRejected):
        assemble_layers(layered / "00100.bin", layered / "out.svg", logger=quiet())
    assert not (layered / "out.svg").exists()


def test_nested_three_is_allowed(layered: Path):
    (layered / "00050.bin").write_bytes(assembly_group([89], kind=3))
    (layered / "00051.bin").write_bytes(assembly_group([50, 93]))
    result = assemble_layers(layered / "00051.bin", layered / "out.svg", logger=quiet())
    assert result.refs == [LayerRef(2, 1), LayerRef(1, 3)]


def test_depth_limit_stops_recursion(tmp_path: Path):
    (tmp_path / "00100.bin").write_bytes(assembly_group([100]))
    result = assemble_layers(tmp_path / "00100.bin", tmp_path / "loop.svg", logger=quiet())
    assert result.warnings == ["MAX DEPTH reached, not going deeper"]
    assert result.refs == []
    assert result.bounds == (0, 0, 1, 1)


def test_missing_fragment_is_skipped(layered: Path):
    (layered / "00002.svg").unlink()
    out = layered / "out.svg"
    result = assemble_layers(layered / "00100.bin", out, logger=quiet())
    assert result.written
    assert result.warnings == [f"unable to open input file '{layered}/00002.svg'"]
    text = out.read_text(encoding="ascii")
    assert text.count("<g>") == 2
    assert "f2" not in text


def test_dump_list_overload():
    assembler = LayerAssembler("00100.bin", logger=quiet())
    for number in range(MAX_DUMP_LIST - 1):
        assembler.add_ref(LayerRef(number, number))
    with pytest.raises(FormatValidationError):
        assembler.add_ref(LayerRef(0, 0))


def test_read_fragment_viewbox():
    assert read_fragment_viewbox(fragment("-3 4 50 60", "x")) == (-3, 4, 50, 60)
    padded = placeholder_open_tag().replace("VIEWBOX_PLACEHOLDER_1234", "1 2 3 4  ")
    assert read_fragment_viewbox(padded.encode("ascii")) == (1, 2, 3, 4)
    with pytest.raises(FormatValidationError):
        read_fragment_viewbox(placeholder_open_tag().encode("ascii"))

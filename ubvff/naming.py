"""
Pure string helpers: output-name derivation, the ``NNNNN.bin`` sibling
naming used by Type 2 and the assembler, and the padded layer-title text.
"""

from __future__ import annotations

from typing import Sequence

from .errors import NameTooLongError, NamingError

MAX_NAME_LENGTH = 300
AUTO = "auto"


def _check_length(name: str, what: str) -> str:
    if len(name) + 1 > MAX_NAME_LENGTH:
        raise NameTooLongError(f"{what} name is too long")
    return name


def auto_svg_name(source: str) -> str:
    """``foo/bar.BIN`` -> ``foo/bar.svg``.

    Only an extension within the last five characters is dropped, and a path
    separator after the dot cancels it.
    """

    _check_length(source, "input file")
    stem = source
    if len(stem) > 5:
        dot = -1
        for idx in range(len(stem) - 5, len(stem)):
            if stem[idx] in "/\\":
                dot = -1
            elif stem[idx] == ".":
                dot = idx
        if dot != -1:
            stem = stem[:dot]
    return _check_length(stem + ".svg", "auto output")


def numbered_prefix(name: str) -> str | None:
    """Return everything before a trailing ``NNNNN.bin``, or None."""

    if len(name) > 9 and name.endswith(".bin") and name[-9:-4].isdigit():
        return name[:-9]
    return None


def layer_prefix(name: str) -> str:
    prefix = numbered_prefix(name)
    return "" if prefix is None else prefix


def points_file_name(command_name: str, points_file_number: int) -> str:
    return _check_length(f"{layer_prefix(command_name)}{points_file_number:05d}.bin", "points file")


def numbered_file(prefix: str, number: int, suffix: str) -> str:
    return f"{prefix}{number:05d}{suffix}"


def assembly_svg_name(source: str) -> str:
    if len(source) > 5 and source.endswith(".bin"):
        return _check_length(source[:-4] + ".svg", "output file")
    raise NamingError(f"unable to create auto name for output file from {source!r}")


def unpack_padded_string(words: Sequence[int]) -> str:
    # One character per 32-bit slot; only the low byte carries data.
    return "".join(chr(word & 0xFF) for word in words)


def escape_string(text: str) -> str:
    """Make a decoded title safe for a one-line listing."""

    out = []
    for ch in text:
        code = ord(ch)
        if code < 32 or code > 126 or ch in "\\'\"":
            out.append(f"\\x{code:02X}")
        else:
            out.append(ch)
    return "".join(out)

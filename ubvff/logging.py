from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List, Sequence, TextIO

from .entities import Point
from .geometry import format_coord

DETAIL_SUMMARY = 1
DETAIL_COMMANDS = 2
DETAIL_ALL = 3

_CONTINUATION = "\n" + " " * 24


@dataclass
class CommandLogger:
    """Console listing of decoded commands, filtered by ``detail``.

    1 prints only the summary lines, 2 adds one line per command and 3 adds
    every point.  Nothing here influences the decode itself.
    """

    detail: int = DETAIL_COMMANDS
    stream: TextIO | None = None

    def __post_init__(self) -> None:
        if self.stream is None:
            self.stream = sys.stdout

    def _write(self, text: str) -> None:
        print(text, file=self.stream)

    def command(self, name: str, text: str = "", *, known: bool = True) -> None:
        if known and self.detail < DETAIL_COMMANDS:
            return
        self._write(f"{name:<24}{text}".rstrip())

    def points(self, points: Sequence[Point], scale: int, *, per_line: int = 3) -> str:
        """Format ``points`` for a command line, eliding the tail below detail 3."""

        chunks: List[str] = []
        for idx, point in enumerate(points):
            if idx >= per_line and self.detail <= DETAIL_COMMANDS:
                chunks.append("...")
                break
            if idx > 0 and idx % per_line == 0:
                chunks.append(_CONTINUATION)
            chunks.append(format_coord(point.x, scale) + format_coord(point.y, scale))
        return "".join(chunks)

    def say(self, message: str) -> None:
        self._write(message)

    def progress(self, message: str) -> None:
        self._write(f"[+] {message}")

    def info(self, message: str) -> None:
        self._write(f"[i] {message}")

    def warning(self, message: str) -> None:
        self._write(f"[!] warning : {message}")

    def error(self, message: str) -> None:
        self._write(f"[!] error : {message}")

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .entities import PathEntity
from .paths import PathRecorder
from .svg import EmitterState, SvgEmitter


@dataclass
class DecodeResult:
    variant: str
    scale: int
    header: object = None
    layers: List[str] = field(default_factory=list)
    paths: List[PathEntity] = field(default_factory=list)
    commands: int = 0
    declared_commands: int | None = None
    viewbox: Tuple[int, int, int, int] = (0, 0, 0, 0)
    warnings: List[str] = field(default_factory=list)
    reached_end: bool = False
    final_state: EmitterState | None = None

    @property
    def count_matches(self) -> bool:
        return self.declared_commands is None or self.commands == self.declared_commands

    @property
    def ok(self) -> bool:
        if self.final_state is not None and self.final_state != EmitterState.AFTER_FOOTER:
            return False
        return self.count_matches


class Drawing:
    """Fan drawing events out to the optional SVG emitter and the path recorder.

    The emitter runs first so a state violation stops the event before the
    recorder sees it.
    """

    def __init__(self, emitter: SvgEmitter | None) -> None:
        self.emitter = emitter
        self.recorder = PathRecorder()

    def __call__(self, operation: str, *args) -> None:
        if self.emitter is not None:
            getattr(self.emitter, operation)(*args)
        getattr(self.recorder, operation)(*args)

    @property
    def state(self) -> EmitterState | None:
        return None if self.emitter is None else self.emitter.state

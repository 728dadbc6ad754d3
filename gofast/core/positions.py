"""Editor positions and ranges (1-based lines and columns)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    line: int
    character: int


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    @classmethod
    def on_line(cls, line: int, start_character: int, end_character: int) -> "Range":
        return cls(Position(line, start_character), Position(line, end_character))

    def is_empty(self) -> bool:
        return self.start == self.end

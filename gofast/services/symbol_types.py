"""Value types shared by the symbol index, resolver and navigation controllers."""

from __future__ import annotations

from dataclasses import dataclass

from gofast.core.positions import Position, Range


@dataclass(frozen=True)
class SymbolEntry:
    """One known declaration site. Lines and characters are 1-based."""

    name: str
    path: str
    line: int
    character: int
    kind: str = ""

    @classmethod
    def from_payload(cls, payload: dict) -> "SymbolEntry":
        return cls(
            name=str(payload.get("name") or ""),
            path=str(payload.get("path") or ""),
            line=max(1, int(payload.get("line") or 1)),
            character=max(1, int(payload.get("character") or 1)),
            kind=str(payload.get("kind") or ""),
        )


@dataclass(frozen=True)
class NavigationTarget:
    path: str
    line: int
    character: int
    length: int = 0

    @property
    def end_character(self) -> int:
        return self.character + max(0, self.length)

    @property
    def position(self) -> Position:
        return Position(self.line, self.character)

    def to_range(self) -> Range:
        return Range.on_line(self.line, self.character, self.end_character)

    @classmethod
    def from_entry(cls, entry: SymbolEntry, *, length: int) -> "NavigationTarget":
        return cls(path=entry.path, line=entry.line, character=entry.character, length=length)

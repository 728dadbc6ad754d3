"""Editor host contracts (pure Python).

These contracts keep the navigation controllers independent of the widget
that actually displays documents. The Qt implementation lives in
``gofast.ui.editor_surface``; tests use an in-memory fake.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Protocol

from gofast.core.positions import Position, Range

NavigationKind = Literal["symbol", "path"]


@dataclass(frozen=True)
class NavigationRequest:
    """A user gesture asking to go somewhere (go-to-definition, link click)."""

    kind: NavigationKind
    origin_path: str
    text: str
    position: Position | None = None


NavigationHandler = Callable[[NavigationRequest], bool]


class EditorHost(Protocol):
    def active_document_path(self) -> str:
        ...

    def open_document(self, path: str) -> None:
        """Start switching to ``path``; completion is announced separately."""
        ...

    def reveal_range(self, text_range: Range) -> None:
        ...

    def set_caret(self, position: Position, selection: Range | None = None) -> None:
        ...

    def focus(self) -> None:
        ...

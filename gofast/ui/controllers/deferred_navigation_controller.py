"""Qt-aware controller that lands the caret once the right document is active."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from PySide6.QtCore import QObject, Signal

from gofast.core.positions import Range
from gofast.services.editor_host import EditorHost
from gofast.services.path_normalizer import same_location
from gofast.services.symbol_types import NavigationTarget

logger = logging.getLogger(__name__)


class NavigationState(str, enum.Enum):
    IDLE = "idle"
    AWAITING_SWITCH = "awaiting-switch"


@dataclass(frozen=True)
class PendingJump:
    path: str
    selection: Range
    target: NavigationTarget


class DeferredNavigationController(QObject):
    jumpApplied = Signal(object)
    stateChanged = Signal(str)

    def __init__(self, host: EditorHost, parent=None):
        super().__init__(parent)
        self.host = host
        self._pending: PendingJump | None = None

    @property
    def state(self) -> NavigationState:
        return NavigationState.IDLE if self._pending is None else NavigationState.AWAITING_SWITCH

    @property
    def pending_jump(self) -> PendingJump | None:
        return self._pending

    def request_jump(self, target: NavigationTarget) -> None:
        if same_location(target.path, self.host.active_document_path()):
            if self._pending is not None:
                logger.debug("Dropping pending jump to %s", self._pending.path)
                self._set_pending(None)
            self._apply(target)
            return

        superseded = self._pending
        if superseded is not None:
            logger.debug("Pending jump to %s superseded by %s", superseded.path, target.path)
        self._set_pending(PendingJump(path=target.path, selection=target.to_range(), target=target))
        self.host.open_document(target.path)

    def on_active_document_changed(self, new_path: str) -> None:
        pending = self._pending
        if pending is None:
            return
        if not same_location(new_path, pending.path):
            logger.debug("Active document %s does not match pending %s", new_path, pending.path)
            return
        self._set_pending(None)
        self._apply(pending.target)

    def cancel(self) -> None:
        self._set_pending(None)

    def _set_pending(self, pending: PendingJump | None) -> None:
        before = self.state
        self._pending = pending
        after = self.state
        if before is not after:
            self.stateChanged.emit(after.value)

    def _apply(self, target: NavigationTarget) -> None:
        selection = target.to_range()
        self.host.reveal_range(selection)
        self.host.set_caret(target.position, selection)
        self.host.focus()
        logger.debug("Jumped to %s:%d:%d", target.path, target.line, target.character)
        self.jumpApplied.emit(target)

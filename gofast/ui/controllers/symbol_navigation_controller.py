"""Controller for go-to-definition and path-link navigation requests."""

from __future__ import annotations

import logging
import os

from PySide6.QtCore import QObject, Signal

from gofast.core.positions import Position
from gofast.services.background_tasks import BackgroundTaskRunner
from gofast.services.editor_host import NavigationRequest
from gofast.services.reference_resolver import ReferenceResolver
from gofast.services.symbol_types import NavigationTarget
from gofast.services.workspace_backend import WorkspaceBackend
from gofast.ui.controllers.deferred_navigation_controller import DeferredNavigationController

logger = logging.getLogger(__name__)


class SymbolNavigationController(QObject):
    statusMessage = Signal(str)

    def __init__(
        self,
        resolver: ReferenceResolver,
        jumps: DeferredNavigationController,
        backend: WorkspaceBackend,
        tasks: BackgroundTaskRunner,
        parent=None,
    ):
        super().__init__(parent)
        self.resolver = resolver
        self.jumps = jumps
        self._backend = backend
        self._tasks = tasks
        self._next_token = 0
        self._latest_token = 0

    def _issue_token(self) -> int:
        self._next_token += 1
        self._latest_token = self._next_token
        return self._next_token

    def handle_navigation_request(self, request: NavigationRequest) -> bool:
        if request.kind == "symbol":
            self.navigate_to_symbol(request.text, request.origin_path, request.position)
            return True
        if request.kind == "path":
            self.follow_path_reference(request.origin_path, request.text)
            return True
        return False

    def navigate_to_symbol(self, symbol_name: str, origin_path: str, origin_position: Position | None = None) -> None:
        name = str(symbol_name or "").strip()
        if not name:
            self.statusMessage.emit("No symbol under cursor.")
            return
        token = self._issue_token()

        def _resolved(target: NavigationTarget | None) -> None:
            self._on_symbol_resolved(token, name, target)

        self.resolver.resolve(name, origin_path, origin_position, _resolved)

    def _on_symbol_resolved(self, token: int, name: str, target: NavigationTarget | None) -> None:
        if token != self._latest_token:
            logger.debug("Ignoring stale resolution for %r (token %d)", name, token)
            return
        if target is None:
            self.statusMessage.emit(f"No definition found for '{name}'.")
            return
        self.jumps.request_jump(target)

    def follow_path_reference(self, origin_path: str, reference: str) -> None:
        base = str(origin_path or "")
        ref = str(reference or "").strip()
        if not base or not ref:
            self.statusMessage.emit("Navigation target has no file path.")
            return
        token = self._issue_token()

        def _run() -> str:
            return self._backend.resolve_file(base, ref)

        def _done(result: object, error: Exception | None) -> None:
            self._on_path_resolved(token, ref, result, error)

        self._tasks.submit("resolve", _run, _done)

    def _on_path_resolved(self, token: int, reference: str, result: object, error: Exception | None) -> None:
        if token != self._latest_token:
            logger.debug("Ignoring stale path resolution for %r (token %d)", reference, token)
            return
        resolved = str(result or "") if error is None else ""
        if not resolved:
            logger.warning("Failed to resolve path %r: %s", reference, error)
            self.statusMessage.emit(f"Target not found: {reference}")
            return
        self.statusMessage.emit(f"Opening {os.path.basename(resolved) or resolved}")
        self.jumps.request_jump(NavigationTarget(path=resolved, line=1, character=1, length=0))

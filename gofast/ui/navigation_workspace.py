"""Builds and wires the navigation subsystem for one project."""

from __future__ import annotations

import concurrent.futures
import logging

from PySide6.QtCore import QObject, Signal

from gofast.services.background_tasks import BackgroundTaskRunner
from gofast.services.document_model_cache import DocumentModelCache
from gofast.services.editor_host import EditorHost
from gofast.services.reference_resolver import ReferenceResolver
from gofast.services.symbol_index_service import SymbolIndexService
from gofast.services.workspace_backend import HttpWorkspaceBackend, LocalWorkspaceBackend, WorkspaceBackend
from gofast.settings_store import JsonSettingsStore
from gofast.ui.controllers.deferred_navigation_controller import DeferredNavigationController
from gofast.ui.controllers.symbol_navigation_controller import SymbolNavigationController

logger = logging.getLogger(__name__)


def backend_from_settings(project_root: str, settings: JsonSettingsStore) -> WorkspaceBackend:
    kind = str(settings.get("backend.kind", "local") or "local").strip().lower()
    if kind == "http":
        return HttpWorkspaceBackend(
            str(settings.get("backend.base_url") or "http://localhost:8080"),
            timeout_s=float(settings.get("backend.timeout_s", 10.0) or 10.0),
        )
    if kind != "local":
        logger.warning("Unknown backend kind %r, using local file system", kind)
    return LocalWorkspaceBackend(
        project_root,
        skip_dirs=settings.get("symbols.skip_dirs") or (),
        symbol_extensions=settings.get("symbols.extensions") or (),
        resolve_suffixes=settings.get("files.resolve_suffixes") or ("",),
    )


class NavigationWorkspace(QObject):
    """Owns the index, document cache, resolver and both controllers.

    The editor host is attached after construction because the Qt surface
    itself needs the document cache to mount documents.
    """

    statusMessage = Signal(str)

    def __init__(
        self,
        backend: WorkspaceBackend,
        settings: JsonSettingsStore,
        *,
        executor: concurrent.futures.Executor | None = None,
        parent=None,
    ):
        super().__init__(parent)
        self.settings = settings
        self.backend = backend
        self.tasks = BackgroundTaskRunner(
            executor=executor,
            max_workers=int(settings.get("navigation.max_workers", 2) or 2),
            pump_interval_ms=int(settings.get("navigation.result_pump_interval_ms", 40) or 40),
            parent=self,
        )
        self.symbol_index = SymbolIndexService(
            backend,
            self.tasks,
            refresh_interval_ms=int(settings.get("symbols.refresh_interval_ms", 10_000) or 10_000),
            parent=self,
        )
        self.documents = DocumentModelCache(backend, self.tasks, parent=self)
        self.resolver = ReferenceResolver(self.symbol_index, self.documents)
        self.jumps: DeferredNavigationController | None = None
        self.navigation: SymbolNavigationController | None = None

        self.symbol_index.indexUnavailable.connect(self._on_index_unavailable)

    def attach_host(self, host: EditorHost) -> SymbolNavigationController:
        self.jumps = DeferredNavigationController(host, parent=self)
        self.navigation = SymbolNavigationController(
            self.resolver,
            self.jumps,
            self.backend,
            self.tasks,
            parent=self,
        )
        self.navigation.statusMessage.connect(self.statusMessage)

        changed = getattr(host, "activeDocumentChanged", None)
        if changed is not None:
            changed.connect(self.jumps.on_active_document_changed)
        register = getattr(host, "on_navigation_requested", None)
        if callable(register):
            register(self.navigation.handle_navigation_request)
        return self.navigation

    def start(self) -> None:
        self.symbol_index.start()

    def shutdown(self) -> None:
        if self.jumps is not None:
            self.jumps.cancel()
        self.symbol_index.stop()
        self.tasks.shutdown()

    def _on_index_unavailable(self, message: str) -> None:
        self.statusMessage.emit(f"Symbol index unavailable: {message}")

"""Project symbol index service."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QTimer, Signal

from gofast.services.background_tasks import BackgroundTaskRunner
from gofast.services.errors import IndexUnavailable
from gofast.services.symbol_types import SymbolEntry
from gofast.services.workspace_backend import WorkspaceBackend

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL_MS = 10_000


class SymbolIndexService(QObject):
    """Snapshot of every declaration site the backend knows about.

    Each successful refresh swaps in a new tuple; a failed one keeps the old
    tuple. Refreshes never overlap: a refresh requested while one is in
    flight is re-issued after it completes.
    """

    indexRefreshed = Signal(int)
    indexUnavailable = Signal(str)

    def __init__(
        self,
        backend: WorkspaceBackend,
        tasks: BackgroundTaskRunner,
        *,
        refresh_interval_ms: int = DEFAULT_REFRESH_INTERVAL_MS,
        parent=None,
    ):
        super().__init__(parent)
        self._backend = backend
        self._tasks = tasks
        self._entries: tuple[SymbolEntry, ...] = ()
        self._refresh_inflight = False
        self._refresh_requested = False
        self._generation = 0

        self._refresh_timer = QTimer(self)
        self._refresh_timer.setInterval(max(1, int(refresh_interval_ms)))
        self._refresh_timer.timeout.connect(self.refresh)

    @property
    def refresh_timer(self) -> QTimer:
        return self._refresh_timer

    @property
    def generation(self) -> int:
        return self._generation

    def is_refreshing(self) -> bool:
        return self._refresh_inflight

    def start(self) -> None:
        self.refresh()
        self._refresh_timer.start()

    def stop(self) -> None:
        self._refresh_timer.stop()

    def refresh(self) -> None:
        if self._refresh_inflight:
            self._refresh_requested = True
            return
        self._refresh_inflight = True
        self._tasks.submit("symbols", self._backend.list_symbols, self._on_refresh_done)

    def _on_refresh_done(self, result: object, error: Exception | None) -> None:
        self._refresh_inflight = False
        if error is None and isinstance(result, (list, tuple)):
            self.refresh_completed(result)
        else:
            self.refresh_failed(error or IndexUnavailable("Backend returned no symbol list."))
        if self._refresh_requested:
            self._refresh_requested = False
            self.refresh()

    def refresh_completed(self, entries) -> None:
        snapshot = tuple(item for item in entries if isinstance(item, SymbolEntry))
        self._entries = snapshot
        self._generation += 1
        logger.info("Symbol index refreshed: %d entries", len(snapshot))
        self.indexRefreshed.emit(len(snapshot))

    def refresh_failed(self, error: Exception) -> None:
        if not isinstance(error, IndexUnavailable):
            error = IndexUnavailable(f"Symbol refresh failed: {error}")
        logger.warning("%s (keeping %d previous entries)", error, len(self._entries))
        self.indexUnavailable.emit(str(error))

    def lookup(self, name: str) -> tuple[SymbolEntry, ...]:
        target = str(name or "")
        if not target:
            return ()
        entries = self._entries
        return tuple(entry for entry in entries if entry.name == target)

    def snapshot(self) -> tuple[SymbolEntry, ...]:
        return self._entries

    def entry_count(self) -> int:
        return len(self._entries)

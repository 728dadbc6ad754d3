"""Memoized in-memory documents keyed by normalized path."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from PySide6.QtCore import QObject, Signal

from gofast.services.background_tasks import BackgroundTaskRunner
from gofast.services.errors import ContentUnavailable
from gofast.services.path_normalizer import normalize
from gofast.services.workspace_backend import WorkspaceBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentModel:
    path: str
    content: str

    @property
    def key(self) -> str:
        return normalize(self.path)


EnsureCallback = Callable[["DocumentModel | None", "ContentUnavailable | None"], None]


class DocumentModelCache(QObject):
    """Creates at most one ``DocumentModel`` per normalized path.

    Content is fetched by the caller's original path; only the registry key is
    normalized. Concurrent ``ensure`` calls for the same unseen path may both
    fetch, but whichever completes second finds the first registration and
    discards its own content.
    """

    modelCreated = Signal(str)

    def __init__(self, backend: WorkspaceBackend, tasks: BackgroundTaskRunner, parent=None):
        super().__init__(parent)
        self._backend = backend
        self._tasks = tasks
        self._models: dict[str, DocumentModel] = {}

    def get(self, path: str) -> DocumentModel | None:
        return self._models.get(normalize(path))

    def contains(self, path: str) -> bool:
        return normalize(path) in self._models

    def models(self) -> list[DocumentModel]:
        return list(self._models.values())

    def ensure(self, path: str, callback: EnsureCallback) -> None:
        original = str(path or "")
        existing = self.get(original)
        if existing is not None:
            logger.debug("Document cache hit: %s", original)
            callback(existing, None)
            return

        def _read() -> str:
            return self._backend.read_file(original)

        def _done(result: object, error: Exception | None) -> None:
            self._on_read_done(original, result, error, callback)

        self._tasks.submit("read", _read, _done)

    def _on_read_done(
        self,
        path: str,
        result: object,
        error: Exception | None,
        callback: EnsureCallback,
    ) -> None:
        if error is not None or not isinstance(result, str):
            failure = ContentUnavailable(f"Could not load {path}: {error or 'no content'}", path=path)
            logger.warning("%s", failure)
            callback(None, failure)
            return

        model = DocumentModel(path=path, content=result)
        existing = self._models.get(model.key)
        if existing is not None:
            logger.debug("Discarding duplicate fetch for %s", path)
            callback(existing, None)
            return

        self._models[model.key] = model
        logger.debug("Created document model for %s (%d chars)", path, len(result))
        self.modelCreated.emit(path)
        callback(model, None)

"""Pick the declaration site a symbol reference should jump to."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from gofast.core.positions import Position
from gofast.services.document_model_cache import DocumentModel, DocumentModelCache
from gofast.services.errors import ContentUnavailable
from gofast.services.path_normalizer import normalize, normalized_dir, same_location
from gofast.services.symbol_index_service import SymbolIndexService
from gofast.services.symbol_types import NavigationTarget, SymbolEntry

logger = logging.getLogger(__name__)

ResolveCallback = Callable[["NavigationTarget | None"], None]


def select_candidate(candidates: Sequence[SymbolEntry], origin_path: str) -> SymbolEntry | None:
    """Return the best candidate for a reference made from ``origin_path``.

    Tiers, first match wins and ties keep index order:
    the origin file itself, then any path starting with the origin's
    directory, then the first candidate.
    """
    if not candidates:
        return None

    origin_key = normalize(origin_path)
    for entry in candidates:
        if normalize(entry.path) == origin_key:
            return entry

    # Plain string prefix: "a" also matches "ab/...". Kept as the editor has always behaved.
    origin_dir = normalized_dir(origin_path)
    for entry in candidates:
        if normalize(entry.path).startswith(origin_dir):
            return entry

    return candidates[0]


class ReferenceResolver:
    def __init__(self, index: SymbolIndexService, documents: DocumentModelCache) -> None:
        self._index = index
        self._documents = documents

    def target_for(self, symbol_name: str, origin_path: str) -> NavigationTarget | None:
        name = str(symbol_name or "")
        entry = select_candidate(self._index.lookup(name), origin_path)
        if entry is None:
            return None
        return NavigationTarget.from_entry(entry, length=len(name))

    def resolve(
        self,
        symbol_name: str,
        origin_path: str,
        origin_position: Position | None,
        callback: ResolveCallback,
    ) -> None:
        target = self.target_for(symbol_name, origin_path)
        if target is None:
            logger.debug("No index entry for %r", symbol_name)
            callback(None)
            return

        if same_location(target.path, origin_path):
            callback(target)
            return

        def _ensured(model: DocumentModel | None, error: ContentUnavailable | None) -> None:
            if model is None:
                logger.warning("Navigation to %r abandoned: %s", symbol_name, error)
                callback(None)
                return
            callback(target)

        self._documents.ensure(target.path, _ensured)

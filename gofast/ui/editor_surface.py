"""Qt editor host: one QPlainTextEdit showing one document per normalized path."""

from __future__ import annotations

import logging
import re

from PySide6.QtCore import QEvent, QObject, Qt, Signal
from PySide6.QtGui import QKeySequence, QShortcut, QTextCursor, QTextDocument
from PySide6.QtWidgets import QPlainTextDocumentLayout, QPlainTextEdit, QTextEdit

from gofast.core.positions import Position, Range
from gofast.services.document_model_cache import DocumentModel, DocumentModelCache
from gofast.services.editor_host import NavigationHandler, NavigationRequest
from gofast.services.errors import ContentUnavailable
from gofast.services.path_links import PathLink, find_path_links, path_reference_at
from gofast.services.path_normalizer import normalize

logger = logging.getLogger(__name__)

_IDENTIFIER_CHAR_RE = re.compile(r"[A-Za-z0-9_]")


class EditorSurface(QObject):
    activeDocumentChanged = Signal(str)
    statusMessage = Signal(str)

    def __init__(self, editor: QPlainTextEdit, documents: DocumentModelCache, parent=None):
        super().__init__(parent)
        self.editor = editor
        self._documents_cache = documents
        self._text_documents: dict[str, QTextDocument] = {}
        self._active_path = ""
        self._requested_key = ""
        self._path_links: list[PathLink] = []
        self._navigation_handlers: list[NavigationHandler] = []

        self._definition_shortcut = QShortcut(QKeySequence("F12"), editor)
        self._definition_shortcut.activated.connect(self._request_definition_at_cursor)
        editor.textChanged.connect(self._refresh_path_links)
        editor.viewport().installEventFilter(self)

    def active_document_path(self) -> str:
        return self._active_path

    def on_navigation_requested(self, handler: NavigationHandler) -> None:
        if handler not in self._navigation_handlers:
            self._navigation_handlers.append(handler)

    def request_navigation(self, request: NavigationRequest) -> bool:
        for handler in list(self._navigation_handlers):
            if handler(request):
                return True
        return False

    def open_document(self, path: str) -> None:
        target = str(path or "")
        if not target:
            return

        self._requested_key = normalize(target)

        def _ready(model: DocumentModel | None, error: ContentUnavailable | None) -> None:
            if normalize(target) != self._requested_key:
                logger.debug("Dropping superseded open of %s", target)
                return
            if model is None:
                self.statusMessage.emit(f"Error loading {target}: {error}")
                return
            self._mount(target, model)

        self._documents_cache.ensure(target, _ready)

    def _mount(self, path: str, model: DocumentModel) -> None:
        key = normalize(path)
        doc = self._text_documents.get(key)
        if doc is None:
            doc = QTextDocument(self)
            doc.setDocumentLayout(QPlainTextDocumentLayout(doc))
            doc.setPlainText(model.content)
            self._text_documents[key] = doc
        if self.editor.document() is not doc:
            self.editor.setDocument(doc)
        self._active_path = path
        self._refresh_path_links()
        self.statusMessage.emit(f"Loaded: {path} ({len(model.content)} chars)")
        self.activeDocumentChanged.emit(path)

    def path_links(self) -> list[PathLink]:
        return list(self._path_links)

    def _refresh_path_links(self) -> None:
        links: list[PathLink] = []
        selections: list[QTextEdit.ExtraSelection] = []
        doc = self.editor.document()
        block = doc.firstBlock()
        while block.isValid():
            for link in find_path_links(block.text(), line=block.blockNumber() + 1):
                sel = QTextEdit.ExtraSelection()
                cur = QTextCursor(doc)
                cur.setPosition(block.position() + link.start_column - 1)
                cur.setPosition(block.position() + link.end_column - 1, QTextCursor.MoveMode.KeepAnchor)
                sel.cursor = cur
                sel.format.setFontUnderline(True)
                selections.append(sel)
                links.append(link)
            block = block.next()
        self._path_links = links
        self.editor.setExtraSelections(selections)

    def reveal_range(self, text_range: Range) -> None:
        self.editor.setTextCursor(self._cursor_for(text_range.start))
        self.editor.centerCursor()

    def set_caret(self, position: Position, selection: Range | None = None) -> None:
        cursor = self._cursor_for(position)
        if selection is not None and not selection.is_empty():
            cursor = self._cursor_for(selection.start)
            end = self._cursor_for(selection.end)
            cursor.setPosition(end.position(), QTextCursor.MoveMode.KeepAnchor)
        self.editor.setTextCursor(cursor)

    def focus(self) -> None:
        self.editor.setFocus(Qt.FocusReason.OtherFocusReason)

    def _cursor_for(self, position: Position) -> QTextCursor:
        doc = self.editor.document()
        line_num = max(1, int(position.line or 1))
        col_num = max(1, int(position.character or 1))
        block = doc.findBlockByNumber(line_num - 1)
        if not block.isValid():
            block = doc.lastBlock()
        cursor = QTextCursor(block)
        steps = min(col_num - 1, max(0, block.length() - 1))
        cursor.movePosition(QTextCursor.MoveOperation.Right, QTextCursor.MoveMode.MoveAnchor, steps)
        return cursor

    def eventFilter(self, watched, event) -> bool:
        editor = getattr(self, "editor", None)
        if (
            editor is not None
            and watched is editor.viewport()
            and event.type() == QEvent.Type.MouseButtonPress
            and event.button() == Qt.MouseButton.LeftButton
            and bool(event.modifiers() & Qt.KeyboardModifier.ControlModifier)
        ):
            cursor = editor.cursorForPosition(event.position().toPoint())
            if self._request_navigation_at(cursor):
                return True
        return super().eventFilter(watched, event)

    def _request_definition_at_cursor(self) -> None:
        if not self._request_navigation_at(self.editor.textCursor()):
            self.statusMessage.emit("No symbol under cursor.")

    def _request_navigation_at(self, cursor: QTextCursor) -> bool:
        if not self._active_path:
            return False
        line_text = cursor.block().text()
        column = cursor.positionInBlock() + 1
        position = Position(cursor.blockNumber() + 1, column)

        reference = path_reference_at(line_text, column)
        if reference:
            return self.request_navigation(
                NavigationRequest(kind="path", origin_path=self._active_path, text=reference, position=position)
            )

        word = _word_at(line_text, column - 1)
        if not word:
            return False
        return self.request_navigation(
            NavigationRequest(kind="symbol", origin_path=self._active_path, text=word, position=position)
        )


def _word_at(line_text: str, index: int) -> str:
    if not line_text:
        return ""
    idx = max(0, min(len(line_text), int(index)))
    start = idx
    while start > 0 and _IDENTIFIER_CHAR_RE.match(line_text[start - 1]):
        start -= 1
    end = idx
    while end < len(line_text) and _IDENTIFIER_CHAR_RE.match(line_text[end]):
        end += 1
    return line_text[start:end]

from PySide6.QtCore import QEvent, QObject
from PySide6.QtGui import QTextCursor
from PySide6.QtWidgets import QPlainTextEdit

from gofast.core.positions import Position, Range
from gofast.services.document_model_cache import DocumentModelCache
from gofast.services.editor_host import NavigationRequest
from gofast.services.symbol_types import NavigationTarget
from gofast.ui.controllers.deferred_navigation_controller import DeferredNavigationController
from gofast.ui.editor_surface import EditorSurface, _word_at

MAIN_GO = 'package main\n\nimport "./cfg/x"\n\nfunc main() {\n\tHelper()\n}\n'
UTIL_GO = "package pkg\n\nfunc Helper() {}\n"
CFG_GO = "package cfg\n\nvar X = 1\n"


def _surface(backend, tasks):
    documents = DocumentModelCache(backend, tasks)
    editor = QPlainTextEdit()
    surface = EditorSurface(editor, documents)
    messages: list[str] = []
    surface.statusMessage.connect(lambda text: messages.append(text))
    return editor, surface, messages


def test_open_document_mounts_and_reuses_text_document(backend, tasks, drain):
    backend.files.update({"cmd/main.go": MAIN_GO, "pkg/util.go": UTIL_GO})
    editor, surface, _ = _surface(backend, tasks)
    changes: list[str] = []
    surface.activeDocumentChanged.connect(lambda path: changes.append(path))

    surface.open_document("cmd/main.go")
    assert surface.active_document_path() == ""
    drain()

    assert surface.active_document_path() == "cmd/main.go"
    assert editor.toPlainText() == MAIN_GO
    main_doc = editor.document()

    surface.open_document("pkg/util.go")
    drain()
    assert editor.toPlainText() == UTIL_GO

    # Cached content mounts without another read.
    surface.open_document("CMD\\main.go")
    assert editor.document() is main_doc
    assert changes == ["cmd/main.go", "pkg/util.go", "CMD\\main.go"]
    assert backend.read_calls == ["cmd/main.go", "pkg/util.go"]


def test_superseded_open_does_not_replace_newer_document(backend, tasks, executor):
    backend.files.update({"cfg/x.go": CFG_GO, "pkg/util.go": UTIL_GO})
    editor, surface, _ = _surface(backend, tasks)
    jumps = DeferredNavigationController(surface)
    surface.activeDocumentChanged.connect(jumps.on_active_document_changed)

    jumps.request_jump(NavigationTarget("cfg/x.go", 1, 1, 0))
    jumps.request_jump(NavigationTarget("pkg/util.go", 3, 6, 6))
    assert len(executor.queue) == 2

    executor.run_last()
    tasks.process_completed()
    assert surface.active_document_path() == "pkg/util.go"
    assert editor.textCursor().selectedText() == "Helper"

    executor.run_next()
    tasks.process_completed()

    assert surface.active_document_path() == "pkg/util.go"
    assert editor.toPlainText() == UTIL_GO
    assert editor.textCursor().selectedText() == "Helper"
    assert jumps.pending_jump is None


def test_failed_open_reports_and_keeps_active_document(backend, tasks, drain):
    backend.files["cmd/main.go"] = MAIN_GO
    editor, surface, messages = _surface(backend, tasks)
    surface.open_document("cmd/main.go")
    drain()

    surface.open_document("missing.go")
    drain()

    assert surface.active_document_path() == "cmd/main.go"
    assert editor.toPlainText() == MAIN_GO
    assert messages[-1].startswith("Error loading missing.go")


def test_caret_and_reveal_positions_are_one_based_and_clamped(backend, tasks, drain):
    backend.files["notes.go"] = "line one\nline two\n"
    editor, surface, _ = _surface(backend, tasks)
    surface.open_document("notes.go")
    drain()

    surface.set_caret(Position(2, 6), Range.on_line(2, 6, 9))
    cursor = editor.textCursor()
    assert cursor.selectedText() == "two"
    assert cursor.blockNumber() == 1

    surface.set_caret(Position(1, 99))
    cursor = editor.textCursor()
    assert (cursor.blockNumber(), cursor.positionInBlock(), cursor.hasSelection()) == (0, 8, False)

    surface.set_caret(Position(50, 3))
    cursor = editor.textCursor()
    assert (cursor.blockNumber(), cursor.positionInBlock()) == (2, 0)

    surface.reveal_range(Range.on_line(2, 1, 5))
    cursor = editor.textCursor()
    assert (cursor.blockNumber(), cursor.positionInBlock()) == (1, 0)


def test_word_at_expands_identifier_around_index():
    assert _word_at("foo.barBaz(x)", 6) == "barBaz"
    assert _word_at("abc def", 3) == "abc"
    assert _word_at("a + b", 2) == ""
    assert _word_at("", 0) == ""


def test_definition_request_dispatches_path_or_symbol(backend, tasks, drain):
    backend.files["cmd/main.go"] = 'import "./cfg/x"\nvalue := Helper()\n\n'
    editor, surface, messages = _surface(backend, tasks)
    requests: list[NavigationRequest] = []
    surface.on_navigation_requested(lambda request: requests.append(request) or True)
    surface.open_document("cmd/main.go")
    drain()

    surface.set_caret(Position(1, 10))
    surface._request_definition_at_cursor()
    surface.set_caret(Position(2, 12))
    surface._request_definition_at_cursor()

    assert [(r.kind, r.text, r.origin_path, r.position) for r in requests] == [
        ("path", "./cfg/x", "cmd/main.go", Position(1, 10)),
        ("symbol", "Helper", "cmd/main.go", Position(2, 12)),
    ]

    surface.set_caret(Position(3, 1))
    surface._request_definition_at_cursor()
    assert len(requests) == 2
    assert messages[-1] == "No symbol under cursor."


def test_request_navigation_stops_at_first_handler_that_accepts(backend, tasks):
    _, surface, _ = _surface(backend, tasks)
    request = NavigationRequest(kind="symbol", origin_path="cmd/main.go", text="Helper")
    assert surface.request_navigation(request) is False

    calls: list[str] = []
    surface.on_navigation_requested(lambda r: calls.append("first") or False)
    surface.on_navigation_requested(lambda r: calls.append("second") or True)
    surface.on_navigation_requested(lambda r: calls.append("third") or True)

    assert surface.request_navigation(request) is True
    assert calls == ["first", "second"]


def test_path_links_are_underlined_and_follow_edits(backend, tasks, drain):
    backend.files["web/app.go"] = 'import (\n\t"./cfg/x"\n\t"fmt"\n)\nconst base = "@/web/app"\n'
    editor, surface, _ = _surface(backend, tasks)
    surface.open_document("web/app.go")
    drain()

    links = surface.path_links()
    assert [(link.reference, link.line) for link in links] == [("./cfg/x", 2), ("@/web/app", 5)]
    selections = editor.extraSelections()
    assert len(selections) == 2
    assert selections[0].cursor.selectedText() == "./cfg/x"
    assert selections[0].format.fontUnderline()

    cursor = QTextCursor(editor.document())
    cursor.movePosition(QTextCursor.MoveOperation.End)
    cursor.insertText('var extra = "pkg/extra"\n')

    assert [link.reference for link in surface.path_links()] == ["./cfg/x", "@/web/app", "pkg/extra"]
    assert len(editor.extraSelections()) == 3


def test_event_filter_ignores_events_once_editor_is_gone(backend, tasks):
    _, surface, _ = _surface(backend, tasks)
    del surface.editor

    assert surface.eventFilter(QObject(), QEvent(QEvent.Type.MouseButtonPress)) is False

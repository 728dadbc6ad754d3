"""Shared fixtures: an offscreen Qt application, a hand-driven executor and fakes."""

from __future__ import annotations

import concurrent.futures
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from gofast.services.background_tasks import BackgroundTaskRunner
from gofast.services.errors import WorkspaceBackendError
from gofast.services.symbol_types import SymbolEntry


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QApplication.instance() or QApplication([])
    yield app


class ManualExecutor(concurrent.futures.Executor):
    """Executor whose work only runs when a test says so."""

    def __init__(self) -> None:
        self.queue: list[tuple[concurrent.futures.Future, object]] = []

    def submit(self, fn, /, *args, **kwargs):
        future: concurrent.futures.Future = concurrent.futures.Future()
        self.queue.append((future, lambda: fn(*args, **kwargs)))
        return future

    def run_next(self) -> None:
        future, call = self.queue.pop(0)
        self._run(future, call)

    def run_last(self) -> None:
        future, call = self.queue.pop()
        self._run(future, call)

    def run_all(self) -> None:
        while self.queue:
            self.run_next()

    @staticmethod
    def _run(future: concurrent.futures.Future, call) -> None:
        try:
            future.set_result(call())
        except Exception as exc:
            future.set_exception(exc)


class FakeBackend:
    def __init__(self, symbols=None, files=None, resolved=None) -> None:
        self.symbols: list[SymbolEntry] = list(symbols or [])
        self.files: dict[str, str] = dict(files or {})
        self.resolved: dict[tuple[str, str], str] = dict(resolved or {})
        self.fail_symbols = False
        self.list_calls = 0
        self.read_calls: list[str] = []

    def list_symbols(self) -> list[SymbolEntry]:
        self.list_calls += 1
        if self.fail_symbols:
            raise WorkspaceBackendError("backend offline", kind="network")
        return list(self.symbols)

    def read_file(self, path: str) -> str:
        self.read_calls.append(path)
        if path not in self.files:
            raise WorkspaceBackendError(f"Could not read '{path}'", kind="read", path=path)
        return self.files[path]

    def resolve_file(self, base_path: str, reference: str) -> str:
        key = (base_path, reference)
        if key not in self.resolved:
            raise WorkspaceBackendError(f"Not found: {reference}", kind="not_found")
        return self.resolved[key]


class FakeEditorHost:
    def __init__(self, active_path: str = "") -> None:
        self.active_path = active_path
        self.calls: list[tuple] = []
        self.opened: list[str] = []
        self.handlers: list = []

    def active_document_path(self) -> str:
        return self.active_path

    def open_document(self, path: str) -> None:
        self.opened.append(path)

    def reveal_range(self, text_range) -> None:
        self.calls.append(("reveal", text_range))

    def set_caret(self, position, selection=None) -> None:
        self.calls.append(("caret", position, selection))

    def focus(self) -> None:
        self.calls.append(("focus",))

    def on_navigation_requested(self, handler) -> None:
        self.handlers.append(handler)

    def switch_to(self, path: str, controller) -> None:
        self.active_path = path
        controller.on_active_document_changed(path)


@pytest.fixture
def executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture
def tasks(executor):
    runner = BackgroundTaskRunner(executor=executor)
    yield runner
    runner.shutdown()


@pytest.fixture
def drain(executor, tasks):
    """Run every queued backend call and deliver results on this thread."""

    def _drain() -> None:
        executor.run_all()
        tasks.process_completed()
        while executor.queue:
            executor.run_all()
            tasks.process_completed()

    return _drain


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def host() -> FakeEditorHost:
    return FakeEditorHost()


def entry(name: str, path: str, line: int = 1, character: int = 1, kind: str = "Function") -> SymbolEntry:
    return SymbolEntry(name=name, path=path, line=line, character=character, kind=kind)

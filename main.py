import logging
import os
import sys
from pathlib import Path

from PySide6.QtGui import QFont
from PySide6.QtWidgets import QApplication, QMainWindow, QPlainTextEdit

from gofast.settings_models import SettingsPaths, default_editor_settings
from gofast.settings_store import JsonSettingsStore
from gofast.ui.editor_surface import EditorSurface
from gofast.ui.navigation_workspace import NavigationWorkspace, backend_from_settings

APP_NAME = "GoFast Editor"


def _canonical_existing_dir(path_value: str | Path | None) -> str | None:
    text = str(path_value or "").strip()
    if not text:
        return None
    candidate = Path(text).expanduser()
    if not candidate.is_dir():
        return None
    try:
        return str(candidate.resolve())
    except OSError:
        return str(candidate)


def _configure_logging(settings: JsonSettingsStore, project_root: str) -> None:
    level_name = str(settings.get("logging.level", "INFO") or "INFO").upper()
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    file_error: OSError | None = None
    log_file = str(settings.get("logging.file") or "").strip()
    if log_file:
        log_path = Path(log_file)
        if not log_path.is_absolute():
            log_path = Path(project_root) / ".gofast" / log_path
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
        except OSError as exc:
            file_error = exc
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
    )
    if file_error is not None:
        logging.getLogger(__name__).warning("Log file %s unavailable: %s", log_path, file_error)


def _startup_project(argv: list[str], settings_root: Path) -> str:
    if argv:
        explicit = _canonical_existing_dir(argv[0])
        if explicit is not None:
            return explicit
    store = JsonSettingsStore(SettingsPaths(settings_root).settings_file, default_editor_settings())
    store.load()
    return _canonical_existing_dir(store.get("workspace.last_work_dir")) or str(settings_root.resolve())


if __name__ == "__main__":
    cli_args = sys.argv[1:]
    project_root = _startup_project(cli_args, Path.cwd())
    paths = SettingsPaths(Path(project_root))
    settings = JsonSettingsStore(paths.settings_file, default_editor_settings())
    settings.load()
    _configure_logging(settings, project_root)
    if settings.set("workspace.last_work_dir", project_root):
        settings.save()

    app = QApplication([sys.argv[0], *cli_args])
    app.setStyle("Fusion")
    app.setApplicationName(APP_NAME)
    app.setApplicationDisplayName(f"{APP_NAME} [{Path(project_root).name}]")

    window = QMainWindow()
    editor = QPlainTextEdit(window)
    editor.setFont(QFont("JetBrains Mono", 11))
    window.setCentralWidget(editor)
    window.resize(1100, 760)

    workspace = NavigationWorkspace(backend_from_settings(project_root, settings), settings, parent=window)
    surface = EditorSurface(editor, workspace.documents, parent=window)
    workspace.attach_host(surface)
    workspace.statusMessage.connect(lambda text: window.statusBar().showMessage(text, 2600))
    surface.statusMessage.connect(lambda text: window.statusBar().showMessage(text, 2600))
    surface.activeDocumentChanged.connect(
        lambda path: window.setWindowTitle(f"{os.path.basename(path)} - {APP_NAME}")
    )
    app.aboutToQuit.connect(workspace.shutdown)
    workspace.start()

    if len(cli_args) > 1:
        surface.open_document(os.path.abspath(cli_args[1]))

    window.show()
    sys.exit(app.exec())

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, TypedDict

from gofast.services.workspace_backend import (
    DEFAULT_RESOLVE_SUFFIXES,
    DEFAULT_SKIP_DIRS,
    DEFAULT_SYMBOL_EXTENSIONS,
)

BackendKind = Literal["local", "http"]


class SymbolSettings(TypedDict, total=False):
    refresh_interval_ms: int
    skip_dirs: list[str]
    extensions: list[str]


class NavigationSettings(TypedDict, total=False):
    result_pump_interval_ms: int
    max_workers: int


class FileSettings(TypedDict, total=False):
    resolve_suffixes: list[str]


class BackendSettings(TypedDict, total=False):
    kind: BackendKind
    base_url: str
    timeout_s: float


class LoggingSettings(TypedDict, total=False):
    level: str
    file: str


class WorkspaceSettings(TypedDict, total=False):
    last_work_dir: str


class EditorSettings(TypedDict, total=False):
    symbols: SymbolSettings
    navigation: NavigationSettings
    files: FileSettings
    backend: BackendSettings
    logging: LoggingSettings
    workspace: WorkspaceSettings


@dataclass(slots=True, frozen=True)
class SettingsPaths:
    project_root: Path
    settings_filename: str = ".gofast/settings.json"
    settings_file: Path = field(init=False)

    def __post_init__(self) -> None:
        project_root = Path(self.project_root).expanduser().resolve()
        object.__setattr__(self, "project_root", project_root)
        object.__setattr__(self, "settings_file", project_root / self.settings_filename)


def default_editor_settings() -> EditorSettings:
    defaults: EditorSettings = {
        "symbols": {
            "refresh_interval_ms": 10_000,
            "skip_dirs": list(DEFAULT_SKIP_DIRS),
            "extensions": list(DEFAULT_SYMBOL_EXTENSIONS),
        },
        "navigation": {
            "result_pump_interval_ms": 40,
            "max_workers": 2,
        },
        "files": {
            "resolve_suffixes": list(DEFAULT_RESOLVE_SUFFIXES),
        },
        "backend": {
            "kind": "local",
            "base_url": "http://localhost:8080",
            "timeout_s": 10.0,
        },
        "logging": {
            "level": "INFO",
            "file": "gofast_editor.log",
        },
        "workspace": {
            "last_work_dir": "",
        },
    }
    return deepcopy(defaults)


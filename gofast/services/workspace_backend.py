"""Workspace backend contracts and implementations.

The navigation core only needs three operations from whatever serves the
project files: list every known symbol, read one file, and resolve an
import-like path reference relative to a file. ``LocalWorkspaceBackend``
answers them from the local file system; ``HttpWorkspaceBackend`` asks the
editor's HTTP API.
"""

from __future__ import annotations

import json
import logging
import os
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path
from typing import Iterable, Protocol

from gofast.services.errors import WorkspaceBackendError
from gofast.services.symbol_scanner import scan_source
from gofast.services.symbol_types import SymbolEntry

logger = logging.getLogger(__name__)

DEFAULT_SKIP_DIRS = ("node_modules", "vendor")
DEFAULT_SYMBOL_EXTENSIONS = (".go", ".py")
DEFAULT_RESOLVE_SUFFIXES = (
    "",
    ".go",
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".json",
    "/index.go",
    "/index.ts",
    "/index.tsx",
    "/index.js",
)


class WorkspaceBackend(Protocol):
    def list_symbols(self) -> list[SymbolEntry]:
        ...

    def read_file(self, path: str) -> str:
        ...

    def resolve_file(self, base_path: str, reference: str) -> str:
        ...


class LocalWorkspaceBackend:
    def __init__(
        self,
        project_root: str,
        *,
        skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
        symbol_extensions: Iterable[str] = DEFAULT_SYMBOL_EXTENSIONS,
        resolve_suffixes: Iterable[str] = DEFAULT_RESOLVE_SUFFIXES,
    ) -> None:
        self.project_root = str(project_root or "")
        self._skip_dirs = {str(name) for name in skip_dirs}
        self._symbol_extensions = {str(ext).lower() for ext in symbol_extensions}
        self._resolve_suffixes = tuple(str(suffix) for suffix in resolve_suffixes)

    def list_symbols(self) -> list[SymbolEntry]:
        root = self.project_root
        if not root or not os.path.isdir(root):
            raise WorkspaceBackendError(f"Project root is not a directory: {root}", kind="no_root", path=root)

        logger.info("Indexing symbols in: %s", root)
        symbols: list[SymbolEntry] = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(name for name in dirnames if not self._skip_dir(name))
            for filename in sorted(filenames):
                if os.path.splitext(filename)[1].lower() not in self._symbol_extensions:
                    continue
                file_path = os.path.join(dirpath, filename)
                try:
                    text = Path(file_path).read_text(encoding="utf-8", errors="replace")
                except OSError:
                    continue
                symbols.extend(scan_source(file_path, text))
        logger.info("Indexed %d symbols", len(symbols))
        return symbols

    def read_file(self, path: str) -> str:
        target = str(path or "")
        if not target:
            raise WorkspaceBackendError("Path required", kind="validation")
        try:
            return Path(target).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise WorkspaceBackendError(f"Could not read '{target}': {exc}", kind="read", path=target) from exc

    def resolve_file(self, base_path: str, reference: str) -> str:
        base = str(base_path or "")
        ref = str(reference or "")
        if not base or not ref:
            raise WorkspaceBackendError("base and import required", kind="validation")

        base_dir = os.path.dirname(base)
        root = self.project_root
        resolved = ""
        if ref.startswith("."):
            resolved = self._first_existing(os.path.join(base_dir, ref))
        elif ref.startswith("@/"):
            if root:
                resolved = self._first_existing(os.path.join(root, ref[2:]))
                if not resolved:
                    resolved = self._first_existing(os.path.join(root, "src", ref[2:]))
        else:
            resolved = self._first_existing(os.path.join(base_dir, ref))
            if not resolved and root:
                resolved = self._first_existing(os.path.join(root, ref))

        if not resolved:
            raise WorkspaceBackendError(f"Not found: {ref}", kind="not_found", path=ref)
        return resolved

    def _skip_dir(self, name: str) -> bool:
        return name.startswith(".") or name in self._skip_dirs

    def _first_existing(self, candidate: str) -> str:
        for suffix in self._resolve_suffixes:
            test_path = os.path.normpath(candidate + suffix)
            if os.path.isfile(test_path):
                return test_path
        return ""


class HttpWorkspaceBackend:
    def __init__(self, base_url: str = "http://localhost:8080", *, timeout_s: float = 10.0) -> None:
        self._base_url = str(base_url or "").rstrip("/")
        self._timeout_s = max(0.5, float(timeout_s))

    def list_symbols(self) -> list[SymbolEntry]:
        payload = self._request_json("/api/symbols")
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise WorkspaceBackendError("Unexpected symbol list response.", kind="invalid_response")
        return [SymbolEntry.from_payload(item) for item in payload if isinstance(item, dict)]

    def read_file(self, path: str) -> str:
        payload = self._request_json("/api/fs/read", params={"path": str(path or "")})
        content = payload.get("content") if isinstance(payload, dict) else None
        if not isinstance(content, str):
            raise WorkspaceBackendError(
                f"Invalid response format from server for {path}",
                kind="invalid_response",
                path=str(path or ""),
            )
        return content

    def resolve_file(self, base_path: str, reference: str) -> str:
        payload = self._request_json(
            "/api/fs/resolve",
            params={"base": str(base_path or ""), "import": str(reference or "")},
        )
        resolved = str(payload.get("path") or "") if isinstance(payload, dict) else ""
        if not resolved:
            raise WorkspaceBackendError(f"Not found: {reference}", kind="not_found", path=str(reference or ""))
        return resolved

    def _request_json(self, path: str, *, params: dict[str, str] | None = None):
        url = f"{self._base_url}{path}"
        if params:
            url = f"{url}?{urllib.parse.urlencode(params)}"
        request = urllib.request.Request(
            url=url,
            headers={"Accept": "application/json", "User-Agent": "GoFast-Navigation"},
            method="GET",
        )
        try:
            with urllib.request.urlopen(request, timeout=self._timeout_s) as response:
                body = response.read()
        except urllib.error.HTTPError as exc:
            status = int(getattr(exc, "code", 0) or 0)
            kind = "not_found" if status == 404 else "http"
            raise WorkspaceBackendError(f"Request to {path} failed with HTTP {status}.", kind=kind) from None
        except (urllib.error.URLError, OSError) as exc:
            raise WorkspaceBackendError(f"Could not reach editor backend: {exc}", kind="network") from exc

        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise WorkspaceBackendError("Backend returned invalid JSON.", kind="invalid_response") from exc

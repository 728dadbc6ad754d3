from __future__ import annotations

import ast
import os
import re

from gofast.services.symbol_types import SymbolEntry

_GO_FUNC_RE = re.compile(r"^func\s+(?P<recv>\([^)]*\)\s*)?(?P<name>[A-Za-z_]\w*)")
_GO_TYPE_RE = re.compile(r"^type\s+(?P<name>[A-Za-z_]\w*)")
_GO_VALUE_RE = re.compile(r"^(?P<tok>var|const)\s+(?P<names>[A-Za-z_]\w*(?:\s*,\s*[A-Za-z_]\w*)*)")
_GO_BLOCK_OPEN_RE = re.compile(r"^(?P<tok>var|const|type)\s*\(\s*(?://.*)?$")
_GO_BLOCK_ITEM_RE = re.compile(r"^\s+(?P<names>[A-Za-z_]\w*(?:\s*,\s*[A-Za-z_]\w*)*)")
_IDENT_RE = re.compile(r"[A-Za-z_]\w*")
_GO_LITERAL_OR_COMMENT_RE = re.compile(r"""'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|`[^`]*`|//.*$""")

_GO_VALUE_KINDS = {"var": "Variable", "const": "Constant", "type": "Struct"}
_PYTHON_SUFFIXES = {".py", ".pyw", ".pyi"}
_PY_DEF_KEYWORD_RE = re.compile(r"(?:async\s+)?(?:def|class)\s+")


def scan_source(file_path: str, source_text: str) -> list[SymbolEntry]:
    suffix = os.path.splitext(str(file_path or ""))[1].lower()
    if suffix == ".go":
        return scan_go_source(file_path, source_text)
    if suffix in _PYTHON_SUFFIXES:
        return scan_python_source(file_path, source_text)
    return []


def scan_go_source(file_path: str, source_text: str) -> list[SymbolEntry]:
    """Collect top-level Go declarations: funcs, methods, types, vars and consts."""
    out: list[SymbolEntry] = []
    block_kind = ""
    depth = 0
    for idx, line in enumerate(str(source_text or "").splitlines()):
        line_no = idx + 1
        if block_kind:
            if line.startswith(")"):
                block_kind = ""
                depth = 0
                continue
            stripped = line.strip()
            if not stripped or stripped.startswith("//"):
                continue
            nested = depth > 0
            depth = max(0, depth + _bracket_delta(line))
            if nested:
                continue
            match = _GO_BLOCK_ITEM_RE.match(line)
            if match is None:
                continue
            names_text = match.group("names")
            if block_kind == "Struct":
                names_text = names_text.split(",")[0]
            out.extend(_go_names(file_path, line_no, line, match.start("names"), names_text, block_kind))
            continue

        block = _GO_BLOCK_OPEN_RE.match(line)
        if block is not None:
            block_kind = _GO_VALUE_KINDS[block.group("tok")]
            continue

        func = _GO_FUNC_RE.match(line)
        if func is not None:
            kind = "Method" if func.group("recv") else "Function"
            out.append(_entry(file_path, func.group("name"), line_no, func.start("name"), kind))
            continue

        type_match = _GO_TYPE_RE.match(line)
        if type_match is not None:
            out.append(_entry(file_path, type_match.group("name"), line_no, type_match.start("name"), "Struct"))
            continue

        value = _GO_VALUE_RE.match(line)
        if value is not None:
            kind = _GO_VALUE_KINDS[value.group("tok")]
            out.extend(_go_names(file_path, line_no, line, value.start("names"), value.group("names"), kind))
    return out


def _bracket_delta(line: str) -> int:
    code = _GO_LITERAL_OR_COMMENT_RE.sub("", line)
    return sum(code.count(ch) for ch in "({[") - sum(code.count(ch) for ch in ")}]")


def _go_names(file_path: str, line_no: int, line: str, offset: int, names_text: str, kind: str) -> list[SymbolEntry]:
    out: list[SymbolEntry] = []
    for match in _IDENT_RE.finditer(names_text):
        out.append(_entry(file_path, match.group(0), line_no, offset + match.start(), kind))
    return out


def scan_python_source(file_path: str, source_text: str) -> list[SymbolEntry]:
    text = str(source_text or "")
    if not text.strip():
        return []
    try:
        tree = ast.parse(text)
    except SyntaxError:
        return []
    lines = text.splitlines()
    out: list[SymbolEntry] = []
    _collect_python_nodes(file_path, lines, list(tree.body), out, inside_class=False)
    return out


def _collect_python_nodes(
    file_path: str,
    lines: list[str],
    nodes: list[ast.stmt],
    out: list[SymbolEntry],
    *,
    inside_class: bool,
) -> None:
    for node in nodes:
        if isinstance(node, ast.ClassDef):
            out.append(_python_def_entry(file_path, lines, node, "Class"))
            _collect_python_nodes(file_path, lines, list(node.body), out, inside_class=True)
            continue
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            out.append(_python_def_entry(file_path, lines, node, "Method" if inside_class else "Function"))
            continue
        if inside_class or not isinstance(node, (ast.Assign, ast.AnnAssign)):
            continue
        targets = node.targets if isinstance(node, ast.Assign) else [node.target]
        for target in targets:
            if not isinstance(target, ast.Name):
                continue
            kind = "Constant" if target.id.isupper() else "Variable"
            out.append(_entry(file_path, target.id, target.lineno, target.col_offset, kind))


def _python_def_entry(file_path: str, lines: list[str], node: ast.AST, kind: str) -> SymbolEntry:
    name = str(getattr(node, "name", "") or "")
    line_no = max(1, int(getattr(node, "lineno", 1) or 1))
    col = max(0, int(getattr(node, "col_offset", 0) or 0))
    line_text = lines[line_no - 1] if line_no - 1 < len(lines) else ""
    # col_offset points at the "def"/"class" keyword; the entry points at the name.
    keyword = _PY_DEF_KEYWORD_RE.match(line_text, col)
    name_col = keyword.end() if keyword is not None else col
    return _entry(file_path, name, line_no, name_col, kind)


def _entry(file_path: str, name: str, line_no: int, zero_based_col: int, kind: str) -> SymbolEntry:
    return SymbolEntry(name=name, path=file_path, line=line_no, character=zero_based_col + 1, kind=kind)

"""Detect quoted file-path references (imports, includes) in source lines."""

from __future__ import annotations

import re
from dataclasses import dataclass

_PATH_LINK_RE = re.compile(r"""["'](@/[^"']+)["']|["'](\.\.?[^"']+)["']|["']([^"']+/[^"']+)["']""")
_QUOTED_RE = re.compile(r"""["']([^"']+)["']""")


@dataclass(frozen=True)
class PathLink:
    reference: str
    line: int
    start_column: int
    end_column: int


def find_path_links(line_text: str, *, line: int = 1) -> list[PathLink]:
    """Columns are 1-based; ``end_column`` is exclusive."""
    out: list[PathLink] = []
    for match in _PATH_LINK_RE.finditer(str(line_text or "")):
        reference = match.group(1) or match.group(2) or match.group(3)
        if not reference:
            continue
        start = match.start() + 2
        out.append(PathLink(reference=reference, line=line, start_column=start, end_column=start + len(reference)))
    return out


def path_reference_at(line_text: str, column: int) -> str | None:
    """Return the quoted path under 1-based ``column``, quotes included in the hit area."""
    col = int(column)
    for match in _QUOTED_RE.finditer(str(line_text or "")):
        reference = match.group(1)
        start = match.start() + 1
        end = start + len(reference) + 1
        if start <= col <= end and ("/" in reference or reference.startswith(".")):
            return reference
    return None

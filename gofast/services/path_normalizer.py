"""Path canonicalization used for every "same file?" comparison."""

from __future__ import annotations

CANONICAL_SEPARATOR = "/"


def normalize(path: str | None) -> str:
    """Return the comparison form of ``path``: forward slashes, case-folded.

    Only used as a key. Backend I/O always receives the original path.
    """
    text = str(path or "")
    return text.replace("\\", CANONICAL_SEPARATOR).casefold()


def same_location(left: str | None, right: str | None) -> bool:
    return normalize(left) == normalize(right)


def normalized_dir(path: str | None) -> str:
    key = normalize(path)
    head, sep, _tail = key.rpartition(CANONICAL_SEPARATOR)
    if not sep:
        return ""
    return head

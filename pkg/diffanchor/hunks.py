"""Hunk header parsing and the new-file line walk shared by the resolver.

A hunk header looks like ``@@ -old_start[,old_count] +new_start[,new_count] @@``.
Only lines matching that shape at column 0 are headers; everything else is
body content.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

_HUNK_RE = re.compile(
    r"^@@ -(?P<old_start>\d+)(?:,(?P<old_count>\d+))? \+(?P<new_start>\d+)(?:,(?P<new_count>\d+))? @@"
)

HUNK = "hunk"
CONTEXT = "context"
ADDITION = "addition"
ADDITION_MARKER = "addition_marker"
DELETION = "deletion"
OTHER = "other"

# Kinds that occupy a line in the new file and advance the cursor.
NEW_FILE_KINDS = frozenset({CONTEXT, ADDITION, ADDITION_MARKER})


@dataclass(frozen=True)
class HunkHeader:
    """Parsed ``@@ ... @@`` line."""

    old_start: int
    new_start: int
    old_count: int = 1
    new_count: int = 1


@dataclass(frozen=True)
class PatchLine:
    """One patch line seen after the first hunk header."""

    position: int
    kind: str
    text: str
    new_line: int | None = None


def parse_hunk_header(line: str) -> HunkHeader | None:
    """Return the parsed header, or None when ``line`` is not a hunk header."""
    m = _HUNK_RE.match(line or "")
    if not m:
        return None
    old_count = m.group("old_count")
    new_count = m.group("new_count")
    return HunkHeader(
        old_start=int(m.group("old_start")),
        new_start=int(m.group("new_start")),
        old_count=int(old_count) if old_count is not None else 1,
        new_count=int(new_count) if new_count is not None else 1,
    )


def split_lines(text: str | None) -> list[str]:
    """Split on "\\n" only, dropping one trailing "\\r" per line.

    Form feeds, vertical tabs and Unicode line separators are content inside
    a diff line, so ``str.splitlines`` would miscount positions.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def has_hunk(patch: str | None) -> bool:
    return any(_HUNK_RE.match(line) for line in split_lines(patch))


def _classify(raw: str) -> str:
    if raw.startswith("+++"):
        return ADDITION_MARKER
    if raw.startswith("+"):
        return ADDITION
    if raw.startswith(" "):
        return CONTEXT
    if raw.startswith("-") and not raw.startswith("---"):
        return DELETION
    # "\ No newline at end of file", blank lines, "---" lines.
    return OTHER


def walk_patch(patch: str | None) -> Iterator[PatchLine]:
    """Yield hunk headers and body lines with their new-file line numbers.

    Nothing is yielded until the first hunk header. Every header reseeds the
    cursor to its own ``new_start``; counts from earlier hunks never carry
    over. Deletions and unrecognized lines keep the cursor where it is.
    """
    cursor: int | None = None

    for position, raw in enumerate(split_lines(patch), start=1):
        header = parse_hunk_header(raw)
        if header is not None:
            cursor = header.new_start
            yield PatchLine(position=position, kind=HUNK, text=raw, new_line=header.new_start)
            continue

        if cursor is None:
            continue

        kind = _classify(raw)
        if kind in NEW_FILE_KINDS:
            yield PatchLine(position=position, kind=kind, text=raw, new_line=cursor)
            cursor += 1
        else:
            yield PatchLine(position=position, kind=kind, text=raw)

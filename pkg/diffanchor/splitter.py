"""Split a multi-file git diff into per-file records.

Each record keeps the exact slice of the input that belongs to one file,
starting at its ``diff --git`` line, along with the post-change path and a
change status derived from the file's header lines.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass

from .hunks import split_lines

FileStatus = str

ADDED = "added"
DELETED = "deleted"
RENAMED = "renamed"
MODIFIED = "modified"

FILE_STATUSES = (ADDED, DELETED, RENAMED, MODIFIED)

GIT_HEADER_PREFIX = "diff --git "

_SEGMENT_RE = re.compile(r"^(?=diff --git )", re.MULTILINE)
_GIT_HEADER_RE = re.compile(r"^diff --git a/(.+?) b/(.+?)$")
_BINARY_RE = re.compile(r"^(?:Binary files .* differ|GIT binary patch)\r?$", re.MULTILINE)
_QUOTED_OLD_RE = re.compile(r'^("(?:[^"\\]|\\.)*") (.+)$')
_QUOTED_NEW_RE = re.compile(r'^(.+?) ("(?:[^"\\]|\\.)*")$')
_C_ESCAPE_RE = re.compile(r"([^\\]+)|\\([0-7]{3})|\\(.)")
_C_ESCAPES = {"a": "\a", "b": "\b", "t": "\t", "n": "\n", "v": "\v", "f": "\f", "r": "\r"}


@dataclass(frozen=True)
class FileDiffRecord:
    """One file's slice of a diff."""

    path: str
    status: FileStatus
    text: str

    @property
    def is_binary(self) -> bool:
        return bool(_BINARY_RE.search(self.text))

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def _strip_side(token: str, side: str) -> str | None:
    prefix = f"{side}/"
    if token.startswith(prefix):
        return token[len(prefix):]
    return None


def _unquote(token: str) -> str:
    """Undo git's C-style quoting of a path token.

    git wraps paths holding non-ASCII bytes, quotes, backslashes or control
    characters in double quotes and writes those bytes as escapes
    (``\\303\\251`` for "é"). Unquoted tokens come back unchanged.
    """
    if len(token) < 2 or not (token.startswith('"') and token.endswith('"')):
        return token
    raw = bytearray()
    for literal, octal, escape in _C_ESCAPE_RE.findall(token[1:-1]):
        if literal:
            raw.extend(literal.encode("utf-8"))
        elif octal:
            raw.append(int(octal, 8) & 0xFF)
        else:
            raw.extend(_C_ESCAPES.get(escape, escape).encode("utf-8"))
    return raw.decode("utf-8", errors="replace")


def _side_path(token: str, side: str) -> str:
    """Path from a ``---``/``+++`` token, with quoting and side prefix removed."""
    path = _unquote(token.strip())
    stripped = _strip_side(path, side)
    return stripped if stripped is not None else path


def _parse_git_header(line: str) -> tuple[str, str] | None:
    """Return (old, new) from ``diff --git a/<old> b/<new>``."""
    rest = line[len(GIT_HEADER_PREFIX):].rstrip("\r")

    if '"' in rest:
        for pattern in (_QUOTED_OLD_RE, _QUOTED_NEW_RE):
            m = pattern.match(rest)
            if not m:
                continue
            old = _strip_side(_unquote(m.group(1)), "a")
            new = _strip_side(_unquote(m.group(2)), "b")
            if old is not None and new is not None:
                return old, new

    # Same path on both sides: split down the middle so paths that contain
    # " b/" are not cut short.
    if len(rest) % 2 == 1:
        half = len(rest) // 2
        left, sep, right = rest[:half], rest[half], rest[half + 1:]
        old = _strip_side(left, "a")
        new = _strip_side(right, "b")
        if sep == " " and old is not None and old == new:
            return old, new

    m = _GIT_HEADER_RE.match(GIT_HEADER_PREFIX + rest)
    if m:
        return m.group(1), m.group(2)
    return None


def _header_lines(segment: str) -> list[str]:
    header: list[str] = []
    for line in split_lines(segment):
        if line.startswith("@@"):
            break
        header.append(line)
    return header


def _old_path(header: list[str]) -> str | None:
    for line in header:
        if line.startswith("--- ") and not line.startswith("--- /dev/null"):
            return _side_path(line[4:], "a") or None
    return None


def _classify(segment: str) -> tuple[str | None, FileStatus]:
    header = _header_lines(segment)
    path: str | None = None
    status: FileStatus = MODIFIED

    for line in header:
        if line.startswith(GIT_HEADER_PREFIX):
            paths = _parse_git_header(line)
            if paths is not None:
                old, new = paths
                path = new
                if old != new:
                    status = RENAMED

        if line.startswith("+++ ") and not line.startswith("+++ /dev/null"):
            path = _side_path(line[4:], "b")

        if "new file mode" in line or line.startswith("--- /dev/null"):
            status = ADDED

        if "deleted file mode" in line or line.startswith("+++ /dev/null"):
            status = DELETED
            old_path = _old_path(header)
            if old_path:
                path = old_path

        if line.startswith("rename from") or line.startswith("rename to"):
            status = RENAMED

    return path or None, status


def split_segments(diff: str | None) -> list[str]:
    """Cut ``diff`` at every line that starts with ``diff --git ``.

    Text before the first such line is not a file and is left out.
    """
    if not diff:
        return []
    return [chunk for chunk in _SEGMENT_RE.split(diff) if chunk.startswith(GIT_HEADER_PREFIX)]


def split_diff(diff: str | None) -> list[FileDiffRecord]:
    """Return one record per file in ``diff``, in input order.

    Segments without a resolvable path are dropped, as are later segments
    that repeat an already seen path.
    """
    records: list[FileDiffRecord] = []
    seen: set[str] = set()

    for segment in split_segments(diff):
        path, status = _classify(segment)
        if not path or path in seen:
            continue
        seen.add(path)
        records.append(FileDiffRecord(path=path, status=status, text=segment))

    return records

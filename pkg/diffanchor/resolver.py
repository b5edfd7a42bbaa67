"""Map a single file's patch onto new-file line numbers.

Review APIs reject comments on lines the diff does not cover, so callers
use `is_line_addressable` to validate a suggested line and fall back to
`first_addressable_line` when it is not part of the patch.
"""

from __future__ import annotations

from dataclasses import dataclass

from .hunks import ADDITION, HUNK, NEW_FILE_KINDS, walk_patch


@dataclass(frozen=True)
class LineAddress:
    """Resolved anchor for one patch.

    ``line`` is the default anchor (None when the patch has no hunk);
    ``exists`` is only set when a ``target`` line was checked.
    """

    line: int | None
    exists: bool | None = None
    target: int | None = None

    @property
    def anchor(self) -> int | None:
        if self.exists:
            return self.target
        return self.line


def _valid_target(target: object) -> bool:
    if isinstance(target, bool) or not isinstance(target, int):
        return False
    return target > 0


def first_addressable_line(patch: str | None) -> int | None:
    """Return the new-file line of the first addition in ``patch``.

    Without any addition, the first hunk's ``new_start`` is returned. A patch
    with no hunk header has no anchor.
    """
    first_start: int | None = None

    for line in walk_patch(patch):
        if line.kind == HUNK:
            if first_start is None:
                first_start = line.new_line
            continue
        if line.kind == ADDITION:
            return line.new_line

    return first_start


def is_line_addressable(patch: str | None, target: int | None) -> bool:
    """True when ``target`` is a context or added line of some hunk."""
    if not patch or not _valid_target(target):
        return False

    for line in walk_patch(patch):
        if line.kind in NEW_FILE_KINDS and line.new_line == target:
            return True
    return False


def addressable_lines(patch: str | None) -> list[int]:
    """Return every new-file line number the patch covers, in patch order."""
    return [line.new_line for line in walk_patch(patch) if line.kind in NEW_FILE_KINDS]


def resolve_line_address(patch: str | None, target: int | None = None) -> LineAddress:
    line = first_addressable_line(patch)
    if target is None:
        return LineAddress(line=line)
    return LineAddress(
        line=line,
        exists=is_line_addressable(patch, target),
        target=target,
    )


def diff_positions(patch: str | None) -> dict[int, int]:
    """Return map: new-file line number -> review comment position.

    The position counts lines below the first hunk header, so the line right
    after it is position 1. Later hunk headers occupy a position too.
    """
    mapping: dict[int, int] = {}
    first_header: int | None = None

    for line in walk_patch(patch):
        if first_header is None:
            # walk_patch always starts at a hunk header.
            first_header = line.position
            continue
        if line.kind in NEW_FILE_KINDS:
            mapping[line.new_line] = line.position - first_header

    return mapping

"""Decide whether a file's patch is worth resolving lines for.

The resolver accepts any text; size ceilings and lockfile/vendor/binary
filtering are the caller's call and live here.
"""

from __future__ import annotations

import fnmatch
from pathlib import PurePosixPath

from .config import PatchPolicy
from .hunks import has_hunk, split_lines
from .splitter import FileDiffRecord


def path_skip_reason(path: str, policy: PatchPolicy) -> str | None:
    filename = PurePosixPath(path).name
    if filename in policy.skip_filenames:
        return "lockfile_or_generated"
    if any(fnmatch.fnmatch(filename, pat) for pat in policy.skip_globs):
        return "lockfile_or_generated"
    if any(path.startswith(d) or f"/{d}" in path for d in policy.vendor_dirs):
        return "vendor_directory"
    if PurePosixPath(path).suffix.lower() in policy.binary_extensions:
        return "binary_file"
    return None


def patch_skip_reason(patch: str | None, policy: PatchPolicy) -> str | None:
    if not patch:
        return "no_patch"

    patch_bytes = len(patch.encode("utf-8", errors="ignore"))
    if patch_bytes > policy.max_patch_bytes:
        return f"too_large ({patch_bytes} bytes, limit {policy.max_patch_bytes})"

    patch_lines = len(split_lines(patch))
    if patch_lines > policy.max_patch_lines:
        return f"too_large ({patch_lines} lines, limit {policy.max_patch_lines})"

    if not has_hunk(patch):
        return "no_hunks"
    return None


def omit_reason(record: FileDiffRecord, policy: PatchPolicy) -> str | None:
    """Return why ``record`` should not be reviewed inline, or None."""
    reason = path_skip_reason(record.path, policy)
    if reason is not None:
        return reason
    if record.is_binary:
        return "binary_file"
    return patch_skip_reason(record.text, policy)

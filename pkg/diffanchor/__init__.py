"""Unified diff splitting and new-file line resolution for review comments."""

from .config import ConfigError, PatchPolicy, load_policy
from .hunks import HunkHeader, PatchLine, has_hunk, parse_hunk_header, split_lines, walk_patch
from .policy import omit_reason, patch_skip_reason, path_skip_reason
from .resolver import (
    LineAddress,
    addressable_lines,
    diff_positions,
    first_addressable_line,
    is_line_addressable,
    resolve_line_address,
)
from .splitter import ADDED, DELETED, FILE_STATUSES, MODIFIED, RENAMED, FileDiffRecord, split_diff

__all__ = [
    "ADDED",
    "ConfigError",
    "DELETED",
    "FILE_STATUSES",
    "FileDiffRecord",
    "HunkHeader",
    "LineAddress",
    "MODIFIED",
    "PatchLine",
    "PatchPolicy",
    "RENAMED",
    "addressable_lines",
    "diff_positions",
    "first_addressable_line",
    "has_hunk",
    "is_line_addressable",
    "load_policy",
    "omit_reason",
    "parse_hunk_header",
    "patch_skip_reason",
    "path_skip_reason",
    "resolve_line_address",
    "split_diff",
    "split_lines",
    "walk_patch",
]

#!/usr/bin/env python3
"""Split a PR diff into per-file diffs with a manifest.

Usage:
    split-diff.py <diff-file> <output-dir> [--config <policy.yml>]

Output structure:
    <output-dir>/
        manifest.json     # File list with paths, statuses, omission flags, anchors
        summary.md        # Human-readable overview
        diffs/            # Per-file diff files (exact slices of the input)
            <sanitized>.diff
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pkg.diffanchor import (
    ADDED,
    DELETED,
    MODIFIED,
    RENAMED,
    ConfigError,
    PatchPolicy,
    first_addressable_line,
    load_policy,
    omit_reason,
    split_diff,
    split_lines,
)

DEFAULT_POLICY_FILE = Path(__file__).parent.parent / "defaults" / "policy.yml"

STATUS_ICONS = {ADDED: "+", DELETED: "-", MODIFIED: "~", RENAMED: "R"}


def _sanitize_filename(path: str) -> str:
    """Flatten a file path into a safe filename for the diffs/ directory."""
    return path.replace("/", "__").replace("\\", "__")


def _unique_diff_name(path: str, used: set[str]) -> str:
    """Pick a diffs/ filename no earlier file has taken.

    ``a/b.py`` and ``a__b.py`` flatten to the same name, and case-insensitive
    filesystems also fold ``A.py`` onto ``a.py``; later files get ``~2``, ``~3``.
    """
    base = _sanitize_filename(path)
    name = f"{base}.diff"
    n = 2
    while name.lower() in used:
        name = f"{base}~{n}.diff"
        n += 1
    used.add(name.lower())
    return name


def split_to_dir(
    diff_file: Path,
    output_dir: Path,
    policy: PatchPolicy | None = None,
) -> dict:
    """Write the per-file bundle. Returns the manifest dict."""
    policy = policy or PatchPolicy()
    diffs_dir = output_dir / "diffs"
    diffs_dir.mkdir(parents=True, exist_ok=True)

    # newline="" keeps CRLF intact so each slice is byte-for-byte.
    with diff_file.open(encoding="utf-8", errors="replace", newline="") as handle:
        diff_text = handle.read()

    manifest_files: list[dict] = []
    omitted = 0
    used_names: set[str] = set()

    for record in split_diff(diff_text):
        reason = omit_reason(record, policy)
        entry: dict = {
            "path": record.path,
            "status": record.status,
            "diff_lines": len(split_lines(record.text)),
            "diff_bytes": len(record.text.encode("utf-8", errors="ignore")),
        }

        if reason:
            omitted += 1
            entry["omitted"] = True
            entry["omit_reason"] = reason
            entry["anchor_line"] = None
        else:
            safe_name = _unique_diff_name(record.path, used_names)
            with (diffs_dir / safe_name).open("w", encoding="utf-8", newline="") as handle:
                handle.write(record.text)
            entry["omitted"] = False
            entry["diff_file"] = f"diffs/{safe_name}"
            entry["anchor_line"] = first_addressable_line(record.text)

        manifest_files.append(entry)

    manifest = {
        "total_files": len(manifest_files),
        "included_files": len(manifest_files) - omitted,
        "omitted_files": omitted,
        "files": manifest_files,
    }

    (output_dir / "manifest.json").write_text(json.dumps(manifest, indent=2) + "\n")
    (output_dir / "summary.md").write_text(_build_summary(manifest))
    return manifest


def _build_summary(manifest: dict) -> str:
    lines = []

    total = manifest["total_files"]
    included = manifest["included_files"]
    omitted = manifest["omitted_files"]

    lines.append(f"{total} files changed ({included} included, {omitted} omitted)")
    lines.append("")

    for entry in manifest["files"]:
        icon = STATUS_ICONS.get(entry["status"], "?")
        if entry.get("omitted"):
            lines.append(
                f"  {icon} {entry['path']} [OMITTED: {entry.get('omit_reason', 'unknown')}]"
            )
        else:
            lines.append(f"  {icon} {entry['path']} ({entry['diff_lines']} lines)")

    lines.append("")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="split-diff.py", description="Split a diff per file")
    parser.add_argument("diff_file", type=Path, help="Path to unified diff file")
    parser.add_argument("output_dir", type=Path, help="Output bundle directory")
    parser.add_argument(
        "--config", type=Path, default=DEFAULT_POLICY_FILE, help="Patch policy YAML (default: defaults/policy.yml)"
    )
    args = parser.parse_args(argv)

    if not args.diff_file.exists():
        print(f"diff file not found: {args.diff_file}", file=sys.stderr)
        return 2

    try:
        policy = load_policy(args.config)
    except ConfigError as e:
        print(f"::error::patch policy error: {e}", file=sys.stderr)
        return 2

    manifest = split_to_dir(args.diff_file, args.output_dir, policy)

    for entry in manifest["files"]:
        if entry["omitted"]:
            print(
                f"::warning::Skipping {entry['path']}: {entry['omit_reason']}",
                file=sys.stderr,
            )

    print(
        f"Split diff: {manifest['total_files']} files "
        f"({manifest['included_files']} included, "
        f"{manifest['omitted_files']} omitted)"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

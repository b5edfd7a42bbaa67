#!/usr/bin/env python3
"""Resolve the new-file line an inline review comment should anchor on.

Usage:
    resolve-line.py <patch-file> [--line N] [--config <policy.yml>]

Prints a JSON object:
    {"line": <first addressable line or null>,
     "exists": <whether --line is covered by the patch, or null>,
     "target": <--line or null>,
     "anchor": <--line when it exists, else line>,
     "skip_reason": <why the patch was not resolved, or null>}
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pkg.diffanchor import ConfigError, PatchPolicy, load_policy, patch_skip_reason, resolve_line_address

DEFAULT_POLICY_FILE = Path(__file__).parent.parent / "defaults" / "policy.yml"


def resolve(patch: str, target: int | None, policy: PatchPolicy) -> dict:
    skip_reason = patch_skip_reason(patch, policy)
    if skip_reason is not None:
        return {
            "line": None,
            "exists": None if target is None else False,
            "target": target,
            "anchor": None,
            "skip_reason": skip_reason,
        }

    address = resolve_line_address(patch, target)
    return {
        "line": address.line,
        "exists": address.exists,
        "target": address.target,
        "anchor": address.anchor,
        "skip_reason": None,
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="resolve-line.py")
    parser.add_argument("patch_file", type=Path, help="Single-file patch")
    parser.add_argument("--line", type=int, default=None, help="Suggested new-file line")
    parser.add_argument(
        "--config", type=Path, default=DEFAULT_POLICY_FILE, help="Patch policy YAML (default: defaults/policy.yml)"
    )
    args = parser.parse_args(argv)

    if not args.patch_file.exists():
        print(f"patch file not found: {args.patch_file}", file=sys.stderr)
        return 2

    try:
        policy = load_policy(args.config)
    except ConfigError as e:
        print(f"::error::patch policy error: {e}", file=sys.stderr)
        return 2

    patch = args.patch_file.read_text(encoding="utf-8", errors="replace")
    result = resolve(patch, args.line, policy)

    if result["skip_reason"]:
        print(
            f"::warning::Skipping {args.patch_file}: {result['skip_reason']}",
            file=sys.stderr,
        )
    elif args.line is not None and not result["exists"]:
        print(
            f"::warning::Line {args.line} is not part of the diff, "
            f"falling back to line {result['anchor']}",
            file=sys.stderr,
        )

    print(json.dumps(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Typed loader for patch policy config (YAML).

Example:

    patch:
      max_bytes: 50000
      max_lines: 500
    skip:
      filenames: [package-lock.json, yarn.lock]
      globs: ["*.min.js"]
      vendor_dirs: [vendor/, node_modules/]
      binary_extensions: [.png, .zip]

Every key is optional; missing sections fall back to the defaults below.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

DEFAULT_MAX_PATCH_BYTES = 50_000
DEFAULT_MAX_PATCH_LINES = 500

DEFAULT_SKIP_FILENAMES = (
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "Gemfile.lock",
    "Cargo.lock",
    "go.sum",
    "composer.lock",
    "poetry.lock",
)

DEFAULT_SKIP_GLOBS = ("*.generated.*", "*.min.js", "*.min.css")

DEFAULT_VENDOR_DIRS = (
    "vendor/",
    "node_modules/",
    "dist/",
    "build/",
    ".venv/",
    "__pycache__/",
    ".next/",
)

DEFAULT_BINARY_EXTENSIONS = (
    ".png", ".jpg", ".jpeg", ".gif", ".ico", ".svg", ".webp",
    ".woff", ".woff2", ".ttf", ".eot",
    ".zip", ".tar", ".gz", ".bz2",
    ".wasm", ".map", ".pyc",
)


class ConfigError(RuntimeError):
    """Invalid or unreadable policy config."""


def _require_mapping(value: Any, ctx: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"{ctx}: expected mapping")
    return value


def _require_str(value: Any, ctx: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{ctx}: expected string")
    s = value.strip()
    if not s:
        raise ConfigError(f"{ctx}: must be non-empty")
    return s


def _require_str_tuple(value: Any, ctx: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigError(f"{ctx}: expected list")
    out: list[str] = []
    for idx, item in enumerate(value):
        out.append(_require_str(item, f"{ctx}[{idx}]"))
    return tuple(dict.fromkeys(out))


def _positive_int(value: Any, ctx: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{ctx}: expected integer")
    if value < 1:
        raise ConfigError(f"{ctx}: must be >= 1")
    return value


def _optional_str_tuple(raw: dict[str, Any], key: str, ctx: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = raw.get(key)
    if value is None:
        return default
    return _require_str_tuple(value, f"{ctx}.{key}")


@dataclass(frozen=True)
class PatchPolicy:
    """Limits and skip rules a caller applies before resolving lines."""

    max_patch_bytes: int = DEFAULT_MAX_PATCH_BYTES
    max_patch_lines: int = DEFAULT_MAX_PATCH_LINES
    skip_filenames: tuple[str, ...] = DEFAULT_SKIP_FILENAMES
    skip_globs: tuple[str, ...] = DEFAULT_SKIP_GLOBS
    vendor_dirs: tuple[str, ...] = DEFAULT_VENDOR_DIRS
    binary_extensions: tuple[str, ...] = DEFAULT_BINARY_EXTENSIONS

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None = None) -> "PatchPolicy":
        if raw is None:
            return cls()
        cfg = _require_mapping(raw, "config")

        patch: dict[str, Any] = {}
        if cfg.get("patch") is not None:
            patch = _require_mapping(cfg["patch"], "config.patch")

        skip: dict[str, Any] = {}
        if cfg.get("skip") is not None:
            skip = _require_mapping(cfg["skip"], "config.skip")

        binary_extensions = tuple(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in _optional_str_tuple(
                skip, "binary_extensions", "config.skip", DEFAULT_BINARY_EXTENSIONS
            )
        )

        return cls(
            max_patch_bytes=_positive_int(
                patch.get("max_bytes"), "config.patch.max_bytes", DEFAULT_MAX_PATCH_BYTES
            ),
            max_patch_lines=_positive_int(
                patch.get("max_lines"), "config.patch.max_lines", DEFAULT_MAX_PATCH_LINES
            ),
            skip_filenames=_optional_str_tuple(
                skip, "filenames", "config.skip", DEFAULT_SKIP_FILENAMES
            ),
            skip_globs=_optional_str_tuple(skip, "globs", "config.skip", DEFAULT_SKIP_GLOBS),
            vendor_dirs=_optional_str_tuple(
                skip, "vendor_dirs", "config.skip", DEFAULT_VENDOR_DIRS
            ),
            binary_extensions=binary_extensions,
        )


def _load_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text())
    except FileNotFoundError:
        raise ConfigError(f"missing config file: {path}") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e


def load_policy(path: Path) -> PatchPolicy:
    """Load a `PatchPolicy` from a YAML file. An empty file means defaults."""
    return PatchPolicy.from_dict(_load_yaml(path))

"""Tests for scripts/resolve-line.py CLI."""

import json
from pathlib import Path

from conftest import resolve_line_cli

main = resolve_line_cli.main
resolve = resolve_line_cli.resolve
PatchPolicy = resolve_line_cli.PatchPolicy

PATCH = "@@ -1,2 +1,3 @@\n line1\n+added\n line2\n"


def _write_patch(tmp_path: Path, text: str = PATCH) -> str:
    p = tmp_path / "file.patch"
    p.write_text(text)
    return str(p)


class TestResolve:
    def test_anchor_without_line(self):
        assert resolve(PATCH, None, PatchPolicy()) == {
            "line": 2,
            "exists": None,
            "target": None,
            "anchor": 2,
            "skip_reason": None,
        }

    def test_valid_line(self):
        result = resolve(PATCH, 3, PatchPolicy())
        assert result["exists"] is True
        assert result["anchor"] == 3

    def test_invalid_line_falls_back(self):
        result = resolve(PATCH, 40, PatchPolicy())
        assert result["exists"] is False
        assert result["anchor"] == 2

    def test_skipped_patch(self):
        result = resolve("no hunks here\n", 1, PatchPolicy())
        assert result == {
            "line": None,
            "exists": False,
            "target": 1,
            "anchor": None,
            "skip_reason": "no_hunks",
        }

    def test_size_ceiling(self):
        result = resolve(PATCH, None, PatchPolicy(max_patch_bytes=8))
        assert result["skip_reason"].startswith("too_large (")
        assert result["exists"] is None


class TestMain:
    def test_prints_json(self, tmp_path, capsys):
        code = main([_write_patch(tmp_path), "--line", "1"])
        captured = capsys.readouterr()
        assert code == 0
        assert json.loads(captured.out)["anchor"] == 1
        assert captured.err == ""

    def test_warns_on_fallback(self, tmp_path, capsys):
        code = main([_write_patch(tmp_path), "--line", "9"])
        captured = capsys.readouterr()
        assert code == 0
        assert json.loads(captured.out)["anchor"] == 2
        assert "::warning::Line 9 is not part of the diff, falling back to line 2" in captured.err

    def test_warns_on_skip(self, tmp_path, capsys):
        code = main([_write_patch(tmp_path, "")])
        captured = capsys.readouterr()
        assert code == 0
        assert json.loads(captured.out)["skip_reason"] == "no_patch"
        assert "::warning::Skipping" in captured.err

    def test_config_applied(self, tmp_path, capsys):
        cfg = tmp_path / "policy.yml"
        cfg.write_text("patch:\n  max_lines: 2\n")
        code = main([_write_patch(tmp_path), "--config", str(cfg)])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["skip_reason"] == "too_large (4 lines, limit 2)"

    def test_default_policy_file_is_loaded(self, tmp_path, capsys, monkeypatch):
        cfg = tmp_path / "policy.yml"
        cfg.write_text("patch:\n  max_lines: 2\n")
        monkeypatch.setattr(resolve_line_cli, "DEFAULT_POLICY_FILE", cfg)

        code = main([_write_patch(tmp_path)])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["skip_reason"] == "too_large (4 lines, limit 2)"

    def test_shipped_policy_used_without_config(self, tmp_path, capsys):
        code = main([_write_patch(tmp_path)])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["anchor"] == 2

    def test_missing_patch_file(self, tmp_path, capsys):
        code = main([str(tmp_path / "missing.patch")])
        assert code == 2
        assert "patch file not found" in capsys.readouterr().err

    def test_missing_config(self, tmp_path, capsys):
        code = main([_write_patch(tmp_path), "--config", str(tmp_path / "nope.yml")])
        assert code == 2
        assert "missing config file" in capsys.readouterr().err

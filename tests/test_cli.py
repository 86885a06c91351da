"""Tests for cli.py — Typer commands wired to the pipeline."""

from __future__ import annotations

import io
import json
import zipfile
from unittest.mock import patch

from typer.testing import CliRunner

from stackshift.cli import app

runner = CliRunner()


class TestAnalyze:
    def test_human_output(self, tmp_project_dir):
        result = runner.invoke(app, ["analyze", str(tmp_project_dir)])
        assert result.exit_code == 0
        assert "[stackshift] 3 files" in result.output
        assert "JavaScript" in result.output
        assert "React" in result.output

    def test_json_output(self, tmp_project_dir):
        result = runner.invoke(app, ["analyze", str(tmp_project_dir), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["totalFiles"] == 3
        assert "React" in data["frameworks"]

    def test_missing_path(self, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "[stackshift] Error: File not found" in result.output


class TestConvert:
    def test_writes_zip(self, tmp_project_dir, tmp_path):
        out = tmp_path / "out.zip"
        result = runner.invoke(app, [
            "convert", str(tmp_project_dir), "--from", "react", "--to", "flutter",
            "--output", str(out), "--generate-tests",
        ])
        assert result.exit_code == 0
        assert "[ 25%] parsing" in result.output
        assert "[100%] completed" in result.output
        with zipfile.ZipFile(out) as archive:
            names = archive.namelist()
        assert "lib/widgets/counter_widget.dart" in names
        assert "test/widgets/counter_widget_test.dart" in names
        assert "pubspec.yaml" in names
        assert "README.md" in names

    def test_default_target_from_settings(self, tmp_project_dir, tmp_path, monkeypatch):
        monkeypatch.setenv("STACKSHIFT_DEFAULT_TARGET", "kotlin")
        out = tmp_path / "k.zip"
        result = runner.invoke(app, ["convert", str(tmp_project_dir), "--from", "react", "-o", str(out)])
        assert result.exit_code == 0
        with zipfile.ZipFile(out) as archive:
            assert "build.gradle.kts" in archive.namelist()

    def test_existing_output_declined(self, tmp_project_dir, tmp_path):
        out = tmp_path / "out.zip"
        out.write_bytes(b"keep me")
        result = runner.invoke(
            app,
            ["convert", str(tmp_project_dir), "--from", "react", "--to", "typescript", "-o", str(out)],
            input="n\n",
        )
        assert result.exit_code == 0
        assert "Aborted" in result.output
        assert out.read_bytes() == b"keep me"

    def test_existing_output_with_yes(self, tmp_project_dir, tmp_path):
        out = tmp_path / "out.zip"
        out.write_bytes(b"old")
        result = runner.invoke(app, [
            "convert", str(tmp_project_dir), "--from", "react", "--to", "typescript", "-o", str(out), "--yes",
        ])
        assert result.exit_code == 0
        with zipfile.ZipFile(out) as archive:
            assert "src/components/Counter.tsx" in archive.namelist()

    def test_failed_job_exits_1(self, tmp_project_dir, tmp_path):
        with patch("stackshift.core.jobs.TranspilerService.parse_sources", side_effect=RuntimeError("nope")):
            result = runner.invoke(app, [
                "convert", str(tmp_project_dir), "--from", "react", "--to", "flutter", "-o", str(tmp_path / "x.zip"),
            ])
        assert result.exit_code == 1
        assert "[stackshift] Error: nope" in result.output


class TestConvertStack:
    def test_json_result(self, tmp_project_dir):
        result = runner.invoke(app, [
            "convert-stack", str(tmp_project_dir),
            "--from-frontend", "React:javascript",
            "--to-frontend", "Flutter:dart",
            "--json",
        ])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["success"] is True
        assert "lib/widgets/counter.dart" in [f["newPath"] for f in data["files"]]

    def test_zip_output(self, tmp_project_dir, tmp_path):
        out = tmp_path / "stack.zip"
        result = runner.invoke(app, [
            "convert-stack", str(tmp_project_dir),
            "--from-frontend", "React:javascript",
            "--to-frontend", "Vue:javascript",
            "--output", str(out),
        ])
        assert result.exit_code == 0
        assert "src/components/Counter.vue" in result.output
        with zipfile.ZipFile(out) as archive:
            assert "package.json" in archive.namelist()

    def test_bad_framework_spec(self, tmp_project_dir):
        result = runner.invoke(app, [
            "convert-stack", str(tmp_project_dir), "--from-frontend", "React", "--to-frontend", "Flutter:dart",
        ])
        assert result.exit_code == 1
        assert "Expected NAME:LANGUAGE" in result.output

    def test_missing_target(self, tmp_project_dir):
        result = runner.invoke(app, ["convert-stack", str(tmp_project_dir), "--from-frontend", "React:javascript"])
        assert result.exit_code == 1
        assert "Both a current and a target stack are required" in result.output

    def test_nothing_generated_exits_1(self, tmp_project_dir):
        result = runner.invoke(app, [
            "convert-stack", str(tmp_project_dir),
            "--from-frontend", "React:javascript",
            "--to-frontend", "Svelte:svelte",
        ])
        assert result.exit_code == 1
        assert "No files were generated during conversion" in result.output


class TestParse:
    def test_line_mode(self, tmp_project_dir):
        result = runner.invoke(app, ["parse", str(tmp_project_dir), "--framework", "react"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [c["name"] for c in data["ui"]["components"]] == ["Counter"]
        assert data["config"]["dependencies"][0]["name"] == "react"

    def test_ast_mode(self, tmp_project_dir):
        result = runner.invoke(app, ["parse", str(tmp_project_dir), "-f", "react", "--mode", "ast"])
        assert result.exit_code == 0
        nodes = json.loads(result.output)
        assert {n["type"] for n in nodes} == {"component", "stylesheet"}

    def test_unknown_mode(self, tmp_project_dir):
        result = runner.invoke(app, ["parse", str(tmp_project_dir), "-f", "react", "--mode", "deep"])
        assert result.exit_code == 1
        assert "Unknown parse mode" in result.output


class TestFrameworks:
    def test_lists_all(self):
        result = runner.invoke(app, ["frameworks"])
        assert result.exit_code == 0
        assert "flutter" in result.output
        assert "kotlin" in result.output

    def test_category_filter(self):
        result = runner.invoke(app, ["frameworks", "--category", "Backend/API Development"])
        assert result.exit_code == 0
        assert "nodejs" in result.output
        assert "flutter" not in result.output

    def test_unknown_category(self):
        result = runner.invoke(app, ["frameworks", "-c", "Quantum"])
        assert result.exit_code == 0
        assert "No frameworks in category" in result.output


class TestGlobalOptions:
    def test_invalid_settings_exit_1(self, monkeypatch):
        monkeypatch.setenv("STACKSHIFT_MAX_FILE_SIZE", "lots")
        result = runner.invoke(app, ["frameworks"])
        assert result.exit_code == 1
        assert "STACKSHIFT_MAX_FILE_SIZE must be an integer" in result.output

    def test_verbose_flag(self):
        result = runner.invoke(app, ["--verbose", "frameworks"])
        assert result.exit_code == 0


class TestMain:
    @patch("stackshift.cli.app")
    def test_keyboard_interrupt(self, mock_app):
        from stackshift.cli import main

        mock_app.side_effect = KeyboardInterrupt
        try:
            main()
        except SystemExit as e:
            assert e.code == 1
        else:
            raise AssertionError("main() should exit with status 1")

"""Shared pytest fixtures for pipeline / CLI tests."""

from __future__ import annotations

import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest

import stackshift.core.config as config_module


# ---------------------------------------------------------------------------
# Sample projects
# ---------------------------------------------------------------------------

COUNTER_JSX = (
    "import React, { useState } from 'react';\n"
    "\n"
    "const Counter = () => {\n"
    "  const [count, setCount] = useState(0);\n"
    "  return <div>{count}</div>;\n"
    "};\n"
    "\n"
    "export default Counter;\n"
)


@pytest.fixture()
def tmp_project_dir(tmp_path: Path) -> Path:
    """Create a temporary React project with one component and a stylesheet."""
    project = tmp_path / "demo"
    src = project / "src"
    src.mkdir(parents=True)
    (src / "Counter.jsx").write_text(COUNTER_JSX, encoding="utf-8")
    (src / "App.css").write_text(".app { color: red; }\n", encoding="utf-8")
    (project / "package.json").write_text(
        '{"name": "demo", "dependencies": {"react": "^18.2.0"}}', encoding="utf-8"
    )
    nm = project / "node_modules" / "react"
    nm.mkdir(parents=True)
    (nm / "index.js").write_text("module.exports = {};", encoding="utf-8")
    return project


@pytest.fixture()
def zip_factory(tmp_path: Path):
    """Builds a ZIP on disk from a {name: content} mapping."""

    def _make(entries: dict, name: str = "upload.zip") -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as archive:
            for entry, content in entries.items():
                archive.writestr(entry, content)
        return path

    return _make


# ---------------------------------------------------------------------------
# Settings singleton
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Every test starts without a cached Settings or STACKSHIFT_* overrides."""
    for name in (
        "STACKSHIFT_MAX_FILE_SIZE",
        "STACKSHIFT_MAX_TOTAL_SIZE",
        "STACKSHIFT_LOG_LEVEL",
        "STACKSHIFT_DEFAULT_TARGET",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_settings", None)
    yield
    config_module._settings = None


# ---------------------------------------------------------------------------
# Common mocks for stackshift.pipeline
# ---------------------------------------------------------------------------

@pytest.fixture()
def mock_typer_confirm():
    """Patch stackshift.pipeline.typer.confirm."""
    with patch("stackshift.pipeline.typer.confirm") as m:
        yield m


@pytest.fixture()
def mock_typer_echo():
    """Patch stackshift.pipeline.typer.echo."""
    with patch("stackshift.pipeline.typer.echo") as m:
        yield m


@pytest.fixture()
def mock_load_project_files():
    """Patch stackshift.pipeline.load_project_files."""
    with patch("stackshift.pipeline.load_project_files") as m:
        yield m

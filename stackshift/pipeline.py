# stackshift/pipeline.py

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import typer

from .core.ast_parser import ASTParser
from .core.config import get_settings
from .core.file_utils import create_download_archive, load_project_files
from .core.jobs import ConversionJobRunner, JobEvent, MemoryStore
from .core.language_detector import LanguageDetector
from .core.line_parser import LineByLineParser
from .core.schema import ProjectFile, UIRNode
from .core.stack_converter import TechStackConverter
from .core.stack_schema import FrameworkInfo, TechStack
from .core.transpiler import CSS_EXTENSIONS, JS_EXTENSIONS
from .core.uir_generator import UIRGenerator

logger = logging.getLogger(__name__)

PREFIX = "[stackshift]"


def _fail(message: Any) -> None:
    typer.echo(f"{PREFIX} Error: {message}", err=True)
    raise typer.Exit(code=1)


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _load(path_str: str) -> List[ProjectFile]:
    try:
        files = load_project_files(path_str)
    except (FileNotFoundError, ValueError) as e:
        _fail(e)
    if not files:
        _fail(f"No readable files under {path_str}")
    return files


def _project_name(path_str: str) -> str:
    path = Path(path_str).expanduser().resolve()
    return path.stem if path.suffix else path.name


def _write_archive(output: Path, data: bytes, yes: bool) -> bool:
    if output.exists() and not yes:
        confirm = typer.confirm(f"{output} already exists. Overwrite?", default=False)
        if not confirm:
            typer.echo("  ✗ Aborted.")
            return False
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data)
    typer.echo(f"  ✓ Wrote {output} ({len(data)} bytes)")
    return True


def parse_framework_spec(value: Optional[str]) -> Optional[FrameworkInfo]:
    """'React:typescript' -> {name: 'React', language: 'typescript'}."""
    if not value:
        return None
    name, _, language = value.partition(":")
    if not name.strip() or not language.strip():
        raise ValueError(f"Expected NAME:LANGUAGE, got {value!r}")
    return {"name": name.strip(), "language": language.strip().lower()}


# ---------- analyze ----------

def run_analyze(path_str: str, as_json: bool = False) -> None:
    files = _load(path_str)
    analysis = LanguageDetector().analyze_project(files)

    if as_json:
        _echo_json(analysis)
        return

    typer.echo(f"{PREFIX} {analysis['totalFiles']} files, {analysis['totalLines']} lines")
    for stat in analysis["languages"]:
        typer.echo(f"  - {stat['language']}: {stat['percentage']}% ({stat['files']} files, {stat['purpose']})")
    frameworks = ", ".join(analysis["frameworks"]) or "none detected"
    typer.echo(f"{PREFIX} Frameworks: {frameworks}")


# ---------- convert ----------

def run_convert(
    path_str: str,
    from_framework: str,
    to_framework: Optional[str] = None,
    output: Optional[str] = None,
    generate_tests: bool = False,
    yes: bool = False,
) -> None:
    to_framework = to_framework or get_settings().default_target
    files = _load(path_str)
    name = _project_name(path_str)

    store = MemoryStore()
    project = store.create_project(name, files)
    options = {
        "preserveStructure": True,
        "maintainState": True,
        "addTypeAnnotations": True,
        "convertApiCalls": True,
        "generateTests": generate_tests,
    }
    job = store.create_job(project["id"], from_framework, to_framework, options=options)

    typer.echo(f"{PREFIX} Converting {name}: {from_framework} → {to_framework} ({len(files)} files)")
    runner = ConversionJobRunner(store)

    def on_event(event: JobEvent) -> None:
        typer.echo(f"  [{event.progress:>3}%] {event.stage}")

    runner.subscribe(on_event)
    job = runner.run(job["id"])

    if job["status"] != "completed" or job["result"] is None:
        _fail(job["error"] or f"Conversion ended with status {job['status']}")

    result = job["result"]
    for warning in result["warnings"]:
        typer.echo(f"  ! {warning}")
    for error in result["errors"]:
        typer.echo(f"  ✗ {error}", err=True)

    out_path = Path(output) if output else Path(f"{name}_converted_to_{to_framework}.zip")
    _write_archive(out_path, create_download_archive(result["files"]), yes)


# ---------- convert-stack ----------

def run_convert_stack(
    path_str: str,
    from_frontend: Optional[str],
    to_frontend: Optional[str],
    from_backend: Optional[str] = None,
    to_backend: Optional[str] = None,
    output: Optional[str] = None,
    as_json: bool = False,
    yes: bool = False,
) -> None:
    try:
        current: TechStack = {}
        target: TechStack = {}
        for stack, layer, value in (
            (current, "frontend", from_frontend),
            (current, "backend", from_backend),
            (target, "frontend", to_frontend),
            (target, "backend", to_backend),
        ):
            info = parse_framework_spec(value)
            if info is not None:
                stack[layer] = info
    except ValueError as e:
        _fail(e)

    if not current or not target:
        _fail("Both a current and a target stack are required")

    files = _load(path_str)
    result = TechStackConverter().convert_tech_stack(
        {"projectId": _project_name(path_str), "currentStack": current, "targetStack": target},
        files,
    )

    if as_json:
        _echo_json(result)
    else:
        summary = result["summary"]
        typer.echo(
            f"{PREFIX} {summary['convertedFiles']} files generated from {summary['totalFiles']} "
            f"in {summary['conversionTime']} ms"
        )
        for converted in result["files"]:
            typer.echo(f"  - {converted['newPath']} ({converted['lineCount']} lines)")
        for warning in result["warnings"]:
            typer.echo(f"  ! {warning['file']}: {warning['message']}")

    if not result["success"]:
        _fail("; ".join(e["message"] for e in result["errors"]))

    if output:
        _write_archive(Path(output), create_download_archive(result["files"]), yes)


# ---------- parse ----------

def run_parse(path_str: str, framework: str, mode: str = "line") -> None:
    files = _load(path_str)

    if mode == "line":
        _echo_json(LineByLineParser().parse_project(files, framework))
        return

    if mode != "ast":
        _fail(f"Unknown parse mode {mode!r} (expected 'line' or 'ast')")

    parser = ASTParser()
    generator = UIRGenerator()
    nodes: List[UIRNode] = []
    for f in files:
        if f["path"].endswith(JS_EXTENSIONS):
            ast = parser.parse_javascript(f["content"], f["path"])
        elif f["path"].endswith(CSS_EXTENSIONS):
            ast = parser.parse_css(f["content"], f["path"])
        else:
            continue
        if ast.get("type") == "Error":
            typer.echo(f"  ! {ast.get('name')}", err=True)
            continue
        nodes.extend(generator.generate_uir(ast, f["path"], framework))
    _echo_json(nodes)


# ---------- frameworks ----------

def run_frameworks(category: Optional[str] = None) -> None:
    store = MemoryStore()
    frameworks = store.get_frameworks_by_category(category) if category else store.get_supported_frameworks()
    if not frameworks:
        typer.echo(f"{PREFIX} No frameworks in category {category!r}.")
        return
    for f in frameworks:
        typer.echo(f"  - {f['id']:<12} {f['name']:<12} [{f['category']}] {f['description']}")

# stackshift/cli.py
from __future__ import annotations

import logging
import sys
from typing import Optional

import typer

from .core.config import get_settings
from .pipeline import run_analyze, run_convert, run_convert_stack, run_frameworks, run_parse

app = typer.Typer(help="Detect a project's tech stack and convert it to another framework.")


def _configure_logging(verbose: bool) -> None:
    try:
        level = "DEBUG" if verbose else get_settings().log_level
    except ValueError as e:
        typer.echo(f"[stackshift] Error: {e}", err=True)
        raise typer.Exit(code=1)
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.callback()
def root(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")):
    _configure_logging(verbose)


@app.command()
def analyze(
    path: str = typer.Argument(..., help="Project directory, .zip archive or single file."),
    as_json: bool = typer.Option(False, "--json", help="Print the analysis as JSON."),
):
    """
    Detect languages and frameworks used by a project.
    """
    run_analyze(path, as_json)


@app.command()
def convert(
    path: str = typer.Argument(..., help="Project directory, .zip archive or single file."),
    from_framework: str = typer.Option(..., "--from", help="Source framework, e.g. react."),
    to_framework: Optional[str] = typer.Option(None, "--to", help="Target: flutter, dart, kotlin or typescript."),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="ZIP file to write."),
    generate_tests: bool = typer.Option(False, "--generate-tests", help="Emit a smoke test per component."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Overwrite the output without asking."),
):
    """
    Convert JS/TS components file by file (AST → UIR → target templates) and write a ZIP.
    """
    run_convert(path, from_framework, to_framework, output, generate_tests, yes)


@app.command("convert-stack")
def convert_stack(
    path: str = typer.Argument(..., help="Project directory, .zip archive or single file."),
    from_frontend: Optional[str] = typer.Option(None, "--from-frontend", help="NAME:LANG, e.g. React:javascript."),
    to_frontend: Optional[str] = typer.Option(None, "--to-frontend", help="NAME:LANG, e.g. Flutter:dart."),
    from_backend: Optional[str] = typer.Option(None, "--from-backend", help="NAME:LANG"),
    to_backend: Optional[str] = typer.Option(None, "--to-backend", help="NAME:LANG"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="ZIP file to write."),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Overwrite the output without asking."),
):
    """
    Convert a whole project structure to another stack using the line-oriented parser.
    """
    run_convert_stack(path, from_frontend, to_frontend, from_backend, to_backend, output, as_json, yes)


@app.command()
def parse(
    path: str = typer.Argument(..., help="Project directory, .zip archive or single file."),
    framework: str = typer.Option(..., "--framework", "-f", help="Source framework, e.g. react, vue, angular."),
    mode: str = typer.Option("line", "--mode", help="'line' for the project structure, 'ast' for UIR nodes."),
):
    """
    Dump the parsed project structure (or UIR nodes) as JSON.
    """
    run_parse(path, framework, mode)


@app.command()
def frameworks(
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Filter by category."),
):
    """
    List supported frameworks.
    """
    run_frameworks(category)


def main():
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("\n[stackshift] Interrupted (Ctrl+C)")
        sys.exit(1)


if __name__ == "__main__":
    main()

"""
Command line interface for the workflow SQL compiler.

Works on saved analyses (``WorkflowAnalysisResult`` JSON), so scripts
can be regenerated and reviewed without calling a language model.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from config.settings import get_settings
from dotenv import load_dotenv
from entities.output_validator import validate_output
from entities.shared.protocols import LoggingReporter
from entities.shared.schema_context import load_schema_context
from entities.sql_compiler import compile_workflow
from models import WorkflowAnalysisResult
from pydantic import ValidationError

logger = logging.getLogger(__name__)

app = typer.Typer(help="Compile analyzed workflows into PAWS seed scripts")


def _configure_logging() -> None:
    # force=True prevents duplicate handlers when invoked repeatedly
    logging.basicConfig(level=get_settings().log_level.upper(), force=True)


def _load_analysis(path: Path) -> WorkflowAnalysisResult:
    if not path.is_file():
        typer.secho(f"Analysis file not found: {path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    try:
        return WorkflowAnalysisResult.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        typer.secho(f"Invalid analysis file {path}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@app.callback()
def main_callback() -> None:
    """Workflow SQL compiler."""
    load_dotenv()
    _configure_logging()


@app.command("compile")
def compile_command(
    analysis_file: Path,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the script here"),
) -> None:
    """
    Compile a saved workflow analysis into a seed script.

    The script goes to stdout (or --output); warnings go to stderr.

    Example:
        workflow-sql compile leave-request.json -o leave-request.sql
    """
    analysis = _load_analysis(analysis_file)
    settings = get_settings()
    result = compile_workflow(
        analysis,
        load_schema_context(settings),
        LoggingReporter(logger),
        min_inserts=settings.min_expected_inserts,
    )

    for warning in result.warnings:
        typer.secho(f"warning: {warning}", fg=typer.colors.YELLOW, err=True)

    if not result.success or result.sql is None:
        typer.secho(f"error: {result.error_message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if output is None:
        typer.echo(result.sql, nl=False)
    else:
        output.write_text(result.sql, encoding="utf-8")
        typer.echo(f"Wrote {result.metadata['generated_lines']} lines to {output}", err=True)


@app.command("check")
def check_command(analysis_file: Path) -> None:
    """Report completeness issues in a saved workflow analysis."""
    analysis = _load_analysis(analysis_file)
    typer.echo(analysis.summary())

    issues = analysis.validate_result()
    if not issues:
        typer.echo("No issues found")
        return

    for issue in issues:
        typer.echo(f"- {issue}")
    raise typer.Exit(code=1)


@app.command("lint")
def lint_command(sql_file: Path) -> None:
    """Run the output checks against an existing script."""
    if not sql_file.is_file():
        typer.secho(f"SQL file not found: {sql_file}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    warnings = validate_output(
        sql_file.read_text(encoding="utf-8"),
        get_settings().min_expected_inserts,
    )
    if not warnings:
        typer.echo("No warnings")
        return

    for warning in warnings:
        typer.echo(f"- {warning}")
    raise typer.Exit(code=1)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()

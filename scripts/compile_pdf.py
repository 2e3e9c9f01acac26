#!/usr/bin/env python3
"""
Resume Compilation CLI

Compiles resume markup to PDF through the fallback chain and inspects what
each stage sees.

Commands:
    compile  - Compile a .tex file to PDF with the first working backend
    validate - Run the input checks without compiling
    methods  - Probe which compilation backends are available
    parse    - Show the parsed structure the baseline renderer would draw

Examples:\n

    compile_pdf.py compile resume.tex                        # Writes resume.pdf

    compile_pdf.py compile resume.tex -o out/jane.pdf        # Explicit output path

    compile_pdf.py compile resume.tex --method manual_parse  # Try one backend first

    compile_pdf.py validate resume.tex                       # Check input only

    compile_pdf.py methods                                   # Backend availability
"""

import json
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from texpress.contexts.compilation.exceptions import AllStrategiesFailed
from texpress.contexts.compilation.logger import setup_compilation_logger
from texpress.contexts.compilation.orchestrator import (
    CompilationOrchestrator,
    build_default_strategies,
)
from texpress.contexts.compilation.preview import error_payload
from texpress.contexts.intake.exceptions import InputValidationError
from texpress.contexts.intake.logger import setup_intake_logger
from texpress.contexts.intake.validator import validate_input
from texpress.contexts.parsing.logger import setup_parsing_logger
from texpress.contexts.parsing.parser import parse_document
from texpress.utils.settings import get_settings
from texpress.utils.timestamp import now

load_dotenv()

app = typer.Typer(
    help="Compile resume markup to PDF with automatic backend fallback",
    add_completion=False,
    invoke_without_command=True,
)


def read_markup(path: Path) -> str:
    if not path.exists():
        typer.secho(f"Error: File not found: {path}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return path.read_text(encoding="utf-8")


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("compile")
def compile_command(
    tex_file: Annotated[Path, typer.Argument(help="Resume markup file (.tex)")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output PDF path (default: next to the input)"),
    ] = None,
    method: Annotated[
        Optional[str],
        typer.Option("--method", "-m", help="Backend to try first (see `methods`)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show per-attempt debug output"),
    ] = False,
    save_log: Annotated[
        bool,
        typer.Option("--log", help="Also write a debug log under logging.logs_path"),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the failure payload as JSON on error"),
    ] = False,
):
    """
    Compile a resume to PDF, falling back across backends.

    The output name (without extension) doubles as the document title and
    must match validation.filename_pattern.

    Examples:\n

        $ compile_pdf.py compile resume.tex                   # Default order

        $ compile_pdf.py compile resume.tex -m browser_html   # Prefer Chromium

        $ compile_pdf.py compile resume.tex -v --log          # Debug output + log file
    """
    settings = get_settings()
    log_dir = Path(settings.logging.logs_path) / f"compile_{now()}" if save_log else None
    log_file = setup_compilation_logger(log_dir, console_level="DEBUG" if verbose else "INFO")

    markup = read_markup(tex_file)
    output = output or tex_file.with_suffix(".pdf")

    typer.secho(f"\nCompiling: {tex_file}", fg=typer.colors.BLUE, bold=True)
    typer.echo("")

    orchestrator = CompilationOrchestrator(build_default_strategies(settings), settings)
    try:
        result = orchestrator.compile_to_pdf(markup, output.stem, preferred_method=method)
    except (InputValidationError, AllStrategiesFailed) as e:
        if as_json:
            typer.echo(json.dumps(error_payload(e), indent=2))
        else:
            typer.secho(f"✗ {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.pdf_bytes)

    typer.echo("")
    typer.secho("✓ Compilation succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Method: {result.method_id}")
    typer.echo(f"  Quality tier: {result.quality_tier.value}")
    typer.echo(f"  Pages: {result.page_count if result.page_count is not None else 'unknown'}")
    typer.echo(f"  Size: {result.size_bytes} bytes")
    typer.echo(f"  PDF: {output}")
    if log_file:
        typer.echo(f"  Log: {log_file}")
    typer.echo("")


@app.command("validate")
def validate_command(
    tex_file: Annotated[Path, typer.Argument(help="Resume markup file (.tex)")],
    filename: Annotated[
        Optional[str],
        typer.Option("--filename", "-n", help="Also check this output name"),
    ] = None,
):
    """
    Run size, balance, dangerous-command and filename checks.

    Examples:\n

        $ compile_pdf.py validate resume.tex

        $ compile_pdf.py validate resume.tex -n jane_doe_2025
    """
    setup_intake_logger()
    markup = read_markup(tex_file)
    report = validate_input(markup, filename)

    if report.is_valid:
        typer.secho("\n✓ Input accepted\n", fg=typer.colors.GREEN, bold=True)
        raise typer.Exit(code=0)

    typer.secho(
        f"\n✗ Input rejected with {len(report.violations)} violation(s)",
        fg=typer.colors.RED,
        bold=True,
    )
    for violation in report.violations:
        typer.secho(f"  - [{violation.kind}] {violation.message}", fg=typer.colors.RED)
        if violation.detail:
            typer.echo(f"      {violation.detail}")
    typer.echo("")
    raise typer.Exit(code=1)


@app.command("methods")
def methods_command():
    """
    Probe every backend and show which can run on this machine.

    Examples:\n

        $ compile_pdf.py methods
    """
    orchestrator = CompilationOrchestrator(build_default_strategies())

    typer.secho("\nCompilation backends (in fallback order):", fg=typer.colors.BLUE, bold=True)
    for availability in orchestrator.available_methods():
        label = f"{availability.method_id:<14} {availability.quality_tier.value:<22}"
        if availability.available:
            typer.secho(f"  ✓ {label}", fg=typer.colors.GREEN)
        else:
            typer.secho(f"  ✗ {label} {availability.reason}", fg=typer.colors.YELLOW)
    typer.echo("")


@app.command("parse")
def parse_command(
    tex_file: Annotated[Path, typer.Argument(help="Resume markup file (.tex)")],
    show_content: Annotated[
        bool,
        typer.Option("--content", "-c", help="Print each section's normalized content"),
    ] = False,
    section_title: Annotated[
        Optional[str],
        typer.Option("--section", "-s", help="Show only the section with this title"),
    ] = None,
):
    """
    Show the name, contact fields and sections the structural parser extracts.

    Examples:\n

        $ compile_pdf.py parse resume.tex

        $ compile_pdf.py parse resume.tex --content

        $ compile_pdf.py parse resume.tex -c --section experience
    """
    setup_parsing_logger()
    document = parse_document(read_markup(tex_file))

    sections = document.sections
    if section_title:
        section = document.get_section(section_title)
        if section is None:
            typer.secho(
                f"Error: No section titled {section_title!r}\n", fg=typer.colors.RED, err=True
            )
            raise typer.Exit(code=1)
        sections = (section,)

    typer.echo("\n=== Header ===")
    typer.echo(f"  name: {document.name or '(not found)'}")
    for field_name, value in document.contact.items():
        typer.echo(f"  {field_name}: {value}")

    typer.echo(f"\n=== Sections ({len(sections)} of {len(document.sections)}) ===")
    for section in sections:
        typer.echo(f"  {section.title}: {len(section.lines)} lines, {len(section.content)} chars")
        if show_content:
            for line in section.lines:
                typer.echo(f"      {line}")
    typer.echo("")


if __name__ == "__main__":
    app()

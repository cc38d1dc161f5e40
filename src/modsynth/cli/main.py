"""modsynth CLI - SwiftUI modifier enum generator.

This module provides the command-line interface for modsynth, enabling
generation of merged modifier enums from interface files or signature
manifests, listing and previewing groups, and dry-running call resolution.
"""

from __future__ import annotations

import logging
import traceback
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from modsynth.core.config import get_config
from modsynth.core.models import OperationSignature, StyleCase

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="modsynth",
    help="Generate merged SwiftUI modifier enums from interface files",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

_verbose: bool = False


def set_verbose(verbose: bool) -> None:
    """Set global verbose mode."""
    global _verbose
    _verbose = verbose


def is_verbose() -> bool:
    """Check if verbose mode is enabled."""
    return _verbose


def print_exception(e: Exception) -> None:
    """Print exception details in verbose mode."""
    if _verbose:
        err_console.print("\n[dim]--- Traceback (verbose mode) ---[/dim]")
        err_console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging and full tracebacks"),
    ] = False,
) -> None:
    """modsynth CLI - SwiftUI modifier enum generator."""
    set_verbose(verbose)
    configure_logging(verbose)


def load_input(path: Path) -> tuple[list[OperationSignature], dict[str, set[StyleCase]] | None]:
    """Extract signatures and styles with error handling."""
    from modsynth.adapters import ExtractionError, adapter_for

    adapter = adapter_for(path, get_config().interface_suffix)
    try:
        signatures = adapter.extract(path)
        styles = adapter.discover_styles(path)
    except ExtractionError as e:
        err_console.print(f"[red]Error:[/red] {escape(e.message)}")
        if e.details:
            err_console.print(f"  {escape(e.details)}")
        print_exception(e)
        raise typer.Exit(1)
    return signatures, styles


InputArgument = Annotated[
    Path,
    typer.Argument(help="Interface file, directory of interface files, or .json manifest"),
]


@app.command()
def generate(
    input_path: InputArgument,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output directory (defaults to MODSYNTH_OUTPUT_DIRECTORY)"),
    ] = None,
    clean: Annotated[
        bool,
        typer.Option("--clean", help="Remove existing files from the output directory first"),
    ] = False,
    include_underscored: Annotated[
        bool,
        typer.Option("--include-underscored", help="Also generate underscore-prefixed modifiers"),
    ] = False,
) -> None:
    """Generate one Swift enum file per modifier plus the shared support file.

    Example:
        modsynth generate SwiftUI.swiftinterface -o Generated --clean
    """
    from modsynth.output import FileWriter, OutputError
    from modsynth.services import GenerationService

    config = get_config()
    directory = output or Path(config.output_directory)
    signatures, styles = load_input(input_path)
    console.print(f"[blue]Extracted:[/blue] {len(signatures)} signatures from {input_path}")

    service = GenerationService(config)
    with console.status("[bold blue]Generating..."):
        run = service.run(signatures, styles=styles, include_underscored=include_underscored or None)

    writer = FileWriter()
    try:
        if clean:
            writer.clean(directory)
        result = writer.write_all(run.generated, directory)
    except OutputError as e:
        err_console.print(f"[red]Error:[/red] {escape(e.message)}")
        if e.details:
            err_console.print(f"  {escape(e.details)}")
        print_exception(e)
        raise typer.Exit(1)

    generated = [g for g in run.groups if g.success]
    console.print(f"[green]✓[/green] Generated {len(generated)} modifier types")
    console.print(f"  Output: {directory}")
    console.print(f"  Files written: {result.files_written}")
    if run.skipped:
        console.print(f"  Skipped (underscored): {len(run.skipped)}")
    if run.warnings:
        console.print(f"  [yellow]Warnings: {len(run.warnings)}[/yellow]")
        for warning in run.warnings:
            console.print(f"  [yellow]- {escape(warning)}[/yellow]")
    if run.errors:
        console.print(f"  [yellow]Failed groups: {len(run.errors)}[/yellow]")
        for error in run.errors:
            console.print(f"  [yellow]- {escape(error)}[/yellow]")
    if not result.success:
        err_console.print("[red]Error:[/red] Some files could not be written")
        for error in result.errors:
            err_console.print(f"  - {escape(error)}")
        raise typer.Exit(1)


@app.command("list")
def list_groups(
    input_path: InputArgument,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Maximum rows to show (defaults to MODSYNTH_PREVIEW_LIMIT)"),
    ] = None,
    include_underscored: Annotated[
        bool,
        typer.Option("--include-underscored", help="Also list underscore-prefixed modifiers"),
    ] = False,
) -> None:
    """List modifier groups with their overload counts.

    Example:
        modsynth list SwiftUI.swiftinterface --limit 50
    """
    from modsynth.cli._tables import build_groups_table
    from modsynth.services import GenerationService

    config = get_config()
    signatures, styles = load_input(input_path)
    run = GenerationService(config).run(
        signatures, styles=styles, include_underscored=include_underscored or None
    )

    if not run.groups:
        console.print("[yellow]No modifiers found[/yellow]")
        return

    row_limit = limit or config.preview_limit
    console.print(build_groups_table(run.groups, limit=row_limit))
    if len(run.groups) > row_limit:
        console.print(f"[dim]... and {len(run.groups) - row_limit} more. Use --limit to see more.[/dim]")


@app.command()
def show(
    input_path: InputArgument,
    name: Annotated[str, typer.Argument(help="Modifier name, e.g. padding")],
) -> None:
    """Print the generated Swift source for one modifier.

    Example:
        modsynth show SwiftUI.swiftinterface padding
    """
    from modsynth.generator import GenerationError
    from modsynth.services import GenerationService

    signatures, styles = load_input(input_path)
    members = [s for s in signatures if s.name == name]
    if not members:
        err_console.print(f"[red]Error:[/red] Modifier not found: {escape(name)}")
        raise typer.Exit(1)

    generator = GenerationService(get_config()).generator(styles)
    try:
        code = generator.generate(generator.type_name_for(name), members)
    except GenerationError as e:
        err_console.print(f"[red]Error:[/red] {escape(e.message)}")
        if e.details:
            err_console.print(f"  {escape(e.details)}")
        print_exception(e)
        raise typer.Exit(1)

    typer.echo(code.source_code, nl=False)


@app.command()
def resolve(
    input_path: InputArgument,
    call: Annotated[str, typer.Argument(help="Call expression, e.g. 'padding(.top, 8)'")],
    platform: Annotated[
        str,
        typer.Option("--platform", help="Target platform for availability checks"),
    ] = "iOS",
    os_version: Annotated[
        Optional[str],
        typer.Option("--os-version", help="Platform version (newest when omitted)"),
    ] = None,
    flags: Annotated[
        Optional[list[str]],
        typer.Option("--flag", help="Compile-time condition to treat as set (repeatable)"),
    ] = None,
) -> None:
    """Resolve a call expression to a variant and show the forwarded call.

    Example:
        modsynth resolve SwiftUI.swiftinterface "padding(.horizontal, 8)" --os-version 15.0
    """
    from modsynth.cli._tables import build_arguments_table
    from modsynth.generator import CallSyntaxError, Environment, GenerationError, ResolutionError
    from modsynth.services import GenerationService

    signatures, styles = load_input(input_path)
    environment = Environment(platform=platform, version=os_version, flags=frozenset(flags or ()))

    try:
        result = GenerationService(get_config()).resolve(
            signatures, call, environment=environment, styles=styles
        )
    except (CallSyntaxError, GenerationError, ResolutionError) as e:
        err_console.print(f"[red]Error:[/red] {escape(e.message)}")
        if e.details:
            err_console.print(f"  {escape(e.details)}")
        print_exception(e)
        raise typer.Exit(1)

    console.print(f"[blue]Type:[/blue] {result.type_name}")
    console.print(f"[blue]Variant:[/blue] [cyan]{result.variant_name}[/cyan]")
    if result.resolution.arguments:
        console.print(build_arguments_table(result.resolution))
    console.print(f"[blue]Value:[/blue] {escape(result.resolution.case_expression())}")
    console.print(f"[blue]Forwards to:[/blue] {escape(result.forwarded)}")


if __name__ == "__main__":
    app()

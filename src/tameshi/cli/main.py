"""
Tameshi CLI

Command-line interface for checking properties outside of a test runner.

Usage:
    tameshi check pkg.module:prop_name      Check a property or annotated predicate
    tameshi check pkg.module:prop --seed 42 Replay a run
    tameshi sample pkg.module:gen_name      Show values a generator produces
    tameshi config                          Show effective settings
"""

import importlib
import logging
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tameshi import __version__
from tameshi.check import Gen, Property, SizeRamp, print_report, quick_check, sample as sample_gen
from tameshi.check.errors import GeneratorMisuseError
from tameshi.constants import RUN_SIZE_MAX_DEFAULT
from tameshi.core.config import get_settings

# Create the main app
app = typer.Typer(
    name="tameshi",
    help="Tameshi (試し) - Property-based testing",
    add_completion=False,
)

# Console for rich output
console = Console()


def _load(target: str) -> Any:
    """Import 'package.module:attribute' and return the attribute."""
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        console.print(f"[red]✗[/red] Target must look like [cyan]package.module:name[/cyan], got {escape(target)}")
        raise typer.Exit(code=2)
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        console.print(f"[red]✗[/red] Cannot import {escape(module_name)}: {escape(str(e))}")
        raise typer.Exit(code=2)
    try:
        return getattr(module, attribute)
    except AttributeError:
        console.print(f"[red]✗[/red] {escape(module_name)} has no attribute {escape(attribute)}")
        raise typer.Exit(code=2)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log seeds and shrink steps"),
) -> None:
    """Tameshi (試し) - Property-based testing."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Commands
# =============================================================================


@app.command()
def check(
    target: str = typer.Argument(..., help="package.module:name of a Property or annotated predicate"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Replay with this seed"),
    max_success: Optional[int] = typer.Option(None, "--max-success", "-n", help="Passing trials required"),
    max_size: Optional[int] = typer.Option(None, "--max-size", help="Largest generation size"),
    max_discard_ratio: Optional[float] = typer.Option(None, "--max-discard-ratio", help="Share of trials that may be discarded, in [0, 1)"),
    size_ramp: Optional[SizeRamp] = typer.Option(None, "--size-ramp", help="Size curve"),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    """Check a property and print the report.

    Exits with 1 when the property is falsified and 3 when the run gave up.
    """
    obj = _load(target)
    if not isinstance(obj, Property) and not callable(obj):
        console.print(f"[red]✗[/red] {escape(target)} is neither a Property nor a predicate")
        raise typer.Exit(code=2)
    try:
        prop = obj if isinstance(obj, Property) else Property.from_predicate(obj)
        report = quick_check(
            prop,
            seed=seed,
            max_success=max_success,
            max_size=max_size,
            max_discard_ratio=max_discard_ratio,
            size_ramp=size_ramp,
        )
    except GeneratorMisuseError as e:
        console.print(f"[red]✗ Generator misuse:[/red] {escape(str(e))}")
        raise typer.Exit(code=2)

    if json_output:
        typer.echo(report.model_dump_json(indent=2))
    else:
        print_report(report, console)

    if report.falsified:
        raise typer.Exit(code=1)
    if report.gave_up:
        raise typer.Exit(code=3)


@app.command()
def sample(
    target: str = typer.Argument(..., help="package.module:name of a Gen"),
    count: int = typer.Option(10, "--count", "-c", help="Number of values"),
    size: int = typer.Option(RUN_SIZE_MAX_DEFAULT, "--size", help="Size reached by the last value"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Seed for the sample"),
) -> None:
    """Print values produced by a generator, smallest size first."""
    obj = _load(target)
    if not isinstance(obj, Gen):
        console.print(f"[red]✗[/red] {escape(target)} is not a Gen")
        raise typer.Exit(code=2)

    for value in sample_gen(obj, count=count, size=size, seed=seed):
        console.print(escape(repr(value)))


@app.command()
def config() -> None:
    """Show the effective TAMESHI_* settings."""
    settings = get_settings()

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Environment", style="dim")

    for name, value in settings.model_dump().items():
        table.add_row(name, "[dim]unset[/dim]" if value is None else str(value), f"TAMESHI_{name.upper()}")

    console.print()
    console.print(Panel.fit(f"[bold blue]Tameshi (試し)[/bold blue] [dim]v{__version__}[/dim]", border_style="blue"))
    console.print(table)
    console.print()


def main() -> None:
    """Entry point for the tameshi command."""
    app()


if __name__ == "__main__":
    main()

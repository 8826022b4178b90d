"""
Report Rendering

Plain-text and rich renderings of a RunReport. The plain form is what
str(report) and the raised errors carry; the rich form is what the CLI
prints.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tameshi.constants import REPORT_LABELS_COUNT_MAX, REPORT_VALUE_CHARS_MAX
from tameshi.core.models import RunReport, Verdict


def _show(value: Any) -> str:
    text = repr(value)
    if len(text) > REPORT_VALUE_CHARS_MAX:
        return text[:REPORT_VALUE_CHARS_MAX] + "..."
    return text


def _histogram_lines(report: RunReport) -> list[str]:
    rows = list(report.percentages().items())[:REPORT_LABELS_COUNT_MAX]
    return [f"{percent:5.1f}% {label}" for label, percent in rows]


def format_report(report: RunReport) -> str:
    """Render a report as plain text."""
    if report.verdict is Verdict.SUCCESS:
        lines = [f"+++ OK, {report.property_name} passed {report.passed} tests (seed={report.seed})."]
        if report.discarded:
            lines[0] = lines[0][:-1] + f"; {report.discarded} discarded."
        lines.extend(_histogram_lines(report))
        return "\n".join(lines)

    if report.verdict is Verdict.FAILURE:
        example = report.counterexample
        assert example is not None, "a failure report carries a counterexample"
        lines = [
            f"*** Failed! {report.property_name} falsified after {report.trials_run} tests "
            f"and {example.shrink_steps} shrinks (seed={report.seed}).",
            f"Original: {_show(example.original)}",
            f"Shrunk:   {_show(example.shrunk)}",
        ]
        if example.reason:
            lines.append(f"Reason:   {example.reason}")
        if example.shrink_exhausted:
            lines.append(f"Shrinking stopped after {example.shrink_attempts} attempts; the result may not be minimal.")
        lines.append(f"Replay with seed={report.seed}")
        return "\n".join(lines)

    return "\n".join([
        f"*** Gave up! {report.property_name}: {report.passed} passed, {report.discarded} discarded "
        f"in {report.trials_run} trials (seed={report.seed}).",
        f"Reason: {report.gave_up_reason}",
        f"Threshold: discards / trials > max_discard_ratio={report.max_discard_ratio} "
        f"(observed {report.discarded}/{report.trials_run})",
    ])


def print_report(report: RunReport, console: Console | None = None) -> None:
    """Print a report with rich formatting."""
    console = console or Console()

    if report.verdict is Verdict.SUCCESS:
        console.print(
            f"[green]✓[/green] [bold]{escape(report.property_name)}[/bold] passed {report.passed} tests "
            f"[dim](seed={report.seed}, {report.discarded} discarded)[/dim]"
        )
        percentages = report.percentages()
        if percentages:
            table = Table(title="Labels")
            table.add_column("Label", style="cyan")
            table.add_column("Trials", justify="right")
            table.add_column("Share", justify="right", style="green")
            for label, percent in list(percentages.items())[:REPORT_LABELS_COUNT_MAX]:
                table.add_row(escape(label), str(report.statistics[label]), f"{percent:.1f}%")
            console.print(table)
        return

    if report.verdict is Verdict.FAILURE:
        example = report.counterexample
        assert example is not None, "a failure report carries a counterexample"
        # Values are user data, never markup
        body = (
            f"[bold]Original:[/bold] {escape(_show(example.original))}\n"
            f"[bold]Shrunk:[/bold]   {escape(_show(example.shrunk))}\n"
            f"[bold]Reason:[/bold]   {escape(example.reason or '-')}\n"
            f"[dim]{report.trials_run} tests, {example.shrink_steps} shrinks, "
            f"{example.shrink_attempts} shrink attempts[/dim]\n"
            f"Replay with [cyan]--seed {report.seed}[/cyan]"
        )
        console.print(
            Panel.fit(
                body,
                title=f"[bold red]✗ {escape(report.property_name)} falsified[/bold red]",
                border_style="red",
            )
        )
        return

    console.print(
        Panel.fit(
            f"{report.passed} passed, {report.discarded} discarded in {report.trials_run} trials\n"
            f"{escape(report.gave_up_reason or '')}\n"
            f"[dim]seed={report.seed}[/dim]",
            title=f"[bold yellow]○ {escape(report.property_name)} gave up[/bold yellow]",
            border_style="yellow",
        )
    )

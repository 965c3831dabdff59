"""Command-line interface for climatestats."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from climatestats.aggregation import Aggregator, aggregate_paths
from climatestats.logging_config import configure_logging
from climatestats.models import FileFailure, RunSummary
from climatestats.quality import QualityChecker
from climatestats.report import render_report, render_table

app = typer.Typer(
    name="climatestats",
    help="Per-state summaries of NOAA tab-delimited climate data",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose)
    ctx.obj = {"verbose": verbose}


def _print_open(source: str) -> None:
    console.print(f"Opening file: {source}", markup=False, highlight=False, soft_wrap=True)


def _print_failure(failure: FileFailure) -> None:
    verb = "opening" if failure.kind == "open" else "reading"
    err_console.print(
        f"Error {verb} file {failure.source}: {failure.reason}",
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _ingest(
    ctx: typer.Context, files: list[Path], workers: int
) -> tuple[Aggregator, RunSummary]:
    verbose = bool((ctx.obj or {}).get("verbose", False))
    return aggregate_paths(
        files,
        workers=workers,
        verbose=verbose,
        on_open=_print_open,
        on_failure=_print_failure,
    )


@app.command()
def report(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(..., help="TDV files to analyze"),
    workers: int = typer.Option(1, "--workers", "-w", min=1, help="Worker processes"),
    utc: bool = typer.Option(False, "--utc/--local", help="Show timestamps in UTC"),
    table: bool = typer.Option(False, "--table", help="Also print a summary table"),
) -> None:
    """Summarize climate statistics per state."""
    aggregator, _summary = _ingest(ctx, files, workers)

    render_report(aggregator.states, console, utc=utc)

    if table and len(aggregator):
        console.print()
        render_table(aggregator.states, console)


@app.command()
def quality(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(..., help="TDV files to check"),
    workers: int = typer.Option(1, "--workers", "-w", min=1, help="Worker processes"),
) -> None:
    """Run data quality checks over an ingestion."""
    console.print("[bold blue]Running quality checks...[/bold blue]")

    aggregator, summary = _ingest(ctx, files, workers)
    results = QualityChecker().check_run(summary, aggregator)

    # Display results table
    table = Table(title="Quality Check Results")
    table.add_column("Check", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("Message")

    for result in results:
        status_style = {
            "pass": "[green]PASS[/green]",
            "warn": "[yellow]WARN[/yellow]",
            "fail": "[red]FAIL[/red]",
        }
        table.add_row(
            result.check_name,
            status_style.get(result.status.value, result.status.value),
            result.message,
        )

    console.print(table)

    passed = sum(1 for r in results if r.status.value == "pass")
    console.print(f"\n[bold]{passed}/{len(results)} checks passed[/bold]")


if __name__ == "__main__":
    app()

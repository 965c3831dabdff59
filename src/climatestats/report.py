"""Console rendering of per-state climate summaries."""

from collections.abc import Iterable
from datetime import datetime, timezone

from rich.console import Console
from rich.table import Table

from climatestats.models import StateAggregate

SEPARATOR = "-" * 27


def format_timestamp(timestamp: int, utc: bool = False) -> str:
    """Render unix seconds in ctime form, e.g. 'Mon Apr  6 06:00:00 2015'."""
    if utc:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).ctime()
    return datetime.fromtimestamp(timestamp).ctime()


def format_count(value: float) -> str:
    # Lightning flags are floats in the source; show whole totals without decimals
    if value.is_integer():
        return f"{int(value)}"
    return f"{value:.1f}"


def summary_lines(state: StateAggregate, utc: bool = False) -> list[str]:
    """Text lines describing one state's statistics."""
    return [
        f"-- State: {state.code} --",
        f"Number of Records: {state.record_count}",
        f"Average Humidity: {state.avg_humidity:.1f}%",
        f"Average Temperature: {state.avg_temperature:.1f}F",
        f"Max Temperature: {state.max_temp:.1f}F on "
        f"{format_timestamp(state.max_temp_timestamp, utc)}",
        f"Min Temperature: {state.min_temp:.1f}F on "
        f"{format_timestamp(state.min_temp_timestamp, utc)}",
        f"Lightning Strikes: {format_count(state.lightning_count)}",
        f"Records with Snow Cover: {state.snow_count}",
        f"Average Cloud Cover: {state.avg_cloud_cover:.1f}%",
        SEPARATOR,
    ]


def render_report(
    states: Iterable[StateAggregate], console: Console, utc: bool = False
) -> None:
    """Print the state list followed by each state's summary."""
    states = list(states)
    console.print(
        "States found: " + " ".join(s.code for s in states),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )
    for state in states:
        for line in summary_lines(state, utc):
            console.print(line, markup=False, highlight=False, soft_wrap=True)


def render_table(states: Iterable[StateAggregate], console: Console) -> None:
    table = Table(title="Climate Summary by State")
    table.add_column("State", style="cyan")
    table.add_column("Records", justify="right")
    table.add_column("Avg Humidity", justify="right")
    table.add_column("Avg Temp", justify="right", style="bold")
    table.add_column("Max Temp", justify="right", style="red")
    table.add_column("Min Temp", justify="right", style="blue")
    table.add_column("Lightning", justify="right")
    table.add_column("Snow", justify="right")
    table.add_column("Avg Cloud", justify="right")

    for s in states:
        table.add_row(
            s.code,
            f"{s.record_count:,}",
            f"{s.avg_humidity:.1f}%",
            f"{s.avg_temperature:.1f}F",
            f"{s.max_temp:.1f}F",
            f"{s.min_temp:.1f}F",
            format_count(s.lightning_count),
            f"{s.snow_count:,}",
            f"{s.avg_cloud_cover:.1f}%",
        )

    console.print(table)

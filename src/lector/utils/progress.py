"""Console progress reporting for extraction runs, using Rich."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console(stderr=True)


def set_quiet(quiet: bool) -> None:
    """Silence everything except errors."""
    console.quiet = quiet


def log_step(step: str, message: str) -> None:
    """Log a timestamped pipeline step."""
    ts = datetime.now().strftime("%H:%M:%S")
    console.print(
        f"[dim]\\[{ts}][/dim] [bold cyan]{step}[/bold cyan] {message}",
        highlight=False,
    )


def log_saved(path: Path | str, samples: int, sample_rate: int) -> None:
    """Log a written output with its length in samples and seconds."""
    seconds = samples / sample_rate
    log_step("Save", f"[green]✓[/green] {Path(path).name}: {samples} samples ({seconds:.2f}s)")


def log_error(message: str) -> None:
    # Errors bypass quiet mode
    was_quiet = console.quiet
    console.quiet = False
    try:
        ts = datetime.now().strftime("%H:%M:%S")
        console.print(f"[dim]\\[{ts}][/dim] [red]✗[/red] {message}", highlight=False)
    finally:
        console.quiet = was_quiet


def show_run_summary(rows: dict[str, str], duration_seconds: float) -> None:
    """Show the end-of-run panel: lag, alpha, policies, timing."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()

    for key, value in rows.items():
        table.add_row(key, value)
    table.add_row("Duration", f"{duration_seconds:.2f}s")

    console.print(Panel(table, title="[bold]Extraction Complete[/bold]", border_style="green"))

import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from appwand.types import ProcessInfo

# Global console for UI functions
_console = Console()

# Plain output without tables (e.g., when piping into other tools)
_use_simple_ui = os.getenv("APPWAND_SIMPLE_UI") == "1"


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def render_apps_table(apps: list[str], state: str):
    if _use_simple_ui:
        for app in apps:
            _console.print(app, markup=False, highlight=False)
        return

    table = Table()

    table.add_column("Package Full Name", style="cyan", no_wrap=True)
    table.add_column("State", style="green")

    for app in apps:
        table.add_row(app, state)

    _console.print(table)


def render_processes_table(processes: list[ProcessInfo]):
    table = Table()

    table.add_column("PID", style="cyan", no_wrap=True, justify="right")
    table.add_column("Package", style="blue", no_wrap=False)
    table.add_column("Image", style="white")
    table.add_column("State", style="green", width=9)

    for proc in processes:
        state = "running" if proc.is_running else "[yellow]suspended[/yellow]"
        table.add_row(
            str(proc.process_id),
            proc.package_full_name or "[dim]-[/dim]",
            proc.image_name,
            state,
        )

    _console.print(table)


def print_success(message: str, prefix: str = "✅"):
    """Print a success message."""
    _console.print(f"[green]{prefix}[/green] {message}")


def print_info(message: str, prefix: str = "ℹ️"):
    """Print an info message."""
    _console.print(f"[blue]{prefix}[/blue]  {message}")


def print_step(message: str, prefix: str = "🔧"):
    """Print a step/progress message."""
    _console.print(f"[cyan]{prefix}[/cyan] {message}")

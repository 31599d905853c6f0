"""Console output for the shellpath CLI."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shellpath.types import MAX_INT64

if TYPE_CHECKING:
    from shellpath.protocols import PathEntity


def format_size(size: int) -> str:
    """Format a byte count, or "unknown" for the sentinel value."""
    if size == MAX_INT64:
        return "unknown"
    return f"{size:,}"


def format_time(millis: int) -> str:
    """Format epoch milliseconds in local time, or "unknown" for 0."""
    if millis <= 0:
        return "unknown"
    return datetime.fromtimestamp(millis / 1000).isoformat(sep=" ", timespec="seconds")


def describe_type(entity: PathEntity) -> str:
    """Name the kind of filesystem object at a path."""
    if entity.is_symlink():
        return "symlink"
    if entity.is_dir():
        return "directory"
    if entity.is_file():
        return "file"
    if entity.is_block():
        return "block device"
    if entity.is_character():
        return "character device"
    return "other"


class ConsoleOutput:
    """Text output for shellpath commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize console output.

        Args:
            console: Rich console to print to. Defaults to stdout.
        """
        self.console = console or Console()

    def show_success(self, message: str) -> None:
        """Show success message.

        Args:
            message: Success message.
        """
        self.console.print(f"[green]✓[/green] {message}")

    def show_error(self, message: str) -> None:
        """Show error message.

        Args:
            message: Error message.
        """
        self.console.print(f"[red]✗[/red] {message}")

    def show_warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def show_info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def show_path_info(self, entity: PathEntity) -> None:
        """Display attributes of a path.

        Args:
            entity: Existing path to describe.
        """
        table = Table(title=escape(entity.path), show_header=False)
        table.add_column("Attribute", style="cyan")
        table.add_column("Value")

        table.add_row("Type", describe_type(entity))
        table.add_row("Canonical", escape(entity.canonical_path()))
        table.add_row("Size", format_size(entity.length()))
        table.add_row("Modified", format_time(entity.last_modified()))
        table.add_row(
            "Access",
            "".join(
                flag if allowed else "-"
                for flag, allowed in (
                    ("r", entity.can_read()),
                    ("w", entity.can_write()),
                    ("x", entity.can_execute()),
                )
            ),
        )

        self.console.print(table)

    def show_entries(self, directory: str, names: list[str]) -> None:
        """Display directory entry names.

        Args:
            directory: Listed directory.
            names: Entry names.
        """
        if not names:
            self.console.print(f"[yellow]{escape(directory)} is empty[/yellow]")
            return
        for name in names:
            self.console.print(name, markup=False, highlight=False)

    def show_entries_long(self, directory: str, children: list[PathEntity]) -> None:
        """Display directory entries with type and size.

        Args:
            directory: Listed directory.
            children: Child paths.
        """
        if not children:
            self.console.print(f"[yellow]{escape(directory)} is empty[/yellow]")
            return

        table = Table(title=escape(directory))
        table.add_column("Name", style="cyan")
        table.add_column("Type")
        table.add_column("Size", justify="right")

        for child in children:
            table.add_row(escape(child.name), describe_type(child), format_size(child.length()))

        self.console.print(table)

    def show_space(self, entity: PathEntity) -> None:
        """Display partition space for a path.

        Args:
            entity: Path on the partition.
        """
        table = Table(title=f"Partition of {escape(entity.path)}")
        table.add_column("Total", justify="right")
        table.add_column("Free", justify="right")
        table.add_column("Usable", justify="right")
        table.add_row(
            format_size(entity.total_space()),
            format_size(entity.free_space()),
            format_size(entity.usable_space()),
        )
        self.console.print(table)

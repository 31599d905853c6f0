"""CLI commands using Typer."""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, NoReturn

if TYPE_CHECKING:
    from shellpath.context import PathContext
    from shellpath.protocols import PathEntity

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from shellpath import __version__
from shellpath.config import ShellConfig, load_config
from shellpath.console import ConsoleOutput
from shellpath.context import create_context, open_path
from shellpath.permissions import PermissionBit
from shellpath.types import ShellPathError

app = typer.Typer(
    name="shellpath",
    help="Inspect and modify files through shell commands",
    no_args_is_help=True,
)

console = Console()
output = ConsoleOutput(console)

# Global options set by the app callback
_config_file: Path | None = None

_MODE_PATTERN = re.compile(r"^([+-])([rwx]+)$")
_MODE_BITS = {
    "r": PermissionBit.READ,
    "w": PermissionBit.WRITE,
    "x": PermissionBit.EXECUTE,
}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"shellpath v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log executed commands")
    ] = False,
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Configuration file (YAML)")
    ] = None,
) -> None:
    """Inspect and modify files through shell commands."""
    global _config_file
    _config_file = config
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


# ============================================================================
# Helpers
# ============================================================================


def _fail(message: str) -> NoReturn:
    """Show an error and exit with status 1."""
    output.show_error(message)
    raise typer.Exit(1)


def _load_config() -> ShellConfig:
    """Load the configuration selected on the command line."""
    try:
        if _config_file is not None:
            return ShellConfig.from_file(_config_file)
        return load_config()
    except (FileNotFoundError, ValueError) as e:
        _fail(f"Invalid configuration: {escape(str(e))}")


def _get_context(context: PathContext | None) -> PathContext:
    """Return the injected context or create one from configuration."""
    if context is not None:
        return context
    try:
        return create_context(_load_config())
    except ShellPathError as e:
        _fail(f"Cannot start shell: {escape(str(e))}")


def _open(ctx: PathContext, path: str) -> PathEntity:
    """Open a path, exiting on invalid input."""
    try:
        return open_path(path, ctx)
    except ValueError as e:
        _fail(escape(str(e)))


def _parse_mode(mode: str) -> tuple[bool, list[PermissionBit]]:
    """Parse a symbolic mode such as ``+x`` or ``-rw``.

    Args:
        mode: Sign followed by one or more of r, w and x.

    Returns:
        Tuple of (enable, bits).

    Raises:
        typer.Exit: If the mode is malformed.
    """
    match = _MODE_PATTERN.match(mode)
    if not match:
        _fail(f"Invalid mode '{escape(mode)}'. Use +/- followed by r, w or x (e.g. +x, -rw)")
    enable = match.group(1) == "+"
    return enable, [_MODE_BITS[flag] for flag in match.group(2)]


def _apply_permission(entity: PathEntity, bit: PermissionBit, enable: bool, owner_only: bool) -> bool:
    """Toggle one permission bit on a path."""
    if bit is PermissionBit.READ:
        return entity.set_readable(enable, owner_only)
    if bit is PermissionBit.WRITE:
        return entity.set_writable(enable, owner_only)
    return entity.set_executable(enable, owner_only)


# ============================================================================
# Query Commands
# ============================================================================


@app.command()
def info(
    path: Annotated[str, typer.Argument(help="Path to describe")],
    _context=None,
) -> None:
    """Show type, size, times and access of a path."""
    ctx = _get_context(_context)
    entity = _open(ctx, path)

    try:
        if not entity.exists():
            _fail(f"'{escape(entity.path)}' does not exist")
        output.show_path_info(entity)
    except ShellPathError as e:
        _fail(f"Command failed: {escape(str(e))}")


@app.command("ls")
def list_directory(
    path: Annotated[str, typer.Argument(help="Directory to list")],
    long: Annotated[bool, typer.Option("--long", "-l", help="Show type and size")] = False,
    _context=None,
) -> None:
    """List directory entries."""
    ctx = _get_context(_context)
    entity = _open(ctx, path)

    try:
        if long:
            children = entity.list_files()
            if children is None:
                _fail(f"'{escape(entity.path)}' is not a directory")
            output.show_entries_long(entity.path, children)
        else:
            names = entity.list()
            if names is None:
                _fail(f"'{escape(entity.path)}' is not a directory")
            output.show_entries(entity.path, names)
    except ShellPathError as e:
        _fail(f"Command failed: {escape(str(e))}")


@app.command()
def df(
    path: Annotated[str, typer.Argument(help="Path on the partition")] = "/",
    _context=None,
) -> None:
    """Show total, free and usable space of a partition."""
    ctx = _get_context(_context)
    entity = _open(ctx, path)

    try:
        output.show_space(entity)
    except ShellPathError as e:
        _fail(f"Command failed: {escape(str(e))}")


# ============================================================================
# Mutation Commands
# ============================================================================


@app.command()
def touch(
    path: Annotated[str, typer.Argument(help="File to create or update")],
    timestamp: Annotated[
        int | None,
        typer.Option("--time", "-t", help="Modification time in epoch milliseconds"),
    ] = None,
    _context=None,
) -> None:
    """Create a file if missing and set its modification time."""
    ctx = _get_context(_context)
    entity = _open(ctx, path)
    millis = timestamp if timestamp is not None else int(time.time() * 1000)

    try:
        if not entity.exists() and not entity.create_new_file():
            _fail(f"Cannot create '{escape(entity.path)}'")
        if not entity.set_last_modified(millis):
            _fail(f"Cannot set modification time of '{escape(entity.path)}'")
    except ValueError as e:
        _fail(escape(str(e)))
    except ShellPathError as e:
        _fail(f"Command failed: {escape(str(e))}")
    output.show_success(f"Touched '{escape(entity.path)}'")


@app.command()
def mkdir(
    path: Annotated[str, typer.Argument(help="Directory to create")],
    parents: Annotated[
        bool, typer.Option("--parents", "-p", help="Create missing parent directories")
    ] = False,
    _context=None,
) -> None:
    """Create a directory."""
    ctx = _get_context(_context)
    entity = _open(ctx, path)

    try:
        created = entity.mkdirs() if parents else entity.mkdir()
    except ShellPathError as e:
        _fail(f"Command failed: {escape(str(e))}")
    if not created:
        _fail(f"Cannot create directory '{escape(entity.path)}'")
    output.show_success(f"Created '{escape(entity.path)}'")


@app.command()
def rm(
    path: Annotated[str, typer.Argument(help="Path to delete")],
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="Delete directories and their contents")
    ] = False,
    _context=None,
) -> None:
    """Delete a file or an empty directory."""
    ctx = _get_context(_context)
    entity = _open(ctx, path)

    try:
        deleted = entity.delete_recursive() if recursive else entity.delete()
    except ShellPathError as e:
        _fail(f"Command failed: {escape(str(e))}")
    if not deleted:
        _fail(f"Cannot delete '{escape(entity.path)}'")
    output.show_success(f"Deleted '{escape(entity.path)}'")


@app.command()
def mv(
    source: Annotated[str, typer.Argument(help="Path to move")],
    destination: Annotated[str, typer.Argument(help="New path")],
    _context=None,
) -> None:
    """Move or rename a path, replacing an existing file."""
    ctx = _get_context(_context)
    src = _open(ctx, source)
    dst = _open(ctx, destination)

    try:
        moved = src.rename_to(dst)
    except ShellPathError as e:
        _fail(f"Command failed: {escape(str(e))}")
    if not moved:
        _fail(f"Cannot move '{escape(src.path)}' to '{escape(dst.path)}'")
    output.show_success(f"Moved '{escape(src.path)}' to '{escape(dst.path)}'")


@app.command()
def truncate(
    path: Annotated[str, typer.Argument(help="File to empty")],
    _context=None,
) -> None:
    """Truncate a file to zero length, creating it if missing."""
    ctx = _get_context(_context)
    entity = _open(ctx, path)

    try:
        cleared = entity.clear()
    except ShellPathError as e:
        _fail(f"Command failed: {escape(str(e))}")
    if not cleared:
        _fail(f"Cannot truncate '{escape(entity.path)}'")
    output.show_success(f"Truncated '{escape(entity.path)}'")


@app.command()
def chmod(
    path: Annotated[str, typer.Argument(help="Path to change")],
    mode: Annotated[str, typer.Argument(help="Permission change such as +x or -rw")],
    owner_only: Annotated[
        bool, typer.Option("--owner-only", "-o", help="Grant to the owner only")
    ] = False,
    _context=None,
) -> None:
    """Set or clear read, write or execute permission."""
    enable, bits = _parse_mode(mode)
    ctx = _get_context(_context)
    entity = _open(ctx, path)

    try:
        for bit in bits:
            if not _apply_permission(entity, bit, enable, owner_only):
                _fail(f"Cannot change permissions of '{escape(entity.path)}'")
    except ShellPathError as e:
        _fail(f"Command failed: {escape(str(e))}")
    output.show_success(f"Changed permissions of '{escape(entity.path)}'")

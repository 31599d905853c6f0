"""Protocol definitions for core abstractions.

This module defines abstract interfaces (Protocols) for the collaborators
of a shell-backed path and for the path surface itself. Designing to
interfaces enables:
- Loose coupling between path objects and how commands are executed
- Easy substitution of test doubles
- A capability-limited path interface instead of a native path subclass

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Protocol, runtime_checkable

__all__ = [
    "ArgvExecutionPort",
    "ExecutionPort",
    "NameFilter",
    "PathEntity",
    "PathFilter",
    "PrivilegeProbe",
]


@runtime_checkable
class ExecutionPort(Protocol):
    """Protocol for running shell command lines.

    Implementations hand one line of shell syntax to a command interpreter.
    Command failure is never an exception; it is a False result or empty
    output.
    """

    def run_text(self, line: str) -> str:
        """Execute a line and capture its standard output.

        Args:
            line: Shell command line.

        Returns:
            Standard output with the trailing newline stripped, or an empty
            string when there was no output.
        """
        ...

    def run_bool(self, line: str) -> bool:
        """Execute a line and report whether it succeeded.

        Args:
            line: Shell command line.

        Returns:
            True if the interpreter reported a zero exit status.
        """
        ...


@runtime_checkable
class ArgvExecutionPort(Protocol):
    """Protocol for executors that also accept argument vectors.

    Argument vectors are passed to the program without any shell
    interpretation, so paths in them are never escaped.
    """

    def run_argv_text(self, argv: list[str]) -> str:
        """Execute an argument vector and capture its standard output.

        Args:
            argv: Program name followed by its arguments.

        Returns:
            Standard output with the trailing newline stripped.
        """
        ...

    def run_argv_bool(self, argv: list[str]) -> bool:
        """Execute an argument vector and report whether it succeeded.

        Args:
            argv: Program name followed by its arguments.

        Returns:
            True if the program exited with status zero.
        """
        ...


@runtime_checkable
class PrivilegeProbe(Protocol):
    """Protocol for checking whether commands run with elevated privilege."""

    def has_privileged_access(self) -> bool:
        """Check whether the interpreter runs as a privileged user.

        Returns:
            True if privileged, False otherwise.
        """
        ...


NameFilter = Callable[["PathEntity", str], bool]
PathFilter = Callable[["PathEntity"], bool]


@runtime_checkable
class PathEntity(Protocol):
    """Protocol for a filesystem path with attribute queries and mutations.

    Only the operations that make sense for command-backed access are part
    of this interface. Query failures resolve to fallback values and
    mutation failures to False; neither raises.
    """

    @property
    def path(self) -> str:
        """Normalized absolute path."""
        ...

    @property
    def name(self) -> str:
        """Final path component."""
        ...

    @property
    def parent(self) -> PathEntity | None:
        """Parent path, or None at the filesystem root."""
        ...

    def absolute_path(self) -> str: ...

    def canonical_path(self) -> str:
        """Resolve symlinks and relative components.

        Returns:
            The canonical path, or the path unchanged if it cannot be
            resolved.
        """
        ...

    def canonical(self) -> PathEntity: ...

    def exists(self) -> bool: ...

    def is_dir(self) -> bool: ...

    def is_file(self) -> bool: ...

    def is_block(self) -> bool: ...

    def is_character(self) -> bool: ...

    def is_symlink(self) -> bool: ...

    def can_read(self) -> bool: ...

    def can_write(self) -> bool: ...

    def can_execute(self) -> bool: ...

    def length(self) -> int:
        """Size of the file in bytes, or 0 if unknown."""
        ...

    def last_modified(self) -> int:
        """Modification time in epoch milliseconds, or 0 if unknown."""
        ...

    def free_space(self) -> int:
        """Unallocated bytes on the partition.

        Returns:
            Byte count, or MAX_INT64 if it could not be determined.
        """
        ...

    def total_space(self) -> int:
        """Size of the partition in bytes, or MAX_INT64 if unknown."""
        ...

    def usable_space(self) -> int:
        """Bytes available to the caller on the partition, or MAX_INT64 if unknown."""
        ...

    def create_new_file(self) -> bool:
        """Create an empty file if nothing exists at the path.

        Returns:
            True if a file was created.
        """
        ...

    def delete(self) -> bool:
        """Delete a file or an empty directory."""
        ...

    def delete_recursive(self) -> bool: ...

    def clear(self) -> bool:
        """Truncate the file, creating it if needed."""
        ...

    def mkdir(self) -> bool: ...

    def mkdirs(self) -> bool: ...

    def rename_to(self, dest: PathEntity | str | os.PathLike[str]) -> bool:
        """Move this path to dest, replacing an existing file.

        Args:
            dest: Destination path.

        Returns:
            True if the move succeeded.
        """
        ...

    def set_executable(self, executable: bool, owner_only: bool = True) -> bool: ...

    def set_readable(self, readable: bool, owner_only: bool = True) -> bool: ...

    def set_writable(self, writable: bool, owner_only: bool = True) -> bool: ...

    def set_read_only(self) -> bool: ...

    def set_last_modified(self, time: int) -> bool:
        """Set the modification time of an existing path.

        Args:
            time: Epoch milliseconds.

        Returns:
            True if the time was set. Never creates a file.
        """
        ...

    def list(self, name_filter: NameFilter | None = None) -> list[str] | None:
        """Names of the directory entries, excluding "." and "..".

        Args:
            name_filter: Optional predicate called with this directory and
                each entry name.

        Returns:
            Accepted names in listing order, or None if this is not a
            directory.
        """
        ...

    def list_files(self, name_filter: NameFilter | None = None) -> list[PathEntity] | None: ...

    def list_files_where(self, path_filter: PathFilter | None = None) -> list[PathEntity] | None: ...

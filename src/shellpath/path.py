"""Filesystem paths operated on through shell commands.

A :class:`ShellPath` never touches the filesystem itself. Every query and
every mutation builds one command from :mod:`shellpath.commands`, runs it
through an :class:`~shellpath.protocols.ExecutionPort` and interprets the
output or the exit status.

None of the operations are atomic. The filesystem can change between two
calls, for example between :meth:`ShellPath.exists` and
:meth:`ShellPath.create_new_file`; this is a limitation of command based
access.

Required commands: ``rm``, ``rmdir``, ``mv``, ``ls``, ``mkdir``, ``chmod``,
plus ``readlink``, ``touch`` and ``stat`` (toybox, busybox or coreutils).
"""

from __future__ import annotations

import logging
import os
import posixpath
import re
from datetime import datetime
from urllib.parse import unquote, urlsplit

from shellpath import commands
from shellpath.commands import CommandTemplate
from shellpath.escaping import escape_path
from shellpath.permissions import PermissionBit, PermissionTriplet
from shellpath.protocols import ArgvExecutionPort, ExecutionPort, NameFilter, PathFilter
from shellpath.types import MAX_INT64, ShellPathError

__all__ = ["ShellPath", "UnsupportedOperationError"]

logger = logging.getLogger(__name__)

# touch -t accepts [[CC]YY]MMDDhhmm
TOUCH_TIMESTAMP_FORMAT = "%Y%m%d%H%M"

# stat -f field selectors: free, total and available block counts
_FREE_BLOCKS = "%f"
_TOTAL_BLOCKS = "%b"
_AVAILABLE_BLOCKS = "%a"

_SLASHES = re.compile(r"/{2,}")


def absolute_path_of(pathname: str) -> str:
    """Make pathname absolute without resolving "." or ".." segments.

    Relative paths are joined onto the current working directory.
    Repeated slashes are collapsed and a trailing slash is removed.
    Dot segments are kept: ".." after a symbolic link is resolved by the
    filesystem, not by the text before it.
    """
    if not pathname.startswith("/"):
        pathname = os.getcwd() + "/" + pathname
    return _SLASHES.sub("/", pathname).rstrip("/") or "/"


class UnsupportedOperationError(ShellPathError, NotImplementedError):
    """Operation that cannot be expressed as a shell command."""

    pass


class ShellPath:
    """A path whose operations are all executed as shell commands.

    The path is normalized to an absolute POSIX path once, at construction,
    and quoted once. Instances are immutable; derived paths (parent,
    children, canonical form) are new instances sharing the executor.
    """

    __slots__ = ("_path", "_escaped_path", "_executor")

    def __init__(self, pathname: str | os.PathLike[str], executor: ExecutionPort) -> None:
        """Initialize a shell-backed path.

        Args:
            pathname: Absolute or relative path. Relative paths are resolved
                against the current working directory.
            executor: Runs the generated commands.

        Raises:
            ValueError: If pathname is empty.
        """
        raw = os.fspath(pathname)
        if not raw:
            raise ValueError("pathname cannot be empty")
        self._path = absolute_path_of(raw)
        self._escaped_path = escape_path(self._path)
        self._executor = executor

    @classmethod
    def from_parent(
        cls,
        parent: ShellPath | str | os.PathLike[str],
        child: str,
        executor: ExecutionPort | None = None,
    ) -> ShellPath:
        """Create a path for child inside parent.

        The child is always resolved below parent, even when it starts with
        a slash.

        Args:
            parent: Parent directory.
            child: Name or relative path below parent.
            executor: Executor for the new path. Defaults to the parent's
                executor when parent is a ShellPath.

        Returns:
            The joined path.

        Raises:
            ValueError: If no executor is available.
        """
        if isinstance(parent, ShellPath):
            executor = executor or parent._executor
            parent_path = parent.path
        else:
            parent_path = os.fspath(parent)
        if executor is None:
            raise ValueError("executor is required when parent is not a ShellPath")
        return cls(posixpath.join(parent_path, child.lstrip("/")), executor)

    @classmethod
    def from_uri(cls, uri: str, executor: ExecutionPort) -> ShellPath:
        """Create a path from a ``file:`` URI.

        Args:
            uri: Absolute hierarchical URI such as ``file:///data/local/tmp``.
            executor: Runs the generated commands.

        Returns:
            The path denoted by the URI.

        Raises:
            ValueError: If the URI is not a plain absolute file URI.
        """
        parts = urlsplit(uri)
        if parts.scheme != "file":
            raise ValueError(f"URI scheme is not \"file\": {uri}")
        if parts.netloc:
            raise ValueError(f"URI has an authority component: {uri}")
        if parts.query or parts.fragment:
            raise ValueError(f"URI has a query or fragment component: {uri}")
        path = unquote(parts.path)
        if not path.startswith("/"):
            raise ValueError(f"URI is not hierarchical: {uri}")
        return cls(path, executor)

    @property
    def path(self) -> str:
        return self._path

    @property
    def escaped_path(self) -> str:
        """The path quoted for use in shell command lines."""
        return self._escaped_path

    @property
    def executor(self) -> ExecutionPort:
        return self._executor

    @property
    def name(self) -> str:
        return posixpath.basename(self._path)

    @property
    def parent_path(self) -> str | None:
        if self._path == "/":
            return None
        return posixpath.dirname(self._path)

    @property
    def parent(self) -> ShellPath | None:
        parent = self.parent_path
        return None if parent is None else ShellPath(parent, self._executor)

    def __truediv__(self, child: str) -> ShellPath:
        return ShellPath.from_parent(self, child)

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"ShellPath({self._path!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ShellPath):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    # ------------------------------------------------------------------
    # Command execution
    # ------------------------------------------------------------------

    def _uses_argv(self, template: CommandTemplate) -> bool:
        return template.supports_argv and isinstance(self._executor, ArgvExecutionPort)

    def _text(self, template: CommandTemplate, **values: str) -> str:
        if self._uses_argv(template):
            return self._executor.run_argv_text(template.render_argv(self._path, **values))
        return self._executor.run_text(template.render(self._escaped_path, **values))

    def _bool(self, template: CommandTemplate, **values: str) -> bool:
        if self._uses_argv(template):
            return self._executor.run_argv_bool(template.render_argv(self._path, **values))
        return self._executor.run_bool(template.render(self._escaped_path, **values))

    # ------------------------------------------------------------------
    # Attribute queries
    # ------------------------------------------------------------------

    def can_execute(self) -> bool:
        return self._bool(commands.CAN_EXECUTE)

    def can_read(self) -> bool:
        return self._bool(commands.CAN_READ)

    def can_write(self) -> bool:
        return self._bool(commands.CAN_WRITE)

    def exists(self) -> bool:
        return self._bool(commands.EXISTS)

    def is_dir(self) -> bool:
        return self._bool(commands.IS_DIR)

    def is_file(self) -> bool:
        return self._bool(commands.IS_FILE)

    def is_block(self) -> bool:
        """Check if the path denotes a block device."""
        return self._bool(commands.IS_BLOCK)

    def is_character(self) -> bool:
        """Check if the path denotes a character device."""
        return self._bool(commands.IS_CHARACTER)

    def is_symlink(self) -> bool:
        """Check if the path denotes a symbolic link."""
        return self._bool(commands.IS_SYMLINK)

    def absolute_path(self) -> str:
        # Constructed from an absolute path, nothing to resolve
        return self._path

    def absolute(self) -> ShellPath:
        return self

    def canonical_path(self) -> str:
        """Resolve the path with ``readlink -f``.

        Returns:
            The canonical path, or this path unchanged when readlink prints
            nothing (nonexistent parents, unsupported readlink).
        """
        resolved = self._text(commands.READLINK)
        return resolved or self._path

    def canonical(self) -> ShellPath:
        return ShellPath(self.canonical_path(), self._executor)

    def _stat_fs(self, fmt: str) -> int:
        output = self._text(commands.STAT_FS, fmt=fmt)
        fields = output.split(" ")
        if len(fields) != 2:
            logger.debug("Unexpected stat -f output for %s: %r", self._path, output)
            return MAX_INT64
        try:
            return int(fields[0]) * int(fields[1])
        except ValueError:
            logger.debug("Unparsable stat -f output for %s: %r", self._path, output)
            return MAX_INT64

    def free_space(self) -> int:
        """Number of unallocated bytes in the partition.

        Returns:
            Block size times free block count, or MAX_INT64 if stat output
            could not be parsed.
        """
        return self._stat_fs(_FREE_BLOCKS)

    def total_space(self) -> int:
        """Size of the partition in bytes, or MAX_INT64 if unknown."""
        return self._stat_fs(_TOTAL_BLOCKS)

    def usable_space(self) -> int:
        """Bytes available to unprivileged users, or MAX_INT64 if unknown."""
        return self._stat_fs(_AVAILABLE_BLOCKS)

    def _stat_int(self, template: CommandTemplate) -> int:
        output = self._text(template)
        try:
            return int(output)
        except ValueError:
            logger.debug("Unparsable %s output for %s: %r", template.name, self._path, output)
            return 0

    def last_modified(self) -> int:
        """Time of last modification.

        Returns:
            Epoch milliseconds, or 0 if the path does not exist or stat
            output could not be parsed.
        """
        return self._stat_int(commands.MTIME) * 1000

    def length(self) -> int:
        """Length of the file in bytes, or 0 if unknown."""
        return self._stat_int(commands.SIZE)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_new_file(self) -> bool:
        return self._bool(commands.CREATE_NEW_FILE)

    def delete(self) -> bool:
        """Delete the file, or the directory if it is empty.

        Uses ``rm`` for files and falls back to ``rmdir`` for directories.
        A False result does not tell a non-empty directory apart from any
        other failure.
        """
        return self._bool(commands.DELETE)

    def delete_recursive(self) -> bool:
        """Delete the path and, for a directory, everything below it."""
        return self._bool(commands.DELETE_RECURSIVE)

    def delete_on_exit(self) -> None:
        """Unsupported: there is no process exit hook for shell commands.

        Raises:
            UnsupportedOperationError: Always.
        """
        raise UnsupportedOperationError("delete_on_exit is not supported for shell paths")

    def clear(self) -> bool:
        """Truncate the file to zero length, creating it if needed."""
        return self._bool(commands.CLEAR)

    def mkdir(self) -> bool:
        return self._bool(commands.MKDIR)

    def mkdirs(self) -> bool:
        """Create the directory and any missing parents."""
        return self._bool(commands.MKDIRS)

    def rename_to(self, dest: ShellPath | str | os.PathLike[str]) -> bool:
        """Move this path to dest with ``mv -f``.

        Args:
            dest: Destination path. Relative destinations are resolved
                against the current working directory.

        Returns:
            True if ``mv`` succeeded.
        """
        if isinstance(dest, ShellPath):
            dest_path = dest.path
            escaped_dest = dest.escaped_path
        else:
            dest_path = absolute_path_of(os.fspath(dest))
            escaped_dest = escape_path(dest_path)
        if self._uses_argv(commands.RENAME):
            return self._executor.run_argv_bool(
                commands.RENAME.render_argv(self._path, dest=dest_path)
            )
        return self._executor.run_bool(
            commands.RENAME.render(self._escaped_path, dest=escaped_dest)
        )

    def _set_permission(self, bit: PermissionBit, enable: bool, owner_only: bool) -> bool:
        mode = self._text(commands.MODE)
        perms = PermissionTriplet.parse(mode)
        if perms is None:
            logger.debug("Unexpected mode for %s: %r", self._path, mode)
            return False
        return self._bool(commands.CHMOD, digits=str(perms.toggle(bit, enable, owner_only)))

    def set_executable(self, executable: bool, owner_only: bool = True) -> bool:
        """Set the execute permission.

        Args:
            executable: True to allow execution, False to disallow it.
            owner_only: Grant to the owner only. Other classes lose the
                permission.

        Returns:
            True if ``chmod`` succeeded; False if the current mode could
            not be read.
        """
        return self._set_permission(PermissionBit.EXECUTE, executable, owner_only)

    def set_readable(self, readable: bool, owner_only: bool = True) -> bool:
        return self._set_permission(PermissionBit.READ, readable, owner_only)

    def set_writable(self, writable: bool, owner_only: bool = True) -> bool:
        return self._set_permission(PermissionBit.WRITE, writable, owner_only)

    def set_read_only(self) -> bool:
        """Remove write and execute permission for everybody."""
        return self.set_writable(False, False) and self.set_executable(False, False)

    def set_last_modified(self, time: int) -> bool:
        """Set the modification time with ``touch -t``.

        The timestamp is rendered in local time with minute precision.
        The command is guarded by an existence test and never creates a
        file.

        Args:
            time: Epoch milliseconds.

        Returns:
            True if the path exists and touch succeeded; False also when
            time is beyond what a touch timestamp can express.

        Raises:
            ValueError: If time is negative.
        """
        if time < 0:
            raise ValueError("Negative time")
        try:
            stamp = datetime.fromtimestamp(time / 1000).strftime(TOUCH_TIMESTAMP_FORMAT)
        except (ValueError, OverflowError, OSError) as e:
            logger.debug("Cannot format touch time %d for %s: %s", time, self._path, e)
            return False
        return self._bool(commands.TOUCH, stamp=stamp)

    # ------------------------------------------------------------------
    # Directory listing
    # ------------------------------------------------------------------

    def list(self, name_filter: NameFilter | None = None) -> list[str] | None:
        """Names of the entries in this directory.

        Args:
            name_filter: Optional predicate called with this directory and
                an entry name.

        Returns:
            Entry names other than "." and ".." in ``ls`` order, or None if
            this path is not a directory.
        """
        if not self.is_dir():
            return None
        names = []
        # One entry per line; names may contain any other control character
        for name in self._text(commands.LIST).split("\n"):
            if not name or name in (".", ".."):
                continue
            if name_filter is not None and not name_filter(self, name):
                continue
            names.append(name)
        return names

    def list_files(self, name_filter: NameFilter | None = None) -> list[ShellPath] | None:
        """Child paths of this directory, filtered by entry name.

        Returns:
            New child paths, or None if this path is not a directory.
        """
        names = self.list(name_filter)
        if names is None:
            return None
        return [ShellPath.from_parent(self, name) for name in names]

    def list_files_where(self, path_filter: PathFilter | None = None) -> list[ShellPath] | None:
        """Child paths of this directory accepted by path_filter.

        Returns:
            New child paths, or None if this path is not a directory.
        """
        children = self.list_files()
        if children is None or path_filter is None:
            return children
        return [child for child in children if path_filter(child)]

"""Native path implementation.

LocalPath is what the factory returns when commands would not run with
elevated privilege. It wraps standard library os, Path and shutil
operations and satisfies the PathEntity protocol structurally, with the
same result conventions as ShellPath: failures are False, unknown sizes
are 0 or MAX_INT64, and listing a non-directory is None.
"""

from __future__ import annotations

import os
import shutil
import stat
from pathlib import Path
from urllib.parse import unquote, urlsplit

from shellpath.path import absolute_path_of
from shellpath.permissions import PermissionBit, PermissionTriplet
from shellpath.protocols import NameFilter, PathEntity, PathFilter
from shellpath.types import MAX_INT64

__all__ = ["LocalPath"]


class LocalPath:
    """A path operated on with direct host I/O."""

    __slots__ = ("_path",)

    def __init__(self, pathname: str | os.PathLike[str]) -> None:
        """Initialize a native path.

        Args:
            pathname: Absolute or relative path.

        Raises:
            ValueError: If pathname is empty.
        """
        raw = os.fspath(pathname)
        if not raw:
            raise ValueError("pathname cannot be empty")
        self._path = Path(absolute_path_of(raw))

    @classmethod
    def from_parent(cls, parent: LocalPath | str | os.PathLike[str], child: str) -> LocalPath:
        parent_path = parent.path if isinstance(parent, LocalPath) else os.fspath(parent)
        return cls(os.path.join(parent_path, child.lstrip("/")))

    @classmethod
    def from_uri(cls, uri: str) -> LocalPath:
        """Create a path from a ``file:`` URI.

        Raises:
            ValueError: If the URI is not a plain absolute file URI.
        """
        parts = urlsplit(uri)
        if parts.scheme != "file" or parts.netloc or parts.query or parts.fragment:
            raise ValueError(f"Not a plain file URI: {uri}")
        path = unquote(parts.path)
        if not path.startswith("/"):
            raise ValueError(f"URI is not hierarchical: {uri}")
        return cls(path)

    @property
    def path(self) -> str:
        return str(self._path)

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def parent(self) -> LocalPath | None:
        if self._path.parent == self._path:
            return None
        return LocalPath(self._path.parent)

    def __truediv__(self, child: str) -> LocalPath:
        return LocalPath.from_parent(self, child)

    def __fspath__(self) -> str:
        return str(self._path)

    def __str__(self) -> str:
        return str(self._path)

    def __repr__(self) -> str:
        return f"LocalPath({str(self._path)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalPath):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    # Queries

    def absolute_path(self) -> str:
        return str(self._path)

    def absolute(self) -> LocalPath:
        return self

    def canonical_path(self) -> str:
        return os.path.realpath(self._path)

    def canonical(self) -> LocalPath:
        return LocalPath(self.canonical_path())

    def exists(self) -> bool:
        return self._path.exists()

    def is_dir(self) -> bool:
        return self._path.is_dir()

    def is_file(self) -> bool:
        return self._path.is_file()

    def is_block(self) -> bool:
        return self._path.is_block_device()

    def is_character(self) -> bool:
        return self._path.is_char_device()

    def is_symlink(self) -> bool:
        return self._path.is_symlink()

    def can_read(self) -> bool:
        return os.access(self._path, os.R_OK)

    def can_write(self) -> bool:
        return os.access(self._path, os.W_OK)

    def can_execute(self) -> bool:
        return os.access(self._path, os.X_OK)

    def length(self) -> int:
        try:
            return self._path.stat().st_size
        except OSError:
            return 0

    def last_modified(self) -> int:
        try:
            return self._path.stat().st_mtime_ns // 1_000_000
        except OSError:
            return 0

    def _statvfs(self, field: str) -> int:
        try:
            st = os.statvfs(self._path)
        except OSError:
            return MAX_INT64
        return st.f_frsize * getattr(st, field)

    def free_space(self) -> int:
        return self._statvfs("f_bfree")

    def total_space(self) -> int:
        return self._statvfs("f_blocks")

    def usable_space(self) -> int:
        return self._statvfs("f_bavail")

    # Mutations

    def create_new_file(self) -> bool:
        try:
            with open(self._path, "x"):
                pass
        except OSError:
            return False
        return True

    def delete(self) -> bool:
        try:
            if self._path.is_dir() and not self._path.is_symlink():
                self._path.rmdir()
            else:
                self._path.unlink()
        except OSError:
            return False
        return True

    def delete_recursive(self) -> bool:
        # Like rm -rf, a missing path counts as deleted
        try:
            if self._path.is_dir() and not self._path.is_symlink():
                shutil.rmtree(self._path)
            else:
                self._path.unlink(missing_ok=True)
        except OSError:
            return False
        return True

    def clear(self) -> bool:
        try:
            with open(self._path, "w"):
                pass
        except OSError:
            return False
        return True

    def mkdir(self) -> bool:
        try:
            self._path.mkdir()
        except OSError:
            return False
        return True

    def mkdirs(self) -> bool:
        try:
            self._path.mkdir(parents=True, exist_ok=True)
        except OSError:
            return False
        return True

    def rename_to(self, dest: PathEntity | str | os.PathLike[str]) -> bool:
        """Move this path to dest, which may be any path entity."""
        target = dest.path if hasattr(dest, "path") else os.fspath(dest)
        try:
            shutil.move(self._path, absolute_path_of(target))
        except OSError:
            return False
        return True

    def _set_permission(self, bit: PermissionBit, enable: bool, owner_only: bool) -> bool:
        try:
            mode = self._path.stat().st_mode
            perms = PermissionTriplet.from_mode(mode).toggle(bit, enable, owner_only)
            self._path.chmod((stat.S_IMODE(mode) & ~0o777) | perms.to_mode())
        except OSError:
            return False
        return True

    def set_executable(self, executable: bool, owner_only: bool = True) -> bool:
        return self._set_permission(PermissionBit.EXECUTE, executable, owner_only)

    def set_readable(self, readable: bool, owner_only: bool = True) -> bool:
        return self._set_permission(PermissionBit.READ, readable, owner_only)

    def set_writable(self, writable: bool, owner_only: bool = True) -> bool:
        return self._set_permission(PermissionBit.WRITE, writable, owner_only)

    def set_read_only(self) -> bool:
        return self.set_writable(False, False) and self.set_executable(False, False)

    def set_last_modified(self, time: int) -> bool:
        """Set access and modification time of an existing path.

        Raises:
            ValueError: If time is negative.
        """
        if time < 0:
            raise ValueError("Negative time")
        if not self._path.exists():
            return False
        seconds = time / 1000
        try:
            os.utime(self._path, (seconds, seconds))
        except (OSError, OverflowError):
            return False
        return True

    # Listing

    def list(self, name_filter: NameFilter | None = None) -> list[str] | None:
        if not self._path.is_dir():
            return None
        try:
            names = sorted(os.listdir(self._path))
        except OSError:
            return None
        if name_filter is None:
            return names
        return [name for name in names if name_filter(self, name)]

    def list_files(self, name_filter: NameFilter | None = None) -> list[LocalPath] | None:
        names = self.list(name_filter)
        if names is None:
            return None
        return [LocalPath.from_parent(self, name) for name in names]

    def list_files_where(self, path_filter: PathFilter | None = None) -> list[LocalPath] | None:
        children = self.list_files()
        if children is None or path_filter is None:
            return children
        return [child for child in children if path_filter(child)]

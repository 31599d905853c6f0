"""Filesystem paths operated on through shell commands."""

__version__ = "0.1.0"

from shellpath.context import PathContext, create_context, open_path
from shellpath.escaping import escape_path
from shellpath.executor import DirectExecutor, ExecutorError, SubprocessExecutor
from shellpath.local import LocalPath
from shellpath.path import ShellPath, UnsupportedOperationError
from shellpath.permissions import PermissionBit, PermissionTriplet

# Export protocol interfaces for type hints and dependency injection
from shellpath.protocols import (
    ArgvExecutionPort,
    ExecutionPort,
    PathEntity,
    PrivilegeProbe,
)
from shellpath.types import MAX_INT64, CommandResult, ShellPathError

__all__ = [
    "__version__",
    "MAX_INT64",
    "ArgvExecutionPort",
    "CommandResult",
    "DirectExecutor",
    "ExecutionPort",
    "ExecutorError",
    "LocalPath",
    "PathContext",
    "PathEntity",
    "PermissionBit",
    "PermissionTriplet",
    "PrivilegeProbe",
    "ShellPath",
    "ShellPathError",
    "SubprocessExecutor",
    "UnsupportedOperationError",
    "create_context",
    "escape_path",
    "open_path",
]

"""Path context and factory for dependency injection.

This module separates object creation from object use. Whether paths are
backed by shell commands or by direct host I/O is decided once, when the
context is created, and carried as an explicit value instead of being read
from process-wide state.

Dependencies are typed using Protocols (abstract interfaces) rather than
concrete implementations, so test doubles can be injected without
inheritance.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from shellpath.config import ShellConfig, load_config
from shellpath.local import LocalPath
from shellpath.path import ShellPath
from shellpath.protocols import ExecutionPort, PathEntity, PrivilegeProbe

__all__ = ["PathContext", "create_context", "open_path"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathContext:
    """Container for path construction dependencies.

    Attributes:
        executor: Runs commands for shell-backed paths.
        privileged: Whether the executor has elevated privilege. Decides
            between ShellPath and LocalPath in open_path().
    """

    executor: ExecutionPort
    privileged: bool = False


def _default_executor(config: ShellConfig) -> ExecutionPort:
    """Create the default executor implementation."""
    from shellpath.executor import SubprocessExecutor

    return SubprocessExecutor.create(config)


def create_context(
    config: ShellConfig | None = None,
    executor: ExecutionPort | None = None,
) -> PathContext:
    """Factory for path construction dependencies.

    Probes the executor for privilege once unless the configuration
    already states it. Executors that cannot be probed are treated as
    unprivileged.

    Args:
        config: Shell configuration. Defaults to load_config().
        executor: Override the executor (for testing).

    Returns:
        Configured PathContext.

    Raises:
        ValueError: If the default config file is invalid.
        ExecutorError: If probing cannot start the interpreter.
    """
    config = config or load_config()
    executor = executor or _default_executor(config)

    if config.assume_privileged is not None:
        privileged = config.assume_privileged
    elif isinstance(executor, PrivilegeProbe):
        privileged = executor.has_privileged_access()
    else:
        privileged = False
    logger.debug("Created path context (privileged=%s)", privileged)

    return PathContext(executor=executor, privileged=privileged)


def open_path(
    pathname: str | os.PathLike[str] | ShellPath | LocalPath,
    context: PathContext,
    child: str | None = None,
) -> PathEntity:
    """Open a path with the backend the context calls for.

    Args:
        pathname: Path string, parent directory when child is given, or a
            ``file:`` URI.
        context: Decides between shell-backed and native paths.
        child: Optional name below pathname.

    Returns:
        A ShellPath if the context is privileged, a LocalPath otherwise.

    Raises:
        ValueError: If the path or URI is invalid.
    """
    if isinstance(pathname, (ShellPath, LocalPath)):
        raw = pathname.path
    else:
        raw = os.fspath(pathname)
    is_uri = child is None and raw.startswith("file:")

    if context.privileged:
        if is_uri:
            return ShellPath.from_uri(raw, context.executor)
        if child is not None:
            return ShellPath.from_parent(raw, child, context.executor)
        return ShellPath(raw, context.executor)

    if is_uri:
        return LocalPath.from_uri(raw)
    if child is not None:
        return LocalPath.from_parent(raw, child)
    return LocalPath(raw)

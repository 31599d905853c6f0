"""Subprocess-backed command executors."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from typing import TYPE_CHECKING

from shellpath.types import CommandResult, ShellPathError

if TYPE_CHECKING:
    from shellpath.config import ShellConfig

__all__ = ["DEFAULT_SHELL", "DirectExecutor", "ExecutorError", "SubprocessExecutor"]

logger = logging.getLogger(__name__)

# Interpreter invocation used when none is configured
DEFAULT_SHELL = ("sh", "-c")

# Prints the effective user id of the interpreter
_UID_COMMAND = "id -u"
_ROOT_UID = "0"


class ExecutorError(ShellPathError):
    """The interpreter could not be started or did not finish in time."""

    pass


class SubprocessExecutor:
    """Runs each command line in a fresh interpreter process.

    The line is appended to the configured shell invocation, so
    ``shell=("sudo", "-n", "sh", "-c")`` runs every command through sudo.
    Satisfies the ExecutionPort and PrivilegeProbe protocols structurally.
    """

    def __init__(
        self,
        shell: Sequence[str] = DEFAULT_SHELL,
        timeout: float | None = 30.0,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize the executor.

        Args:
            shell: Interpreter invocation that takes the line as its last
                argument.
            timeout: Seconds to wait for one command, or None to wait
                indefinitely.
            encoding: Encoding of command output.

        Raises:
            ValueError: If shell is empty.
        """
        if not shell:
            raise ValueError("shell cannot be empty")
        self.shell = tuple(shell)
        self.timeout = timeout
        self.encoding = encoding

    @classmethod
    def create(cls, config: ShellConfig) -> SubprocessExecutor:
        """Create an executor from configuration.

        Returns a DirectExecutor when the configuration declares an argv
        prefix.

        Args:
            config: Loaded shell configuration.

        Returns:
            Configured executor.
        """
        if config.argv_prefix is not None:
            return DirectExecutor(
                shell=config.shell,
                prefix=config.argv_prefix,
                timeout=config.timeout,
                encoding=config.encoding,
            )
        return cls(shell=config.shell, timeout=config.timeout, encoding=config.encoding)

    def run(self, line: str) -> CommandResult:
        """Execute a command line.

        Args:
            line: Shell command line.

        Returns:
            CommandResult with output and exit status.

        Raises:
            ExecutorError: If the interpreter cannot be started or times out.
        """
        return self._execute([*self.shell, line])

    def run_text(self, line: str) -> str:
        return self.run(line).stdout

    def run_bool(self, line: str) -> bool:
        return self.run(line).success

    def has_privileged_access(self) -> bool:
        """Check whether commands run as the root user."""
        return self.run_text(_UID_COMMAND) == _ROOT_UID

    def _execute(self, argv: list[str]) -> CommandResult:
        """Run a process to completion and capture its output.

        Args:
            argv: Full argument vector.

        Returns:
            CommandResult for the process.

        Raises:
            ExecutorError: If the process cannot be started or times out.
        """
        try:
            proc = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding=self.encoding,
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ExecutorError(f"Command timed out after {self.timeout}s: {' '.join(argv)}") from e
        except OSError as e:
            raise ExecutorError(f"Failed to start {argv[0]}: {e}") from e

        result = CommandResult(
            stdout=proc.stdout.removesuffix("\n"),
            exit_code=proc.returncode,
            stderr=proc.stderr,
        )
        logger.debug("Executed %r (exit %d)", argv, result.exit_code)
        return result


class DirectExecutor(SubprocessExecutor):
    """Executor that also runs argument vectors without a shell.

    Argument vectors are prefixed with ``prefix`` (for example
    ``("sudo", "-n")``) so they run with the same privilege as shell lines.
    Satisfies the ArgvExecutionPort protocol structurally.
    """

    def __init__(
        self,
        shell: Sequence[str] = DEFAULT_SHELL,
        prefix: Sequence[str] = (),
        timeout: float | None = 30.0,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(shell=shell, timeout=timeout, encoding=encoding)
        self.prefix = tuple(prefix)

    def run_argv(self, argv: Sequence[str]) -> CommandResult:
        """Execute an argument vector after the configured prefix.

        Raises:
            ExecutorError: If the program cannot be started or times out.
        """
        return self._execute([*self.prefix, *argv])

    def run_argv_text(self, argv: list[str]) -> str:
        return self.run_argv(argv).stdout

    def run_argv_bool(self, argv: list[str]) -> bool:
        return self.run_argv(argv).success

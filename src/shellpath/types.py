"""Shared data types for shellpath."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["MAX_INT64", "CommandResult", "ShellPathError"]

# Sentinel for partition sizes that could not be determined
MAX_INT64 = 2**63 - 1


class ShellPathError(Exception):
    """Base class for shellpath errors."""

    pass


@dataclass(frozen=True)
class CommandResult:
    """Result of executing one command line.

    Attributes:
        stdout: Captured standard output with one trailing newline removed.
        exit_code: Exit status reported by the interpreter.
        stderr: Captured standard error.
    """

    stdout: str
    exit_code: int
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.exit_code == 0

"""Shared test fixtures."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path

import pytest

from shellpath.executor import SubprocessExecutor

# ============================================================================
# Fake Executors
# ============================================================================


class RecordingExecutor:
    """ExecutionPort double that records lines and replays canned results.

    Lines without a canned result produce ``default_text`` or
    ``default_bool``.
    """

    def __init__(self, default_text: str = "", default_bool: bool = True) -> None:
        self.default_text = default_text
        self.default_bool = default_bool
        self.text_results: dict[str, str] = {}
        self.bool_results: dict[str, bool] = {}
        self.lines: list[str] = []

    def run_text(self, line: str) -> str:
        self.lines.append(line)
        return self.text_results.get(line, self.default_text)

    def run_bool(self, line: str) -> bool:
        self.lines.append(line)
        return self.bool_results.get(line, self.default_bool)


class ArgvRecordingExecutor(RecordingExecutor):
    """RecordingExecutor that also accepts argument vectors."""

    def __init__(self, default_text: str = "", default_bool: bool = True) -> None:
        super().__init__(default_text, default_bool)
        self.argvs: list[list[str]] = []
        self.argv_text_results: dict[tuple[str, ...], str] = {}

    def run_argv_text(self, argv: list[str]) -> str:
        self.argvs.append(argv)
        return self.argv_text_results.get(tuple(argv), self.default_text)

    def run_argv_bool(self, argv: list[str]) -> bool:
        self.argvs.append(argv)
        return self.default_bool


@pytest.fixture
def recorder() -> RecordingExecutor:
    """Create a recording executor."""
    return RecordingExecutor()


@pytest.fixture
def argv_recorder() -> ArgvRecordingExecutor:
    """Create a recording executor with argv support."""
    return ArgvRecordingExecutor()


# ============================================================================
# Real Shell Fixtures
# ============================================================================

requires_posix_shell = pytest.mark.skipif(
    not sys.platform.startswith("linux")
    or shutil.which("sh") is None
    or shutil.which("stat") is None,
    reason="Requires a POSIX shell with GNU-style stat",
)


@pytest.fixture
def shell() -> SubprocessExecutor:
    """Create an executor running commands through sh."""
    return SubprocessExecutor(("sh", "-c"), timeout=10)


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Create a scratch directory whose name needs quoting."""
    path = tmp_path / "work dir 'quoted'"
    path.mkdir()
    return path

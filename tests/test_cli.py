"""Tests for CLI commands using context injection.

Commands accept a _context parameter for dependency injection, so they can
be driven by a recording executor or by native paths under tmp_path.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
import typer
from conftest import RecordingExecutor
from rich.console import Console

from shellpath import cli
from shellpath.console import ConsoleOutput
from shellpath.context import PathContext
from shellpath.executor import ExecutorError


@pytest.fixture(autouse=True)
def captured() -> Console:
    """Route CLI output to a recording console."""
    console = Console(record=True, width=200)
    with patch.object(cli, "output", ConsoleOutput(console)):
        yield console


@pytest.fixture
def shell_context(recorder: RecordingExecutor) -> PathContext:
    """Create a privileged context on the recording executor."""
    return PathContext(executor=recorder, privileged=True)


@pytest.fixture
def local_context(recorder: RecordingExecutor) -> PathContext:
    """Create an unprivileged context that opens native paths."""
    return PathContext(executor=recorder, privileged=False)


class TestQueryCommands:
    """Tests for info, ls and df."""

    def test_info(self, shell_context: PathContext, recorder: RecordingExecutor, captured: Console) -> None:
        """Test describing an existing path."""
        recorder.bool_results["[ -L '/data/f' ]"] = False
        recorder.bool_results["[ -d '/data/f' ]"] = False
        recorder.text_results["stat -c '%s' '/data/f'"] = "2048"

        cli.info(path="/data/f", _context=shell_context)

        text = captured.export_text()
        assert "file" in text
        assert "2,048" in text
        assert "rwx" in text

    def test_info_missing_path(self, shell_context: PathContext, recorder: RecordingExecutor) -> None:
        """Test describing a missing path fails."""
        recorder.bool_results["[ -e '/missing' ]"] = False

        with pytest.raises(typer.Exit) as exc_info:
            cli.info(path="/missing", _context=shell_context)

        assert exc_info.value.exit_code == 1

    def test_ls(self, shell_context: PathContext, recorder: RecordingExecutor, captured: Console) -> None:
        """Test listing directory names."""
        recorder.text_results["ls -a '/data'"] = ".\n..\nalpha\nbeta"

        cli.list_directory(path="/data", _context=shell_context)

        lines = captured.export_text().splitlines()
        assert lines == ["alpha", "beta"]

    def test_ls_names_with_brackets(
        self, shell_context: PathContext, recorder: RecordingExecutor, captured: Console
    ) -> None:
        """Test entry names are printed literally, not as markup."""
        recorder.text_results["ls -a '/data'"] = ".\n..\n[/x]\n[bold]a"

        cli.list_directory(path="/data", _context=shell_context)

        assert captured.export_text().splitlines() == ["[/x]", "[bold]a"]

    def test_ls_long_names_with_brackets(self, local_context: PathContext, tmp_path: Path, captured: Console) -> None:
        """Test the long listing handles bracketed entry and directory names."""
        directory = tmp_path / "[red]dir"
        directory.mkdir()
        (directory / "[bold]a").write_text("")

        cli.list_directory(path=str(directory), long=True, _context=local_context)

        text = captured.export_text()
        assert "[bold]a" in text
        assert "file" in text

    def test_info_path_with_brackets(self, shell_context: PathContext, captured: Console) -> None:
        """Test a bracketed path is shown literally in the info table."""
        cli.info(path="/data/[/x]", _context=shell_context)
        assert "/data/[/x]" in captured.export_text()

    def test_error_path_with_brackets(
        self, shell_context: PathContext, recorder: RecordingExecutor, captured: Console
    ) -> None:
        """Test error messages show bracketed paths literally."""
        recorder.bool_results["[ -e '/data/[/x]' ]"] = False

        with pytest.raises(typer.Exit):
            cli.info(path="/data/[/x]", _context=shell_context)

        assert "'/data/[/x]' does not exist" in captured.export_text()

    def test_ls_empty(self, shell_context: PathContext, recorder: RecordingExecutor, captured: Console) -> None:
        """Test listing an empty directory."""
        recorder.text_results["ls -a '/data'"] = ".\n.."

        cli.list_directory(path="/data", _context=shell_context)

        assert "/data is empty" in captured.export_text()

    def test_ls_not_a_directory(self, shell_context: PathContext, recorder: RecordingExecutor, captured: Console) -> None:
        """Test listing a file fails."""
        recorder.bool_results["[ -d '/data/f' ]"] = False

        with pytest.raises(typer.Exit) as exc_info:
            cli.list_directory(path="/data/f", _context=shell_context)

        assert exc_info.value.exit_code == 1
        assert "is not a directory" in captured.export_text()

    def test_ls_long(self, local_context: PathContext, tmp_path: Path, captured: Console) -> None:
        """Test the long listing of a native directory."""
        (tmp_path / "notes.txt").write_text("hello")
        (tmp_path / "sub").mkdir()

        cli.list_directory(path=str(tmp_path), long=True, _context=local_context)

        text = captured.export_text()
        assert "notes.txt" in text
        assert "directory" in text

    def test_df_unknown_size(self, shell_context: PathContext, recorder: RecordingExecutor, captured: Console) -> None:
        """Test unparsable partition sizes print as unknown."""
        recorder.default_text = "garbage"

        cli.df(path="/", _context=shell_context)

        assert captured.export_text().count("unknown") == 3

    def test_executor_failure(self, shell_context: PathContext, recorder: RecordingExecutor, captured: Console) -> None:
        """Test executor errors are reported as failures."""
        with (
            patch.object(recorder, "run_bool", side_effect=ExecutorError("Command timed out")),
            pytest.raises(typer.Exit) as exc_info,
        ):
            cli.info(path="/data/f", _context=shell_context)

        assert exc_info.value.exit_code == 1
        assert "Command failed" in captured.export_text()


class TestMutationCommands:
    """Tests for commands that change the filesystem."""

    def test_mkdir(self, local_context: PathContext, tmp_path: Path) -> None:
        """Test creating a directory."""
        cli.mkdir(path=str(tmp_path / "new"), _context=local_context)
        assert (tmp_path / "new").is_dir()

    def test_mkdir_parents(self, shell_context: PathContext, recorder: RecordingExecutor) -> None:
        """Test creating missing parents runs mkdir -p."""
        cli.mkdir(path="/data/a/b", parents=True, _context=shell_context)
        assert recorder.lines == ["mkdir -p '/data/a/b'"]

    def test_mkdir_failure(self, local_context: PathContext, tmp_path: Path) -> None:
        """Test creating an existing directory fails."""
        with pytest.raises(typer.Exit) as exc_info:
            cli.mkdir(path=str(tmp_path), _context=local_context)
        assert exc_info.value.exit_code == 1

    def test_touch_creates_file(self, local_context: PathContext, tmp_path: Path) -> None:
        """Test touching a missing file creates it with the given time."""
        target = tmp_path / "stamp"

        cli.touch(path=str(target), timestamp=1_600_000_000_000, _context=local_context)

        assert target.is_file()
        assert target.stat().st_mtime == 1_600_000_000

    def test_touch_negative_time(self, local_context: PathContext, tmp_path: Path, captured: Console) -> None:
        """Test a negative time is rejected."""
        with pytest.raises(typer.Exit):
            cli.touch(path=str(tmp_path / "stamp"), timestamp=-1, _context=local_context)
        assert "Negative time" in captured.export_text()

    def test_rm_failure(self, shell_context: PathContext, recorder: RecordingExecutor, captured: Console) -> None:
        """Test a failed delete exits with status 1."""
        recorder.default_bool = False

        with pytest.raises(typer.Exit) as exc_info:
            cli.rm(path="/data/f", _context=shell_context)

        assert exc_info.value.exit_code == 1
        assert "Cannot delete '/data/f'" in captured.export_text()

    def test_rm_recursive(self, shell_context: PathContext, recorder: RecordingExecutor) -> None:
        """Test recursive delete runs rm -rf."""
        cli.rm(path="/data/d", recursive=True, _context=shell_context)
        assert recorder.lines == ["rm -rf '/data/d'"]

    def test_mv(self, shell_context: PathContext, recorder: RecordingExecutor, captured: Console) -> None:
        """Test moving quotes both paths."""
        cli.mv(source="/data/a b", destination="/data/c", _context=shell_context)

        assert recorder.lines == ["mv -f '/data/a b' '/data/c'"]
        assert "Moved" in captured.export_text()

    def test_truncate(self, local_context: PathContext, tmp_path: Path) -> None:
        """Test truncating a native file."""
        target = tmp_path / "log"
        target.write_text("content")

        cli.truncate(path=str(target), _context=local_context)

        assert target.read_text() == ""

    def test_chmod(self, shell_context: PathContext, recorder: RecordingExecutor) -> None:
        """Test granting execute to everyone."""
        recorder.text_results["stat -c '%a' '/data/f'"] = "644"

        cli.chmod(path="/data/f", mode="+x", _context=shell_context)

        assert recorder.lines[-1] == "chmod 755 '/data/f'"

    def test_chmod_owner_only(self, shell_context: PathContext, recorder: RecordingExecutor) -> None:
        """Test granting execute to the owner only."""
        recorder.text_results["stat -c '%a' '/data/f'"] = "755"

        cli.chmod(path="/data/f", mode="+x", owner_only=True, _context=shell_context)

        assert recorder.lines[-1] == "chmod 744 '/data/f'"

    def test_chmod_unreadable_mode(self, shell_context: PathContext, recorder: RecordingExecutor) -> None:
        """Test an unreadable mode fails without running chmod."""
        recorder.text_results["stat -c '%a' '/data/f'"] = ""

        with pytest.raises(typer.Exit) as exc_info:
            cli.chmod(path="/data/f", mode="-w", _context=shell_context)

        assert exc_info.value.exit_code == 1
        assert not any(line.startswith("chmod") for line in recorder.lines)

    def test_chmod_invalid_mode(self, shell_context: PathContext, recorder: RecordingExecutor, captured: Console) -> None:
        """Test a malformed mode fails before running anything."""
        with pytest.raises(typer.Exit) as exc_info:
            cli.chmod(path="/data/f", mode="755", _context=shell_context)

        assert exc_info.value.exit_code == 1
        assert "Invalid mode '755'" in captured.export_text()
        assert recorder.lines == []


class TestContextCreation:
    """Tests for commands creating their own context."""

    def test_shell_start_failure(self, captured: Console) -> None:
        """Test a failing privilege probe is reported."""
        with (
            patch.object(cli, "load_config"),
            patch.object(cli, "create_context", side_effect=ExecutorError("Failed to start sh")),
            pytest.raises(typer.Exit) as exc_info,
        ):
            cli.info(path="/x")

        assert exc_info.value.exit_code == 1
        assert "Cannot start shell" in captured.export_text()

    def test_invalid_config_file(self, tmp_path: Path, captured: Console) -> None:
        """Test an invalid configuration file is reported."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("timeout: -1\n")

        with patch.object(cli, "_config_file", config_file), pytest.raises(typer.Exit):
            cli.info(path="/x")

        assert "Invalid configuration" in captured.export_text()


class TestVersion:
    """Tests for the version option."""

    def test_version_callback(self) -> None:
        """Test the version option exits."""
        with pytest.raises(typer.Exit):
            cli.version_callback(True)

    def test_version_callback_noop(self) -> None:
        """Test nothing happens without the flag."""
        cli.version_callback(False)

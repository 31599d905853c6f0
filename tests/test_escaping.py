"""Tests for shell path escaping."""

from __future__ import annotations

import shlex
from pathlib import Path

from conftest import requires_posix_shell

from shellpath.escaping import escape_path
from shellpath.executor import SubprocessExecutor

ADVERSARIAL_PATHS = [
    "/plain/path",
    "/with space/and  double",
    "/it's",
    "''",
    "/a'b'c'",
    "/$(touch pwned)",
    "/`touch pwned`",
    "/x; touch pwned",
    "/x && touch pwned || true",
    "/$HOME/${PATH}",
    "/glob/*?[a-z]",
    "/back\\slash",
    '/double"quote',
    "/new\nline",
    "/tab\there",
    "/~user",
    "-rf",
    "",
]


class TestEscapePath:
    """Tests for escape_path."""

    def test_plain_path_is_single_quoted(self) -> None:
        """Test a path without quotes is wrapped in single quotes."""
        assert escape_path("/data/local/tmp") == "'/data/local/tmp'"

    def test_embedded_quote(self) -> None:
        """Test an embedded single quote closes, escapes and reopens."""
        assert escape_path("/it's") == "'/it'\\''s'"

    def test_empty_path(self) -> None:
        """Test the empty string still denotes one empty argument."""
        assert escape_path("") == "''"

    def test_metacharacters_are_not_touched(self) -> None:
        """Test characters other than the single quote pass through."""
        assert escape_path("/$x;`y` *") == "'/$x;`y` *'"

    def test_tokenizes_to_single_word(self) -> None:
        """Test every escaped path splits back into exactly that path."""
        for path in ADVERSARIAL_PATHS:
            assert shlex.split(escape_path(path)) == [path], path

    def test_deterministic(self) -> None:
        """Test escaping the same path twice gives the same text."""
        assert escape_path("/a b'c") == escape_path("/a b'c")


@requires_posix_shell
class TestEscapePathInShell:
    """Tests that run escaped paths through a real shell."""

    def test_shell_sees_exact_path(self, shell: SubprocessExecutor) -> None:
        """Test the shell receives each path as one literal argument."""
        for path in ADVERSARIAL_PATHS:
            if path.endswith("\n"):
                continue
            output = shell.run_text(f"printf '%s' {escape_path(path)}")
            assert output == path, path

    def test_no_command_injection(self, shell: SubprocessExecutor, tmp_path: Path) -> None:
        """Test injected sub-commands are never executed."""
        marker = tmp_path / "pwned"
        payloads = [
            f"$(touch {marker})",
            f"`touch {marker}`",
            f"x; touch {marker}",
            f"x' ; touch {marker} ; '",
            f"x && touch {marker}",
        ]
        for payload in payloads:
            target = tmp_path / payload
            shell.run_bool(f"[ -e {escape_path(str(target))} ]")
            shell.run_bool(f"echo -n > {escape_path(str(tmp_path / 'out'))}")

        assert not marker.exists()

"""Command catalog for shell-backed path operations.

Each operation on a :class:`~shellpath.path.ShellPath` is one entry of this
catalog. A template always has a single-line form, which is interpreted by
the shell and therefore receives escaped paths. Templates that are one
plain command also carry an argument-vector form, which receives raw paths
and is used when the executor can run argument lists directly.

Placeholders use :class:`string.Template` syntax and are substituted in a
single pass:

- ``$path``: the entity's path (escaped in line form, raw in argv form).
- ``$dest``: the second path of a two-path operation.
- ``$fmt``, ``$digits``, ``$stamp``: operation parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from string import Template

__all__ = [
    "CATALOG",
    "CAN_EXECUTE",
    "CAN_READ",
    "CAN_WRITE",
    "CHMOD",
    "CLEAR",
    "CREATE_NEW_FILE",
    "CommandTemplate",
    "DELETE",
    "DELETE_RECURSIVE",
    "EXISTS",
    "IS_BLOCK",
    "IS_CHARACTER",
    "IS_DIR",
    "IS_FILE",
    "IS_SYMLINK",
    "LIST",
    "MKDIR",
    "MKDIRS",
    "MODE",
    "MTIME",
    "Mode",
    "READLINK",
    "RENAME",
    "SIZE",
    "STAT_FS",
    "TOUCH",
]


class Mode(str, Enum):
    """How the executor result of a template is consumed."""

    TEXT = "text"
    BOOL = "bool"


@dataclass(frozen=True)
class CommandTemplate:
    """A fixed command pattern with path placeholders.

    Attributes:
        name: Operation name, used in log messages.
        line: Shell line pattern.
        mode: Whether the operation reads output or only the exit status.
        argv: Argument-vector pattern, or None when the operation needs
            shell syntax (tests, ``&&``/``||`` chains, redirections).
    """

    name: str
    line: str
    mode: Mode
    argv: tuple[str, ...] | None = None

    @property
    def supports_argv(self) -> bool:
        """Whether the template can run without a shell interpreter."""
        return self.argv is not None

    def render(self, path: str, **values: str) -> str:
        """Build the shell line.

        Args:
            path: The already escaped path.
            **values: Remaining placeholder values. Paths among them must be
                escaped as well.

        Returns:
            The command line.

        Raises:
            KeyError: If a placeholder has no value.
        """
        return Template(self.line).substitute(values, path=path)

    def render_argv(self, path: str, **values: str) -> list[str]:
        """Build the argument vector.

        Args:
            path: The raw, unescaped path.
            **values: Remaining placeholder values, unescaped.

        Returns:
            The argument list.

        Raises:
            ValueError: If the template has no argv form.
        """
        if self.argv is None:
            raise ValueError(f"Command '{self.name}' requires a shell interpreter")
        return [Template(arg).substitute(values, path=path) for arg in self.argv]


# Predicates
CAN_EXECUTE = CommandTemplate("can_execute", "[ -x $path ]", Mode.BOOL)
CAN_READ = CommandTemplate("can_read", "[ -r $path ]", Mode.BOOL)
CAN_WRITE = CommandTemplate("can_write", "[ -w $path ]", Mode.BOOL)
EXISTS = CommandTemplate("exists", "[ -e $path ]", Mode.BOOL)
IS_DIR = CommandTemplate("is_dir", "[ -d $path ]", Mode.BOOL)
IS_FILE = CommandTemplate("is_file", "[ -f $path ]", Mode.BOOL)
IS_BLOCK = CommandTemplate("is_block", "[ -b $path ]", Mode.BOOL)
IS_CHARACTER = CommandTemplate("is_character", "[ -c $path ]", Mode.BOOL)
IS_SYMLINK = CommandTemplate("is_symlink", "[ -L $path ]", Mode.BOOL)

# Queries
READLINK = CommandTemplate(
    "readlink", "readlink -f $path", Mode.TEXT, ("readlink", "-f", "$path")
)
STAT_FS = CommandTemplate(
    "stat_fs", "stat -fc '%S $fmt' $path", Mode.TEXT, ("stat", "-fc", "%S $fmt", "$path")
)
MTIME = CommandTemplate("mtime", "stat -c '%Y' $path", Mode.TEXT, ("stat", "-c", "%Y", "$path"))
SIZE = CommandTemplate("size", "stat -c '%s' $path", Mode.TEXT, ("stat", "-c", "%s", "$path"))
MODE = CommandTemplate("mode", "stat -c '%a' $path", Mode.TEXT, ("stat", "-c", "%a", "$path"))
LIST = CommandTemplate("list", "ls -a $path", Mode.TEXT, ("ls", "-a", "$path"))

# Mutations
CREATE_NEW_FILE = CommandTemplate(
    "create_new_file", "[ ! -e $path ] && echo -n > $path", Mode.BOOL
)
DELETE = CommandTemplate("delete", "rm -f $path || rmdir -f $path", Mode.BOOL)
DELETE_RECURSIVE = CommandTemplate(
    "delete_recursive", "rm -rf $path", Mode.BOOL, ("rm", "-rf", "$path")
)
CLEAR = CommandTemplate("clear", "echo -n > $path", Mode.BOOL)
MKDIR = CommandTemplate("mkdir", "mkdir $path", Mode.BOOL, ("mkdir", "$path"))
MKDIRS = CommandTemplate("mkdirs", "mkdir -p $path", Mode.BOOL, ("mkdir", "-p", "$path"))
RENAME = CommandTemplate("rename", "mv -f $path $dest", Mode.BOOL, ("mv", "-f", "$path", "$dest"))
CHMOD = CommandTemplate("chmod", "chmod $digits $path", Mode.BOOL, ("chmod", "$digits", "$path"))
TOUCH = CommandTemplate("touch", "[ -e $path ] && touch -t $stamp $path", Mode.BOOL)

CATALOG: tuple[CommandTemplate, ...] = (
    CAN_EXECUTE,
    CAN_READ,
    CAN_WRITE,
    CREATE_NEW_FILE,
    DELETE,
    DELETE_RECURSIVE,
    CLEAR,
    EXISTS,
    IS_DIR,
    IS_FILE,
    IS_BLOCK,
    IS_CHARACTER,
    IS_SYMLINK,
    READLINK,
    STAT_FS,
    MTIME,
    SIZE,
    MODE,
    MKDIR,
    MKDIRS,
    RENAME,
    CHMOD,
    TOUCH,
    LIST,
)

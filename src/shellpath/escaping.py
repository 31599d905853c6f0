"""Shell quoting for filesystem paths.

Every path that ends up on a shell command line passes through
:func:`escape_path`. Nothing else in the package quotes paths.
"""

from __future__ import annotations

__all__ = ["escape_path"]

_QUOTE = "'"
_ESCAPED_QUOTE = "'\\''"


def escape_path(path: str) -> str:
    """Render a path as a single-quoted shell word.

    The path is wrapped in single quotes. An embedded single quote closes
    the quoted run, adds a backslash-escaped quote and reopens the run, so
    the result always denotes exactly one argument with no expansion.

    Args:
        path: Any path string, including spaces, quotes or metacharacters.

    Returns:
        The quoted form, safe to splice at an argument position.

    Example:
        >>> escape_path("/data/it's here")
        "'/data/it'\\\\''s here'"
    """
    return _QUOTE + path.replace(_QUOTE, _ESCAPED_QUOTE) + _QUOTE

"""Rich console integration for terminal output.

All Rich usage in the project goes through this module so the rest of the
code can print markup with :func:`rprint` and check :func:`ui_has_rich`
before emitting styled renderables. Setting ``DEVENV_PLAIN_OUTPUT`` (or
``NO_COLOR``) switches every helper to plain ``print`` output, which keeps
logs captured by schedulers readable.

Canonical Usage
---------------
>>> from devenv.setup.console_helpers import rprint, ui_has_rich
>>> rprint("Hello Rich!")
Hello Rich!
"""

from __future__ import annotations

import os
import re
from typing import IO, Any

from rich import print as _rich_print
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

_RICH_CONSOLE: Console = Console()

_MARKUP_TAG = re.compile(r"\[/?[a-z][a-z0-9 _.#-]*\]")


def ui_has_rich() -> bool:
    r"""Return True when styled Rich output should be used.

    Returns
    -------
    bool
        False when plain output was requested through ``DEVENV_PLAIN_OUTPUT``
        or ``NO_COLOR``; True otherwise.

    Examples
    --------
    >>> import os
    >>> os.environ["DEVENV_PLAIN_OUTPUT"] = "1"
    >>> ui_has_rich()
    False
    >>> del os.environ["DEVENV_PLAIN_OUTPUT"]
    """
    if os.environ.get("DEVENV_PLAIN_OUTPUT") or os.environ.get("NO_COLOR"):
        return False
    return _RICH_CONSOLE is not None


def strip_markup(text: str) -> str:
    """Remove Rich markup tags such as ``[green]`` from ``text``.

    Examples
    --------
    >>> strip_markup("[bold red]x[/bold red] y")
    'x y'
    """
    return _MARKUP_TAG.sub("", text)


def rprint(
    *objects: Any,
    sep: str = " ",
    end: str = "\n",
    file: IO[str] | None = None,
    flush: bool = False,
) -> None:
    r"""Print objects using Rich when enabled, builtin print otherwise.

    Parameters mirror the builtin :func:`print`. In plain mode string
    arguments have their markup tags removed.

    Examples
    --------
    >>> import io
    >>> buf = io.StringIO()
    >>> rprint("FileOut", file=buf)
    >>> "FileOut" in buf.getvalue()
    True
    """
    if ui_has_rich():
        _rich_print(*objects, sep=sep, end=end, file=file, flush=flush)
        return
    plain = [strip_markup(o) if isinstance(o, str) else o for o in objects]
    print(*plain, sep=sep, end=end, file=file, flush=flush)


__all__ = [
    "_RICH_CONSOLE",
    "Console",
    "Panel",
    "Rule",
    "Table",
    "rprint",
    "strip_markup",
    "ui_has_rich",
]

"""Capability probes for external commands.

These helpers are side-effect free and never raise: a lookup failure of
any kind is reported as "not found".
"""

from __future__ import annotations

import logging
import os
import shutil

logger = logging.getLogger(__name__)


def command_path(name: str, path: str | None = None) -> str | None:
    """Return the resolved location of ``name`` on PATH, or None.

    Parameters
    ----------
    name : str
        Command to look up (e.g. ``"winget"``). ``PATHEXT`` is honoured on
        Windows so ``"code"`` resolves to ``code.cmd``.
    path : str | None, optional
        PATH string to search instead of the process ``PATH``.

    Returns
    -------
    str | None
        Absolute path of the executable, or None when it cannot be found.

    Examples
    --------
    >>> command_path("definitely-not-a-command-xyz") is None
    True
    """
    if not name:
        return None
    try:
        found = shutil.which(name, path=path)
    except Exception as err:  # malformed PATH entries, permission errors
        logger.debug("Lookup of %s failed: %s", name, err)
        return None
    return found


def command_exists(name: str, path: str | None = None) -> bool:
    """Return True if ``name`` resolves to an executable on PATH."""
    return command_path(name, path=path) is not None


def file_exists(target: str | os.PathLike[str]) -> bool:
    """Return True if ``target`` is an existing file; never raises."""
    try:
        return os.path.isfile(target)
    except (OSError, ValueError):
        return False


__all__ = ["command_exists", "command_path", "file_exists"]

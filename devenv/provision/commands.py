"""Synchronous subprocess execution for package managers and installers.

Every external call is awaited to completion; no timeout is applied, so a
hung installer blocks the run. Exit codes are captured in a
:class:`CommandResult` and turned into :class:`ExternalCommandError` by
callers that need the step to fail.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from os import PathLike

from devenv.exceptions import ExternalCommandError

logger = logging.getLogger(__name__)

# Shell convention for "command not found" / "cannot execute".
EXIT_NOT_FOUND = 127
EXIT_NOT_EXECUTABLE = 126

_STDERR_TAIL = 400


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def describe(self) -> str:
        """Return a short, log-friendly description of a failure."""
        tail = (self.stderr or self.stdout).strip()[-_STDERR_TAIL:]
        text = f"exit code {self.returncode}"
        return f"{text}: {tail}" if tail else text

    def check(self, what: str) -> "CommandResult":
        """Return ``self`` or raise :class:`ExternalCommandError` on failure.

        Parameters
        ----------
        what : str
            Human-readable name of the operation, used in the message.
        """
        if not self.ok:
            raise ExternalCommandError(
                f"{what} failed ({self.describe()})",
                returncode=self.returncode,
                context={"argv": list(self.argv)},
            )
        return self


def format_command(argv: Sequence[str | PathLike[str]]) -> str:
    return subprocess.list2cmdline([str(a) for a in argv])


def run_command(argv: Sequence[str | PathLike[str]]) -> CommandResult:
    """Run ``argv`` and wait for it to exit.

    Parameters
    ----------
    argv : Sequence[str | PathLike[str]]
        Program and arguments. No shell is involved.

    Returns
    -------
    CommandResult
        Captured exit code and output. A missing executable is reported as
        exit code 127 and an OS-level launch failure as 126; neither raises.

    Examples
    --------
    >>> run_command(["definitely-not-a-command-xyz"]).returncode
    127
    """
    args = tuple(str(a) for a in argv)
    logger.info("Running: %s", format_command(args))
    try:
        proc = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except FileNotFoundError:
        logger.error("Executable not found: %s", args[0] if args else "<empty>")
        return CommandResult(args, EXIT_NOT_FOUND, "", f"{args[0] if args else ''}: not found")
    except OSError as err:
        logger.error("Could not launch %s: %s", args[0], err)
        return CommandResult(args, EXIT_NOT_EXECUTABLE, "", str(err))

    result = CommandResult(args, proc.returncode, proc.stdout or "", proc.stderr or "")
    if result.ok:
        logger.debug("Command succeeded: %s", args[0])
    else:
        logger.warning("Command %s returned %s", args[0], result.describe())
    return result


__all__ = [
    "EXIT_NOT_EXECUTABLE",
    "EXIT_NOT_FOUND",
    "CommandResult",
    "format_command",
    "run_command",
]

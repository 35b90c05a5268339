"""Host adapter bundling every side effect the provisioner performs.

The orchestrator and the install steps only talk to the machine through a
host object: command lookup, file checks, subprocess execution, downloads,
sleeping and the persisted environment store. Tests pass a fake host with
the same attributes; ``--dry-run`` uses :class:`SystemHost` with
``dry_run=True`` and an in-memory store.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import MutableMapping, Sequence
from pathlib import Path

from devenv.config import DEFAULT_DOWNLOAD_TIMEOUT

from . import commands as _commands
from . import download as _download
from . import probe
from .environment import EnvironmentStore

logger = logging.getLogger(__name__)


class SystemHost:
    """Real-machine implementation of the host contract.

    Parameters
    ----------
    store : EnvironmentStore
        Persisted PATH store (registry on Windows, memory for dry runs).
    environ : MutableMapping[str, str] | None, optional
        Process environment; defaults to :data:`os.environ`. Command lookups
        use its ``PATH`` so they see the result of a refresh.
    dry_run : bool, optional
        Log commands and downloads instead of performing them.
    """

    def __init__(
        self,
        store: EnvironmentStore,
        environ: MutableMapping[str, str] | None = None,
        *,
        dry_run: bool = False,
    ) -> None:
        self.store = store
        self.environ = os.environ if environ is None else environ
        self.dry_run = dry_run

    def which(self, name: str) -> str | None:
        return probe.command_path(name, path=self.environ.get("PATH"))

    def has_command(self, name: str) -> bool:
        return probe.command_exists(name, path=self.environ.get("PATH"))

    def exists(self, path: Path | str) -> bool:
        return probe.file_exists(path)

    def run(self, argv: Sequence[str | os.PathLike[str]]) -> _commands.CommandResult:
        if self.dry_run:
            args = tuple(str(a) for a in argv)
            logger.info("[dry-run] would run: %s", _commands.format_command(args))
            return _commands.CommandResult(args, 0)
        return _commands.run_command(argv)

    def download(
        self, url: str, dest: Path, *, timeout: float = DEFAULT_DOWNLOAD_TIMEOUT
    ) -> Path:
        if self.dry_run:
            logger.info("[dry-run] would download %s -> %s", url, dest)
            return Path(dest)
        return _download.download_file(url, Path(dest), timeout=timeout)

    def sleep(self, seconds: float) -> None:
        if self.dry_run or seconds <= 0:
            return
        logger.info("Waiting %.0f seconds for the toolchain to settle", seconds)
        time.sleep(seconds)


__all__ = ["SystemHost"]

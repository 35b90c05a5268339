"""Persisted PATH access and in-process environment refresh.

The machine- and user-scope PATH values persisted by the operating system
are the source of truth; the process's own ``PATH`` is a stale copy until
:func:`refresh_path` rebuilds it. All access to the persisted values goes
through an :class:`EnvironmentStore` so the refresher and the PATH guard
can be exercised against :class:`MemoryEnvironmentStore` in tests and dry
runs.
"""

from __future__ import annotations

import enum
import logging
import sys
from collections.abc import Mapping, MutableMapping
from typing import Protocol

from devenv.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PATH_SEPARATOR = ";"
PATH_VARIABLE = "Path"


class Scope(enum.Enum):
    """Persistence scope of an environment variable."""

    MACHINE = "machine"
    USER = "user"


class EnvironmentStore(Protocol):
    """Read/write access to persisted PATH values."""

    def read(self, scope: Scope) -> str: ...

    def write(self, scope: Scope, value: str) -> None: ...


class MemoryEnvironmentStore:
    """In-memory store used by tests and ``--dry-run``.

    Examples
    --------
    >>> store = MemoryEnvironmentStore(machine="C:\\\\Windows", user="")
    >>> store.read(Scope.MACHINE)
    'C:\\\\Windows'
    """

    def __init__(self, machine: str = "", user: str = "") -> None:
        self.values: dict[Scope, str] = {Scope.MACHINE: machine, Scope.USER: user}
        self.writes: list[tuple[Scope, str]] = []

    def read(self, scope: Scope) -> str:
        return self.values.get(scope, "")

    def write(self, scope: Scope, value: str) -> None:
        self.values[scope] = value
        self.writes.append((scope, value))


class RegistryEnvironmentStore:
    """Windows registry backed store.

    Machine values are read from ``HKLM\\...\\Session Manager\\Environment``
    and user values from ``HKCU\\Environment``. Only the user scope may be
    written; a write broadcasts ``WM_SETTINGCHANGE`` so new shells and
    Explorer pick up the change.
    """

    _MACHINE_SUBKEY = r"SYSTEM\CurrentControlSet\Control\Session Manager\Environment"
    _USER_SUBKEY = "Environment"

    def __init__(self) -> None:
        if sys.platform != "win32":
            raise ConfigurationError(
                "The registry environment store is only available on Windows",
                context={"platform": sys.platform},
            )
        import winreg

        self._winreg = winreg

    def _location(self, scope: Scope) -> tuple[int, str]:
        if scope is Scope.MACHINE:
            return self._winreg.HKEY_LOCAL_MACHINE, self._MACHINE_SUBKEY
        return self._winreg.HKEY_CURRENT_USER, self._USER_SUBKEY

    def _query(self, scope: Scope) -> tuple[str, int]:
        hive, subkey = self._location(scope)
        winreg = self._winreg
        try:
            with winreg.OpenKey(hive, subkey, 0, winreg.KEY_READ) as key:
                value, kind = winreg.QueryValueEx(key, PATH_VARIABLE)
        except FileNotFoundError:
            return "", winreg.REG_EXPAND_SZ
        return str(value or ""), kind

    def read(self, scope: Scope) -> str:
        return self._query(scope)[0]

    def write(self, scope: Scope, value: str) -> None:
        if scope is not Scope.USER:
            raise ConfigurationError(
                "Refusing to write the machine-scope PATH",
                context={"scope": scope.value},
            )
        winreg = self._winreg
        _, kind = self._query(scope)
        hive, subkey = self._location(scope)
        with winreg.CreateKeyEx(hive, subkey, 0, winreg.KEY_SET_VALUE) as key:
            winreg.SetValueEx(key, PATH_VARIABLE, 0, kind, value)
        logger.info("Persisted user PATH (%d characters)", len(value))
        self._broadcast_change()

    def expand(self, value: str) -> str:
        """Expand ``%VAR%`` references the way the shell does."""
        return self._winreg.ExpandEnvironmentStrings(value)

    @staticmethod
    def _broadcast_change() -> None:
        import ctypes
        from ctypes import wintypes

        hwnd_broadcast = 0xFFFF
        wm_settingchange = 0x001A
        smto_abortifhung = 0x0002
        result = wintypes.DWORD()
        sent = ctypes.windll.user32.SendMessageTimeoutW(
            hwnd_broadcast,
            wm_settingchange,
            0,
            "Environment",
            smto_abortifhung,
            5000,
            ctypes.byref(result),
        )
        if not sent:
            logger.warning("WM_SETTINGCHANGE broadcast did not complete")


def path_contains(path_value: str, entry: str) -> bool:
    """Return True if ``entry`` already occurs in ``path_value``.

    The comparison is a case-insensitive substring match, mirroring how
    Windows treats paths.

    Examples
    --------
    >>> path_contains("C:\\\\Windows;C:\\\\msys64\\\\ucrt64\\\\bin", "c:\\\\MSYS64\\\\ucrt64\\\\bin")
    True
    >>> path_contains("", "C:\\\\x")
    False
    """
    if not entry:
        return True
    return entry.casefold() in (path_value or "").casefold()


def append_path_entry(
    store: EnvironmentStore, entry: str, scope: Scope = Scope.USER
) -> bool:
    """Append ``entry`` to the persisted PATH of ``scope`` unless present.

    Parameters
    ----------
    store : EnvironmentStore
        Store holding the persisted values.
    entry : str
        Directory to add.
    scope : Scope, optional
        Scope to update, user by default.

    Returns
    -------
    bool
        True when the value was written, False when the entry was already
        present (the store is not written in that case).
    """
    current = store.read(scope)
    if path_contains(current, entry):
        logger.info("PATH (%s) already contains %s", scope.value, entry)
        return False
    if not current:
        updated = entry
    elif current.endswith(PATH_SEPARATOR):
        updated = current + entry
    else:
        updated = current + PATH_SEPARATOR + entry
    store.write(scope, updated)
    logger.info("Appended %s to %s PATH", entry, scope.value)
    return True


def refresh_path(
    store: EnvironmentStore, environ: MutableMapping[str, str]
) -> str:
    """Rebuild the process PATH from the persisted machine and user values.

    The machine value comes first, then the user value, joined by ``;``;
    empty scopes are left out. Stores that define ``expand`` get ``%VAR%``
    references expanded before the value reaches the process.

    Returns
    -------
    str
        The new process PATH.
    """
    expand = getattr(store, "expand", lambda value: value)
    parts = [store.read(Scope.MACHINE), store.read(Scope.USER)]
    joined = PATH_SEPARATOR.join(p.strip(PATH_SEPARATOR) for p in parts if p)
    value = expand(joined)
    environ["PATH"] = value
    logger.debug("Process PATH refreshed (%d entries)", len(value.split(PATH_SEPARATOR)))
    return value


def store_from_process(environ: Mapping[str, str]) -> MemoryEnvironmentStore:
    """Seed an in-memory store from the current process PATH.

    The whole process PATH is treated as machine scope so a dry run still
    resolves commands after :func:`refresh_path`.
    """
    return MemoryEnvironmentStore(machine=environ.get("PATH", ""), user="")


__all__ = [
    "EnvironmentStore",
    "MemoryEnvironmentStore",
    "RegistryEnvironmentStore",
    "Scope",
    "append_path_entry",
    "path_contains",
    "refresh_path",
    "store_from_process",
]

"""Exception types raised by the provisioning steps.

``AppError`` is the root; each subclass names one way a step can go wrong
(bad configuration, a failing external command, an unreachable download,
an unwritable settings file). The orchestrator turns an ``AppError`` from
a step into a failed step result. Other exceptions are bugs and propagate.
"""

from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    """Root of the provisioner's error types.

    Parameters
    ----------
    code : str
        Upper-case identifier such as ``'DOWNLOAD_ERROR'``.
    message : str
        Text shown in the step detail and the log.
    context : Mapping[str, Any] | None, optional
        Extra key/value pairs (paths, exit codes, URLs) attached to log
        records.
    transient : bool, optional
        True when re-running the tool later might succeed, e.g. a network
        hiccup.

    Examples
    --------
    >>> err = AppError('PATH_ERROR', 'registry locked', context={'scope': 'user'})
    >>> str(err)
    'PATH_ERROR: registry locked'
    """

    __slots__ = ("code", "message", "context", "transient")

    def __init__(
        self,
        code: str,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context or {})
        self.transient = bool(transient)

    def __str__(self) -> str:
        """Return ``"<code>: <message>"``."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return the error as a dict suitable for ``extra=`` in log calls."""
        return {
            "error_code": self.code,
            "message": self.message,
            "context": self.context,
            "is_transient": self.transient,
        }


class ConfigurationError(AppError):
    """Raised for invalid or missing configuration, or an unsupported host."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(
            "CONFIGURATION_ERROR", message, context=context, transient=False
        )


class ExternalCommandError(AppError):
    """Raised when a package manager, installer or editor CLI call fails."""

    __slots__ = ("returncode",)

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        merged = dict(context or {})
        if returncode is not None:
            merged.setdefault("returncode", returncode)
        super().__init__(
            "EXTERNAL_COMMAND_ERROR", message, context=merged, transient=False
        )
        self.returncode = returncode


class DownloadError(AppError):
    """Raised when an installer artifact cannot be fetched."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        transient: bool = True,
    ) -> None:
        super().__init__("DOWNLOAD_ERROR", message, context=context, transient=transient)


class SettingsError(AppError):
    """Raised when the editor settings file cannot be read or written."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("SETTINGS_ERROR", message, context=context, transient=False)

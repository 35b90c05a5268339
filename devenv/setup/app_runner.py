"""Entrypoint and CLI helpers for the provisioner.

Parses the command line, configures logging, resolves the runtime
configuration, builds the host adapter and hands over to the orchestrator.
Invoked without arguments the tool provisions the machine with the
defaults; the flags only adjust that run.

Examples
--------
>>> import devenv.setup.app_runner as runner
>>> args = runner.parse_cli_args(["--dry-run", "--lang", "sv"])
>>> args.dry_run, args.lang
(True, 'sv')
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from devenv.config import (
    DEFAULT_TOOLCHAIN_FLAVOUR,
    LOG_DIR,
    LOG_FILENAME_PROVISION,
    LOG_FORMAT,
    TOOLCHAIN_FLAVOURS,
)
from devenv.exceptions import AppError
from devenv.provision.environment import (
    RegistryEnvironmentStore,
    store_from_process,
)
from devenv.provision.host import SystemHost
from devenv.provision.runtime import ProvisionConfig
from devenv.setup import i18n
from devenv.setup.ui.basic import ui_error, ui_header, ui_warning

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STEP_FAILED = 1
EXIT_CONFIG_ERROR = 2


def configure_logging(level: str = "INFO", enable_file: bool = True) -> None:
    r"""Configure root logging for a provisioning run.

    All existing root handlers are replaced by a stderr stream handler and,
    unless disabled, a file handler appending to ``LOG_DIR/provision.log``.
    File handler creation failures are ignored so a read-only checkout still
    runs. ``DISABLE_FILE_LOGS`` in the environment also disables the file.

    Parameters
    ----------
    level : str, optional
        Logging level name, e.g. ``"DEBUG"``. Defaults to ``"INFO"``.
    enable_file : bool, optional
        Whether to add the file handler. Defaults to True.

    Examples
    --------
    >>> configure_logging("DEBUG", enable_file=False)
    """
    for h in logging.root.handlers[:]:
        logging.root.removeHandler(h)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if enable_file and not os.environ.get("DISABLE_FILE_LOGS"):
        try:
            LOG_DIR.mkdir(exist_ok=True)
            handlers.insert(
                0,
                logging.FileHandler(
                    LOG_DIR / LOG_FILENAME_PROVISION, mode="a", encoding="utf-8"
                ),
            )
        except OSError:
            pass
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def parse_cli_args(argv: list[str] | None = None) -> argparse.Namespace:
    r"""Parse command-line arguments.

    Parameters
    ----------
    argv : list of str or None, optional
        Argument strings (as from ``sys.argv[1:]``); None uses ``sys.argv``.

    Returns
    -------
    argparse.Namespace
        Fields ``lang``, ``flavour``, ``fallback_manual``, ``no_backup``,
        ``dry_run``, ``log_level`` and ``no_file_log``.
    """
    parser = argparse.ArgumentParser(
        description="Install VS Code, MSYS2 GCC and Code Runner on Windows"
    )
    parser.add_argument("--lang", choices=sorted(i18n.TEXTS), default="en")
    parser.add_argument(
        "--flavour",
        choices=sorted(TOOLCHAIN_FLAVOURS),
        default=None,
        help=f"MSYS2 environment to install GCC for (default {DEFAULT_TOOLCHAIN_FLAVOUR})",
    )
    parser.add_argument(
        "--fallback-manual",
        action="store_true",
        help="Retry failed winget installs with the direct installers",
    )
    parser.add_argument(
        "--no-backup",
        action="store_true",
        help="Do not back up an unparsable settings.json before replacing it",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log commands and downloads without running them",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("DEVENV_LOG_LEVEL", "WARNING"),
        help="Logging level for stderr and the log file",
    )
    parser.add_argument("--no-file-log", action="store_true")
    return parser.parse_args(argv)


def build_host(dry_run: bool) -> SystemHost:
    """Return the host adapter for this run.

    Raises
    ------
    ConfigurationError
        When not dry-running on a platform without the Windows registry.
    """
    if dry_run:
        environ = dict(os.environ)
        return SystemHost(store_from_process(environ), environ, dry_run=True)
    return SystemHost(RegistryEnvironmentStore())


def run(args: argparse.Namespace) -> int:
    r"""Run one provisioning pass and return the process exit code.

    Returns
    -------
    int
        ``0`` when every step succeeded or was already satisfied, ``1`` when
        any step failed, ``2`` for configuration errors detected before any
        step ran.
    """
    # Imported here so tests can patch ``orchestrator.run_provisioning``.
    from devenv.setup import orchestrator

    i18n.set_language(args.lang)
    ui_header(i18n.translate("welcome"))
    if args.dry_run:
        ui_warning(i18n.translate("dry_run_notice"))

    if sys.platform != "win32" and not args.dry_run:
        ui_error(i18n.translate("unsupported_platform"))
        return EXIT_CONFIG_ERROR
    try:
        cfg = ProvisionConfig.from_env(flavour=args.flavour, load_env_file=True)
        host = build_host(args.dry_run)
    except AppError as err:
        logger.error("%s", err, extra={"context": err.to_dict()})
        ui_error(f"{i18n.translate('config_error')}: {err.message}")
        return EXIT_CONFIG_ERROR

    report = orchestrator.run_provisioning(
        cfg,
        host,
        fallback_manual=args.fallback_manual,
        backup=not args.no_backup,
    )
    return EXIT_OK if report.ok else EXIT_STEP_FAILED


def entry_point(argv: list[str] | None = None) -> int:
    """Parse arguments, configure logging and run; returns the exit code."""
    args = parse_cli_args(argv)
    configure_logging(args.log_level, enable_file=not args.no_file_log)
    try:
        return run(args)
    except KeyboardInterrupt:
        ui_error("Interrupted")
        return 130


def main() -> None:
    """Console-script entrypoint."""
    sys.exit(entry_point())


__all__ = [
    "build_host",
    "configure_logging",
    "entry_point",
    "main",
    "parse_cli_args",
    "run",
]

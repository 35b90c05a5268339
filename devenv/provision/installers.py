"""Concrete provisioning steps.

Builds the install-target table (editor, toolchain, compiler) and the
guarded steps that do not fit the install-target shape: the user PATH
entry, the editor extension and the editor settings. Every step returns a
:class:`~devenv.provision.targets.StepResult`; failures of external tools
never raise out of this module.
"""

from __future__ import annotations

import logging
from typing import Any

from devenv.config import (
    CODE_RUNNER_EXTENSION_ID,
    EDITOR_COMMAND,
    EDITOR_INSTALLER_ARGS,
    EDITOR_INSTALLER_FILENAME,
    EDITOR_INSTALLER_URL,
    EDITOR_WINGET_ID,
    TOOLCHAIN_INSTALLER_FILENAME,
    TOOLCHAIN_INSTALLER_URL,
    TOOLCHAIN_WINGET_ID,
    WINGET_COMMAND,
    WINGET_INSTALL_FLAGS,
)
from devenv.exceptions import AppError, ConfigurationError

from .environment import Scope, append_path_entry, path_contains
from .runtime import ProvisionConfig
from .settings import patch_settings, settings_satisfied
from .targets import InstallTarget, StepResult, StepStatus

logger = logging.getLogger(__name__)


def winget_install(host: Any, package_id: str) -> None:
    """Install ``package_id`` through winget, raising on a non-zero exit."""
    winget = host.which(WINGET_COMMAND) or WINGET_COMMAND
    host.run(
        [winget, "install", "-e", "--id", package_id, *WINGET_INSTALL_FLAGS]
    ).check(f"winget install {package_id}")


def editor_present(cfg: ProvisionConfig, host: Any) -> bool:
    return (
        host.exists(cfg.editor_user_executable)
        or host.exists(cfg.editor_system_executable)
        or host.which(EDITOR_COMMAND) is not None
    )


def install_editor_manually(cfg: ProvisionConfig, host: Any) -> None:
    installer = host.download(
        EDITOR_INSTALLER_URL,
        cfg.download_dir / EDITOR_INSTALLER_FILENAME,
        timeout=cfg.download_timeout,
    )
    host.run([installer, *EDITOR_INSTALLER_ARGS]).check("Editor installer")


def install_toolchain_manually(cfg: ProvisionConfig, host: Any) -> None:
    installer = host.download(
        TOOLCHAIN_INSTALLER_URL,
        cfg.download_dir / TOOLCHAIN_INSTALLER_FILENAME,
        timeout=cfg.download_timeout,
    )
    host.run(
        [
            installer,
            "install",
            "--root",
            str(cfg.msys2_root),
            "--confirm-command",
            "--accept-messages",
        ]
    ).check("MSYS2 installer")


def install_compiler(cfg: ProvisionConfig, host: Any) -> None:
    """Install the flavour's GCC package through pacman in a login shell."""
    shell = cfg.toolchain_shell
    if not host.dry_run and not host.exists(shell):
        raise ConfigurationError(
            f"MSYS2 shell not found at {shell}", context={"path": str(shell)}
        )
    package = cfg.flavour.compiler_package
    host.run(
        [str(shell), "-lc", f"pacman -S --needed --noconfirm {package}"]
    ).check(f"pacman install {package}")


def build_install_targets(cfg: ProvisionConfig, host: Any) -> list[InstallTarget]:
    """Return the editor and toolchain targets, in install order."""
    return [
        InstallTarget(
            name="editor",
            detect=lambda: editor_present(cfg, host),
            manual_install=lambda: install_editor_manually(cfg, host),
            fast_install=lambda: winget_install(host, EDITOR_WINGET_ID),
        ),
        InstallTarget(
            name="toolchain",
            detect=lambda: host.exists(cfg.toolchain_shell),
            manual_install=lambda: install_toolchain_manually(cfg, host),
            fast_install=lambda: winget_install(host, TOOLCHAIN_WINGET_ID),
        ),
    ]


def compiler_target(cfg: ProvisionConfig, host: Any) -> InstallTarget:
    # Same action on both paths: the MSYS2 installer ships without compilers.
    return InstallTarget(
        name="compiler",
        detect=lambda: host.exists(cfg.compiler_executable),
        manual_install=lambda: install_compiler(cfg, host),
        path_entry=cfg.path_entry(),
        manual_route="pacman",
    )


def ensure_path_entry(host: Any, entry: str) -> StepResult:
    """Append ``entry`` to the persisted user PATH unless already present."""
    store = host.store
    try:
        if path_contains(store.read(Scope.USER), entry):
            return StepResult("path", StepStatus.ALREADY, entry)
        append_path_entry(store, entry, Scope.USER)
    except (AppError, OSError) as err:
        logger.error("Could not update user PATH: %s", err)
        return StepResult("path", StepStatus.FAILED, str(err))
    return StepResult("path", StepStatus.DONE, entry)


def ensure_extension(
    host: Any, extension_id: str = CODE_RUNNER_EXTENSION_ID
) -> StepResult:
    """Install an editor extension unless the editor already lists it."""
    name = "extension"
    code = host.which(EDITOR_COMMAND)
    if code is None:
        message = f"editor command '{EDITOR_COMMAND}' not found on PATH"
        if host.dry_run:
            return StepResult(name, StepStatus.SKIPPED, message)
        logger.error(message)
        return StepResult(name, StepStatus.FAILED, message)

    listed = host.run([code, "--list-extensions"])
    if not listed.ok:
        return StepResult(
            name, StepStatus.FAILED, f"listing extensions failed ({listed.describe()})"
        )
    installed = {line.strip().casefold() for line in listed.stdout.splitlines()}
    if extension_id.casefold() in installed:
        return StepResult(name, StepStatus.ALREADY, extension_id)

    try:
        host.run([code, "--install-extension", extension_id]).check(
            f"Installing extension {extension_id}"
        )
    except AppError as err:
        logger.error("%s", err)
        return StepResult(name, StepStatus.FAILED, err.message)
    return StepResult(name, StepStatus.DONE, extension_id)


def ensure_settings(
    cfg: ProvisionConfig, *, backup: bool = True, dry_run: bool = False
) -> StepResult:
    """Force the configured editor settings into the settings file."""
    name = "settings"
    if settings_satisfied(cfg.settings_path, cfg.forced_settings):
        return StepResult(name, StepStatus.ALREADY, str(cfg.settings_path))
    try:
        outcome = patch_settings(
            cfg.settings_path, cfg.forced_settings, backup=backup, dry_run=dry_run
        )
    except AppError as err:
        logger.error("%s", err)
        return StepResult(name, StepStatus.FAILED, err.message)
    if not outcome.changed:
        return StepResult(name, StepStatus.ALREADY, str(cfg.settings_path))
    detail = str(cfg.settings_path)
    if outcome.backed_up is not None:
        detail += f" (previous file saved to {outcome.backed_up})"
    elif outcome.recovered:
        detail += " (unparsable previous content discarded)"
    return StepResult(name, StepStatus.DONE, detail)


__all__ = [
    "build_install_targets",
    "compiler_target",
    "editor_present",
    "ensure_extension",
    "ensure_path_entry",
    "ensure_settings",
    "install_compiler",
    "install_editor_manually",
    "install_toolchain_manually",
    "winget_install",
]

"""Orchestrator for the provisioning sequence and its console output.

Runs the steps top to bottom, once:

1. capability probe for winget, which selects the fast or manual path;
2. guarded installs of the editor and the toolchain;
3. settle delay after a fresh toolchain install, then the compiler;
4. the compiler's PATH entry in the user environment;
5. process PATH refresh, so the editor CLI resolves in this session;
6. the Code Runner extension;
7. the editor settings patch;
8. summary table and completion line.

A failing step never stops later steps. The returned report carries the
exit code for the CLI.

Typical usage::

    from devenv.setup import orchestrator
    report = orchestrator.run_provisioning(cfg, host)

"""

from __future__ import annotations

import logging
from typing import Any

from devenv.config import CODE_RUNNER_EXTENSION_ID, WINGET_COMMAND
from devenv.provision.environment import refresh_path
from devenv.provision.installers import (
    build_install_targets,
    compiler_target,
    ensure_extension,
    ensure_path_entry,
    ensure_settings,
)
from devenv.provision.runtime import ProvisionConfig
from devenv.provision.targets import (
    ProvisionReport,
    StepResult,
    StepStatus,
    ensure_installed,
)
from devenv.setup import i18n
from devenv.setup.console_helpers import _RICH_CONSOLE, rprint, ui_has_rich
from devenv.setup.i18n import _ as _
from devenv.setup.ui.basic import (
    ui_already,
    ui_error,
    ui_info,
    ui_rule,
    ui_success,
    ui_warning,
)

from .status import _render_report_table, render_plain_report

logger = logging.getLogger(__name__)


def _announce(result: StepResult) -> None:
    """Print the one-line status for a finished step."""
    label = _(f"step_{result.name}")
    if result.status is StepStatus.ALREADY:
        ui_already(f"{label}: {_('status_already')}")
    elif result.status is StepStatus.DONE:
        ui_success(f"{label}: {_('status_done')}")
    elif result.status is StepStatus.SKIPPED:
        ui_warning(f"{label}: {_('status_skipped')} ({result.detail})")
    else:
        ui_error(f"{label}: {_('status_failed')} ({result.detail})")


def _record(report: ProvisionReport, result: StepResult) -> StepResult:
    logger.info("Step %s: %s %s", result.name, result.status.value, result.detail)
    _announce(result)
    return report.add(result)


def render_summary(report: ProvisionReport) -> None:
    """Print the summary table followed by the completion line."""
    ui_rule(_("summary_title"))
    if ui_has_rich() and _RICH_CONSOLE:
        _RICH_CONSOLE.print(_render_report_table(_, i18n.LANG, report))
    else:
        rprint(render_plain_report(_, i18n.LANG, report))
    if report.ok:
        ui_success(_("completed_ok"))
    else:
        ui_warning(_("completed_failed"))


def run_provisioning(
    cfg: ProvisionConfig,
    host: Any,
    *,
    fallback_manual: bool = False,
    backup: bool = True,
) -> ProvisionReport:
    r"""Provision the editor, toolchain, compiler, extension and settings.

    Parameters
    ----------
    cfg : ProvisionConfig
        Resolved paths and tunables.
    host : Any
        Host adapter (see :class:`devenv.provision.host.SystemHost`)
        providing ``has_command``, ``which``, ``exists``, ``run``,
        ``download``, ``sleep``, ``store``, ``environ`` and ``dry_run``.
    fallback_manual : bool, optional
        Retry a failed fast-path install through the manual installer.
    backup : bool, optional
        Back up an unparsable settings file before replacing it.

    Returns
    -------
    ProvisionReport
        One result per step, in execution order.
    """
    verify = not host.dry_run
    report = ProvisionReport()
    report.fast_path = host.has_command(WINGET_COMMAND)
    logger.info("Fast path available: %s", report.fast_path)
    ui_info(_("probe_fast") if report.fast_path else _("probe_manual"))

    for target in build_install_targets(cfg, host):
        _record(
            report,
            ensure_installed(
                target,
                fast=report.fast_path,
                fallback_manual=fallback_manual,
                verify=verify,
            ),
        )

    compiler = compiler_target(cfg, host)
    toolchain = report.get("toolchain")
    if toolchain is not None and toolchain.failed:
        _record(
            report,
            StepResult(compiler.name, StepStatus.SKIPPED, "MSYS2 is not installed"),
        )
    else:
        if toolchain is not None and toolchain.status is StepStatus.DONE:
            ui_info(_("settle_wait").format(seconds=cfg.settle_seconds))
            host.sleep(cfg.settle_seconds)
        _record(report, ensure_installed(compiler, fast=False, verify=verify))

    if compiler.path_entry:
        _record(report, ensure_path_entry(host, compiler.path_entry))

    refresh_path(host.store, host.environ)
    ui_info(_("refresh_path"))

    _record(report, ensure_extension(host, CODE_RUNNER_EXTENSION_ID))
    _record(report, ensure_settings(cfg, backup=backup, dry_run=host.dry_run))

    render_summary(report)
    logger.info("Provisioning finished: ok=%s", report.ok)
    return report


__all__ = ["render_summary", "run_provisioning"]

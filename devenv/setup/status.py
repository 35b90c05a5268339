"""Rendering helpers for step status labels and the summary table.

Provides localized status labels and a table renderable for the final
report, built with Rich when styled output is enabled and as a plain
column-aligned text block otherwise.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from rich.markup import escape

from devenv.provision.targets import StepResult, StepStatus

_STATUS_STYLE: dict[StepStatus, str] = {
    StepStatus.ALREADY: "dim",
    StepStatus.DONE: "green",
    StepStatus.FAILED: "bold red",
    StepStatus.SKIPPED: "yellow",
}


def _status_label(lang: str, status: StepStatus) -> str:
    """Return a localized, icon-prefixed label for ``status``.

    Parameters
    ----------
    lang : str
        Language code (``'en'`` or ``'sv'``).
    status : StepStatus
        Step outcome.

    Examples
    --------
    >>> _status_label("sv", StepStatus.DONE)
    '✅ Klart'
    """
    if lang == "sv":
        labels = {
            StepStatus.ALREADY: "• Fanns redan",
            StepStatus.DONE: "✅ Klart",
            StepStatus.FAILED: "❌ Fel",
            StepStatus.SKIPPED: "⏭  Hoppades över",
        }
    else:
        labels = {
            StepStatus.ALREADY: "• Already present",
            StepStatus.DONE: "✅ Done",
            StepStatus.FAILED: "❌ Error",
            StepStatus.SKIPPED: "⏭  Skipped",
        }
    return labels.get(status, status.value)


def render_plain_report(
    translate: Callable[[str], str], lang: str, steps: Iterable[StepResult]
) -> str:
    """Return the summary as aligned plain text lines."""
    rows = [
        (translate(f"step_{s.name}"), _status_label(lang, s.status), s.detail)
        for s in steps
    ]
    header = (translate("col_step"), translate("col_status"), translate("col_detail"))
    widths = [
        max(len(r[i]) for r in [header, *rows]) for i in range(2)
    ]
    lines = [translate("summary_title")]
    for row in [header, *rows]:
        lines.append(
            f"{row[0].ljust(widths[0])}  {row[1].ljust(widths[1])}  {row[2]}".rstrip()
        )
    return "\n".join(lines)


def _render_report_table(
    translate: Callable[[str], str], lang: str, steps: Iterable[StepResult]
) -> Any:
    """Construct a Rich table summarising every step of a run.

    Parameters
    ----------
    translate : Callable[[str], str]
        Translation function for i18n keys.
    lang : str
        Language code used for the status labels.
    steps : Iterable[StepResult]
        Step results in execution order.

    Returns
    -------
    rich.table.Table
        Table with step, status and detail columns.
    """
    from devenv.setup.console_helpers import Table as _Table

    table = _Table(
        title=translate("summary_title"),
        show_header=True,
        header_style="bold blue",
    )
    table.add_column(translate("col_step"), style="bold")
    table.add_column(translate("col_status"))
    table.add_column(translate("col_detail"), overflow="fold")
    for step in steps:
        style = _STATUS_STYLE.get(step.status, "")
        table.add_row(
            translate(f"step_{step.name}"),
            f"[{style}]{_status_label(lang, step.status)}[/{style}]",
            escape(step.detail),
        )
    return table


__all__ = ["_render_report_table", "_status_label", "render_plain_report"]

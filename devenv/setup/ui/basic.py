"""Minimal UI output primitives for the console.

Rendering only: headers, rules and one-line status messages. Each
primitive emits Rich markup when styled output is enabled and plain text
otherwise.
"""

from __future__ import annotations

from devenv.setup.console_helpers import (
    _RICH_CONSOLE,
    Panel,
    Rule,
    rprint,
    ui_has_rich,
)


def ui_rule(title: str) -> None:
    r"""Start a new output section with a titled rule.

    Parameters
    ----------
    title : str
        Section name printed on the rule.
    """
    if ui_has_rich() and _RICH_CONSOLE:
        _RICH_CONSOLE.print(Rule(title, style="bold blue"))
    else:
        rprint("\n" + title)


def ui_header(title: str) -> None:
    r"""Print the run banner.

    Parameters
    ----------
    title : str
        Banner text, normally the localized welcome line.
    """
    if ui_has_rich() and _RICH_CONSOLE:
        _RICH_CONSOLE.print(
            Panel.fit(title, style="bold white on blue", border_style="blue")
        )
    else:
        rprint(title)


def ui_info(message: str) -> None:
    """Display an informational message (cyan)."""
    if ui_has_rich():
        rprint(f"[cyan]{message}[/cyan]")
    else:
        rprint(message)


def ui_success(message: str) -> None:
    """Display a success message with a check mark (green)."""
    if ui_has_rich():
        rprint(f"[green]✓ {message}[/green]")
    else:
        rprint(f"OK {message}")


def ui_already(message: str) -> None:
    """Display a step whose effect was already present (dim)."""
    if ui_has_rich():
        rprint(f"[dim]• {message}[/dim]")
    else:
        rprint(f"-- {message}")


def ui_warning(message: str) -> None:
    """Display a warning message (yellow)."""
    if ui_has_rich():
        rprint(f"[yellow]⚠ {message}[/yellow]")
    else:
        rprint(f"WARNING {message}")


def ui_error(message: str) -> None:
    r"""Display an error message.

    Outputs message in bold red with a cross via Rich, or plain text
    otherwise.

    Parameters
    ----------
    message : str
        Error text.
    """
    if ui_has_rich():
        rprint(f"[bold red]✗ {message}[/bold red]")
    else:
        rprint(f"ERROR {message}")


__all__ = [
    "ui_already",
    "ui_error",
    "ui_header",
    "ui_info",
    "ui_rule",
    "ui_success",
    "ui_warning",
]

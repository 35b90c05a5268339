"""Console UI primitives for the setup layer.

Re-exports the message helpers from :mod:`devenv.setup.ui.basic` so callers
can write ``from devenv.setup.ui import ui_info``.
"""

from __future__ import annotations

from devenv.setup.console_helpers import ui_has_rich

from .basic import (
    ui_already,
    ui_error,
    ui_header,
    ui_info,
    ui_rule,
    ui_success,
    ui_warning,
)

__all__ = [
    "ui_already",
    "ui_error",
    "ui_has_rich",
    "ui_header",
    "ui_info",
    "ui_rule",
    "ui_success",
    "ui_warning",
]

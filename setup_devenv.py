"""Minimal launcher for the provisioner.

Its single responsibility is to delegate to
:func:`devenv.setup.app_runner.entry_point` and turn the result into the
process exit code.

Usage:
    python setup_devenv.py [--lang en|sv] [--flavour ucrt64|mingw64]
                           [--fallback-manual] [--no-backup] [--dry-run]

"""

from __future__ import annotations

import sys


def entry_point(argv: list[str] | None = None) -> int:
    """Run the provisioner and return its exit code.

    The import is performed inside the function to avoid importing the
    whole application at module import time.
    """
    from devenv.setup.app_runner import entry_point as app_entry_point

    return app_entry_point(argv)


if __name__ == "__main__":
    sys.exit(entry_point())

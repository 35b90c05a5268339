"""Windows C/C++ development environment provisioner.

Installs Visual Studio Code, the MSYS2 toolchain with GCC and the Code
Runner extension, puts the compiler on the user PATH and adjusts the
editor settings. Every step is guarded so the tool can be re-run safely.

Package Structure
-----------------
- `provision/`:
    Headless steps: capability probes, persisted environment store and
    refresher, settings patcher, subprocess and download helpers, and the
    install-target table.
- `setup/`:
    Orchestration, console output (Rich), localisation and the CLI.
- `config.py`: Configuration constants, as UPPER_SNAKE_CASE.
- `exceptions.py`: Project-specific exception classes.

Examples
--------
>>> import devenv
>>> # Run through the launcher: python setup_devenv.py
"""

__version__ = "1.0.0"

"""Global configuration constants for the provisioner.

Defines package identifiers, download locations, well-known install paths,
editor settings and logging defaults used across the provisioning and
setup layers. Runtime overrides are resolved in
:mod:`devenv.provision.runtime`.
"""

from __future__ import annotations

from pathlib import Path

# Project directories
PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
PACKAGE_DIR: Path = PROJECT_ROOT / "devenv"
LOG_DIR: Path = PROJECT_ROOT / "logs"
ENV_FILE: Path = PROJECT_ROOT / ".env"

# System package manager (fast path)
WINGET_COMMAND: str = "winget"
WINGET_INSTALL_FLAGS: list[str] = [
    "--accept-source-agreements",
    "--accept-package-agreements",
    "--silent",
]
EDITOR_WINGET_ID: str = "Microsoft.VisualStudioCode"
TOOLCHAIN_WINGET_ID: str = "MSYS2.MSYS2"

# Editor (manual path)
EDITOR_COMMAND: str = "code"
EDITOR_INSTALLER_URL: str = (
    "https://code.visualstudio.com/sha/download?build=stable&os=win32-x64-user"
)
EDITOR_INSTALLER_FILENAME: str = "VSCodeUserSetup-x64.exe"
EDITOR_INSTALLER_ARGS: list[str] = [
    "/VERYSILENT",
    "/NORESTART",
    "/MERGETASKS=!runcode,addtopath",
]
# Relative to %LOCALAPPDATA% (user install) and %ProgramFiles% (system install)
EDITOR_USER_INSTALL_SUBDIR: Path = Path("Programs") / "Microsoft VS Code"
EDITOR_SYSTEM_INSTALL_SUBDIR: Path = Path("Microsoft VS Code")
EDITOR_EXECUTABLE: str = "Code.exe"

# Toolchain (manual path)
DEFAULT_MSYS2_ROOT: Path = Path("C:/msys64")
TOOLCHAIN_INSTALLER_URL: str = (
    "https://github.com/msys2/msys2-installer/releases/download/"
    "nightly-x86_64/msys2-x86_64-latest.exe"
)
TOOLCHAIN_INSTALLER_FILENAME: str = "msys2-x86_64-latest.exe"
TOOLCHAIN_SHELL_RELPATH: Path = Path("usr") / "bin" / "bash.exe"
TOOLCHAIN_COMPILER_EXECUTABLE: str = "gcc.exe"

# MSYS2 environments: name -> (compiler package, bin directory under root)
TOOLCHAIN_FLAVOURS: dict[str, tuple[str, str]] = {
    "ucrt64": ("mingw-w64-ucrt-x86_64-gcc", "ucrt64/bin"),
    "mingw64": ("mingw-w64-x86_64-gcc", "mingw64/bin"),
}
DEFAULT_TOOLCHAIN_FLAVOUR: str = "ucrt64"

# Seconds to wait after a fresh MSYS2 install before its shell is usable
DEFAULT_SETTLE_SECONDS: float = 10.0

# Downloads
DEFAULT_DOWNLOAD_TIMEOUT: float = 600.0
DOWNLOAD_CHUNK_SIZE: int = 1 << 16

# Editor extension and settings
CODE_RUNNER_EXTENSION_ID: str = "formulahendry.code-runner"
EDITOR_SETTINGS_SUBPATH: Path = Path("Code") / "User" / "settings.json"
FORCED_EDITOR_SETTINGS: dict[str, object] = {
    "code-runner.runInTerminal": True,
    "code-runner.saveFileBeforeRun": True,
    "code-runner.clearPreviousOutput": True,
}
SETTINGS_BACKUP_SUFFIX: str = ".bak"
SETTINGS_INDENT: int = 4

# Logging
LOG_FILENAME_PROVISION: str = "provision.log"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# UI defaults
LANG: str = "en"

"""Pytest configuration and shared fixtures.

- Forces ``DISABLE_FILE_LOGS=1`` to avoid writing log files during tests.
- Forces ``DEVENV_PLAIN_OUTPUT=1`` so console output is plain text.
- Ensures the project root is available on ``sys.path`` for imports.
- Provides a fake host that simulates winget, the vendor installers,
  pacman and the editor CLI without touching the machine.
"""

from __future__ import annotations

import os
import sys

os.environ.setdefault("DISABLE_FILE_LOGS", "1")  # Avoid creating log files during tests
os.environ.setdefault("DEVENV_PLAIN_OUTPUT", "1")
from pathlib import Path

import pytest

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from devenv.config import (  # noqa: E402
    EDITOR_INSTALLER_FILENAME,
    TOOLCHAIN_INSTALLER_FILENAME,
)
from devenv.provision.commands import CommandResult  # noqa: E402
from devenv.exceptions import DownloadError  # noqa: E402
from devenv.provision.environment import (  # noqa: E402
    MemoryEnvironmentStore,
    Scope,
    append_path_entry,
)
from devenv.provision.runtime import ProvisionConfig, ToolchainFlavour  # noqa: E402

SYSTEM32 = "C:\\Windows\\System32"
WINDOWS_APPS = "C:\\Users\\dev\\AppData\\Local\\Microsoft\\WindowsApps"
EDITOR_BIN = "C:\\Users\\dev\\AppData\\Local\\Programs\\Microsoft VS Code\\bin"


def classify(args: tuple[str, ...]) -> str:
    """Map a command line to a short key used by :class:`FakeHost`."""
    program = args[0].replace("\\", "/").rsplit("/", 1)[-1].lower()
    if program.startswith("winget") and "install" in args:
        return "winget:" + args[args.index("--id") + 1]
    if program == EDITOR_INSTALLER_FILENAME.lower():
        return "editor-installer"
    if program == TOOLCHAIN_INSTALLER_FILENAME.lower():
        return "toolchain-installer"
    if program == "bash.exe":
        return "pacman"
    if "--list-extensions" in args:
        return "list-extensions"
    if "--install-extension" in args:
        return "install-extension"
    return program


class FakeHost:
    """In-memory stand-in for :class:`devenv.provision.host.SystemHost`.

    Commands resolve through the process ``PATH`` in ``environ`` and the
    directory contents in ``bin_dirs``, so a command installed into a new
    PATH directory is only visible after the PATH has been refreshed.
    """

    SYSTEM32 = SYSTEM32
    WINDOWS_APPS = WINDOWS_APPS
    EDITOR_BIN = EDITOR_BIN

    def __init__(
        self,
        cfg: ProvisionConfig,
        *,
        winget: bool = True,
        dry_run: bool = False,
    ) -> None:
        self.cfg = cfg
        self.dry_run = dry_run
        self.files: set[str] = set()
        self.bin_dirs: dict[str, set[str]] = {SYSTEM32: {"cmd"}}
        if winget:
            self.bin_dirs[WINDOWS_APPS] = {"winget"}
        self.store = MemoryEnvironmentStore(machine=SYSTEM32, user=WINDOWS_APPS)
        self.environ: dict[str, str] = {"PATH": f"{SYSTEM32};{WINDOWS_APPS}"}
        self.extensions: set[str] = set()
        self.failing: set[str] = set()
        self.calls: list[tuple[str, ...]] = []
        self.downloads: list[tuple[str, Path]] = []
        self.sleeps: list[float] = []

    # -- host contract -------------------------------------------------
    def which(self, name: str) -> str | None:
        for directory in self.environ.get("PATH", "").split(";"):
            if name in self.bin_dirs.get(directory, ()):
                return f"{directory}\\{name}.cmd"
        return None

    def has_command(self, name: str) -> bool:
        return self.which(name) is not None

    def exists(self, path) -> bool:
        return Path(path).as_posix() in self.files

    def run(self, argv) -> CommandResult:
        args = tuple(str(a) for a in argv)
        self.calls.append(args)
        key = classify(args)
        if key in self.failing:
            return CommandResult(args, 1, "", f"{key} failed")
        stdout = ""
        if key in ("winget:Microsoft.VisualStudioCode", "editor-installer"):
            self.install_editor()
        elif key in ("winget:MSYS2.MSYS2", "toolchain-installer"):
            self.install_toolchain()
        elif key == "pacman":
            self.add_file(self.cfg.compiler_executable)
        elif key == "list-extensions":
            stdout = "\n".join(sorted(self.extensions)) + "\n"
        elif key == "install-extension":
            self.extensions.add(args[-1])
        return CommandResult(args, 0, stdout, "")

    def download(self, url: str, dest: Path, *, timeout: float = 0) -> Path:
        self.downloads.append((url, Path(dest)))
        if "download" in self.failing:
            raise DownloadError(f"cannot fetch {url}")
        return Path(dest)

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)

    # -- simulation helpers --------------------------------------------
    def add_file(self, path) -> None:
        self.files.add(Path(path).as_posix())

    def install_editor(self) -> None:
        self.add_file(self.cfg.editor_user_executable)
        self.bin_dirs[EDITOR_BIN] = {"code"}
        # The editor installer's "addtopath" task persists its bin directory.
        append_path_entry(self.store, EDITOR_BIN, Scope.USER)

    def install_toolchain(self) -> None:
        self.add_file(self.cfg.toolchain_shell)

    def keys(self) -> list[str]:
        return [classify(args) for args in self.calls]


def make_config(tmp_path: Path, flavour: str = "ucrt64") -> ProvisionConfig:
    return ProvisionConfig(
        msys2_root=Path("C:/msys64"),
        local_appdata=Path("C:/Users/dev/AppData/Local"),
        program_files=Path("C:/Program Files"),
        settings_path=tmp_path / "Code" / "User" / "settings.json",
        download_dir=tmp_path / "downloads",
        flavour=ToolchainFlavour.named(flavour),
        settle_seconds=10.0,
    )


@pytest.fixture
def cfg(tmp_path: Path) -> ProvisionConfig:
    return make_config(tmp_path)


@pytest.fixture
def host(cfg: ProvisionConfig) -> FakeHost:
    return FakeHost(cfg)


@pytest.fixture
def make_host(cfg: ProvisionConfig):
    """Factory fixture: ``make_host(winget=False)`` builds a fresh FakeHost."""

    def _make(**kwargs) -> FakeHost:
        return FakeHost(cfg, **kwargs)

    return _make

"""Runtime configuration for a provisioning run.

Resolves the per-user locations (editor install directory, settings file,
temporary download directory) and the tunables that may be overridden via
environment variables or a project ``.env`` file.

Examples
--------
>>> from devenv.provision.runtime import ProvisionConfig
>>> cfg = ProvisionConfig.from_env({"LOCALAPPDATA": "C:/Users/me/AppData/Local"})
>>> cfg.flavour.name
'ucrt64'
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

import devenv.config as _project_config
from devenv.config import (
    DEFAULT_DOWNLOAD_TIMEOUT,
    DEFAULT_MSYS2_ROOT,
    DEFAULT_SETTLE_SECONDS,
    DEFAULT_TOOLCHAIN_FLAVOUR,
    EDITOR_EXECUTABLE,
    EDITOR_SETTINGS_SUBPATH,
    EDITOR_SYSTEM_INSTALL_SUBDIR,
    EDITOR_USER_INSTALL_SUBDIR,
    FORCED_EDITOR_SETTINGS,
    TOOLCHAIN_COMPILER_EXECUTABLE,
    TOOLCHAIN_FLAVOURS,
    TOOLCHAIN_SHELL_RELPATH,
)
from devenv.exceptions import ConfigurationError


@dataclass(frozen=True)
class ToolchainFlavour:
    """An MSYS2 environment whose GCC gets installed and put on PATH."""

    name: str
    compiler_package: str
    bin_subdir: str

    @classmethod
    def named(cls, name: str) -> "ToolchainFlavour":
        """Return the flavour registered under ``name``.

        Raises
        ------
        ConfigurationError
            If ``name`` is not one of :data:`devenv.config.TOOLCHAIN_FLAVOURS`.
        """
        key = (name or "").strip().lower()
        try:
            package, bin_subdir = TOOLCHAIN_FLAVOURS[key]
        except KeyError:
            raise ConfigurationError(
                f"Unknown toolchain flavour '{name}'",
                context={"known": sorted(TOOLCHAIN_FLAVOURS)},
            ) from None
        return cls(key, package, bin_subdir)


def _float_setting(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(
            f"{key} must be a number", context={key: raw}
        ) from None
    if value < 0:
        raise ConfigurationError(f"{key} must not be negative", context={key: raw})
    return value


@dataclass
class ProvisionConfig:
    r"""Resolved settings for one provisioning run.

    Attributes
    ----------
    msys2_root : Path
        MSYS2 installation root (``C:\msys64`` by default).
    local_appdata : Path
        ``%LOCALAPPDATA%``; the editor's per-user install lives below it.
    program_files : Path
        ``%ProgramFiles%``; checked for a machine-wide editor install.
    settings_path : Path
        Editor user ``settings.json``.
    download_dir : Path
        Directory where installer artifacts are downloaded.
    flavour : ToolchainFlavour
        MSYS2 environment to provision.
    settle_seconds : float
        Delay before invoking the MSYS2 shell after a fresh install.
    download_timeout : float
        Total timeout for a single installer download.
    forced_settings : dict[str, object]
        Editor settings forced to specific values.
    """

    msys2_root: Path
    local_appdata: Path
    program_files: Path
    settings_path: Path
    download_dir: Path
    flavour: ToolchainFlavour
    settle_seconds: float = DEFAULT_SETTLE_SECONDS
    download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT
    forced_settings: dict[str, object] = field(
        default_factory=lambda: dict(FORCED_EDITOR_SETTINGS)
    )

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        flavour: str | None = None,
        load_env_file: bool = False,
    ) -> "ProvisionConfig":
        """Build a configuration from environment variables.

        Parameters
        ----------
        environ : Mapping[str, str] | None
            Variables to read. Defaults to :data:`os.environ`.
        flavour : str | None
            Explicit flavour name; takes precedence over ``DEVENV_FLAVOUR``.
        load_env_file : bool
            When True, load the project ``.env`` into :data:`os.environ`
            first (existing variables win).

        Raises
        ------
        ConfigurationError
            For an unknown flavour or a malformed numeric override.
        """
        if load_env_file:
            env_path = Path(_project_config.ENV_FILE)
            if env_path.exists():
                load_dotenv(env_path, override=False)
        env = dict(os.environ if environ is None else environ)

        home = Path.home()
        local_appdata = Path(
            env.get("LOCALAPPDATA") or home / "AppData" / "Local"
        )
        appdata = Path(env.get("APPDATA") or home / "AppData" / "Roaming")
        program_files = Path(env.get("ProgramFiles") or "C:/Program Files")

        settings_override = env.get("DEVENV_SETTINGS_PATH")
        settings_path = (
            Path(settings_override)
            if settings_override
            else appdata / EDITOR_SETTINGS_SUBPATH
        )
        root_override = env.get("DEVENV_MSYS2_ROOT")
        msys2_root = Path(root_override) if root_override else DEFAULT_MSYS2_ROOT
        download_dir = Path(env.get("TEMP") or tempfile.gettempdir())

        return cls(
            msys2_root=msys2_root,
            local_appdata=local_appdata,
            program_files=program_files,
            settings_path=settings_path,
            download_dir=download_dir,
            flavour=ToolchainFlavour.named(
                flavour or env.get("DEVENV_FLAVOUR") or DEFAULT_TOOLCHAIN_FLAVOUR
            ),
            settle_seconds=_float_setting(
                env, "DEVENV_SETTLE_SECONDS", DEFAULT_SETTLE_SECONDS
            ),
            download_timeout=_float_setting(
                env, "DEVENV_DOWNLOAD_TIMEOUT", DEFAULT_DOWNLOAD_TIMEOUT
            ),
        )

    @property
    def editor_user_executable(self) -> Path:
        return self.local_appdata / EDITOR_USER_INSTALL_SUBDIR / EDITOR_EXECUTABLE

    @property
    def editor_system_executable(self) -> Path:
        return self.program_files / EDITOR_SYSTEM_INSTALL_SUBDIR / EDITOR_EXECUTABLE

    @property
    def toolchain_shell(self) -> Path:
        return self.msys2_root / TOOLCHAIN_SHELL_RELPATH

    @property
    def toolchain_bin_dir(self) -> Path:
        return self.msys2_root / Path(self.flavour.bin_subdir)

    @property
    def compiler_executable(self) -> Path:
        return self.toolchain_bin_dir / TOOLCHAIN_COMPILER_EXECUTABLE

    def path_entry(self) -> str:
        r"""Return the PATH entry for the flavour's bin directory.

        Uses backslashes so the stored value reads like the other entries in
        a Windows PATH (``C:\msys64\ucrt64\bin``).
        """
        return str(self.toolchain_bin_dir).replace("/", "\\")

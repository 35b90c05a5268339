"""Headless provisioning layer.

Capability probes, the persisted-environment store and refresher, the
settings patcher, subprocess/download helpers and the guarded install
steps. Nothing in this package prints to the console; the
:mod:`devenv.setup` layer renders results.

Examples
--------
>>> from devenv.provision import ProvisionConfig, ensure_installed
"""

from __future__ import annotations

from .runtime import ProvisionConfig, ToolchainFlavour
from .targets import (
    InstallTarget,
    ProvisionReport,
    StepResult,
    StepStatus,
    ensure_installed,
)

__all__ = [
    "InstallTarget",
    "ProvisionConfig",
    "ProvisionReport",
    "StepResult",
    "StepStatus",
    "ToolchainFlavour",
    "ensure_installed",
]

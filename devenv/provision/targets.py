"""Install targets, step outcomes and the generic guarded install routine.

Each install target pairs a pure detection probe with the actions that
make it true. :func:`ensure_installed` runs the state machine
``absent -> installing -> installed | failed`` for one target and returns a
:class:`StepResult`; results are collected in a :class:`ProvisionReport`.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from devenv.exceptions import AppError

logger = logging.getLogger(__name__)


class StepStatus(str, enum.Enum):
    ALREADY = "already"
    DONE = "done"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one provisioning step."""

    name: str
    status: StepStatus
    detail: str = ""

    @property
    def failed(self) -> bool:
        return self.status is StepStatus.FAILED


@dataclass
class ProvisionReport:
    """Ordered collection of step results for one run."""

    steps: list[StepResult] = field(default_factory=list)
    fast_path: bool = False

    def add(self, result: StepResult) -> StepResult:
        self.steps.append(result)
        return result

    def __iter__(self) -> Iterator[StepResult]:
        return iter(self.steps)

    def get(self, name: str) -> StepResult | None:
        for step in self.steps:
            if step.name == name:
                return step
        return None

    @property
    def ok(self) -> bool:
        return not any(step.failed for step in self.steps)

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


@dataclass
class InstallTarget:
    """Descriptor for one installable artifact.

    Attributes
    ----------
    name : str
        Step name shown in the report (``"editor"``, ``"toolchain"``).
    detect : Callable[[], bool]
        Pure probe; True when the artifact is already present.
    manual_install : Callable[[], None]
        Direct download + silent install. Raises :class:`AppError` on
        failure.
    fast_install : Callable[[], None] | None
        System package manager install, when one exists for the target.
    path_entry : str | None
        Directory added to the user PATH after installation, if any.
    manual_route : str
        How ``manual_install`` installs, as shown in step details.
    """

    name: str
    detect: Callable[[], bool]
    manual_install: Callable[[], None]
    fast_install: Callable[[], None] | None = None
    path_entry: str | None = None
    manual_route: str = "manual installer"

    def is_present(self) -> bool:
        try:
            return bool(self.detect())
        except Exception as err:
            logger.debug("Detection for %s raised %s; treating as absent", self.name, err)
            return False


def ensure_installed(
    target: InstallTarget,
    *,
    fast: bool,
    fallback_manual: bool = False,
    verify: bool = True,
) -> StepResult:
    """Install ``target`` unless its guard reports it present.

    Parameters
    ----------
    target : InstallTarget
        Target to provision.
    fast : bool
        Use the system package manager action when the target has one.
    fallback_manual : bool, optional
        After a failed fast install, retry once through the manual action
        if the target is still absent.
    verify : bool, optional
        Re-run the guard after a successful action and report ``failed``
        if the artifact still cannot be found. Disabled for dry runs.

    Returns
    -------
    StepResult
        ``already`` when the guard was true, ``done`` when the action
        succeeded (and verified), ``failed`` otherwise.
    """
    if target.is_present():
        logger.info("%s already installed", target.name)
        return StepResult(target.name, StepStatus.ALREADY)

    use_fast = fast and target.fast_install is not None
    action = target.fast_install if use_fast else target.manual_install
    route = "package manager" if use_fast else target.manual_route
    logger.info("Installing %s via %s", target.name, route)
    try:
        action()
    except AppError as err:
        logger.error("Installing %s via %s failed: %s", target.name, route, err)
        failure = err.message
    else:
        if not verify or target.is_present():
            return StepResult(target.name, StepStatus.DONE, f"installed via {route}")
        failure = f"{target.name} not found after install via {route}"
        logger.error(failure)

    if use_fast and fallback_manual and not target.is_present():
        logger.info("Falling back to manual installer for %s", target.name)
        return ensure_installed(target, fast=False, verify=verify)
    return StepResult(target.name, StepStatus.FAILED, failure)


__all__ = [
    "InstallTarget",
    "ProvisionReport",
    "StepResult",
    "StepStatus",
    "ensure_installed",
]

"""Tests for `devenv/setup/orchestrator.py`.

End-to-end provisioning scenarios against the fake host from conftest.
"""

import json

import pytest

import devenv.setup.i18n as i18n
import devenv.setup.orchestrator as orch
from devenv.provision.environment import MemoryEnvironmentStore, Scope
from devenv.provision.host import SystemHost
from devenv.provision.targets import StepStatus

STEP_ORDER = ["editor", "toolchain", "compiler", "path", "extension", "settings"]
FORCED = {
    "code-runner.runInTerminal": True,
    "code-runner.saveFileBeforeRun": True,
    "code-runner.clearPreviousOutput": True,
}


@pytest.fixture(autouse=True)
def _english(monkeypatch):
    monkeypatch.setattr(i18n, "LANG", "en")


def _statuses(report):
    return {step.name: step.status for step in report}


def test_fast_path_from_scratch(cfg, host, capsys):
    report = orch.run_provisioning(cfg, host)

    assert report.fast_path is True
    assert [s.name for s in report] == STEP_ORDER
    assert all(s.status is StepStatus.DONE for s in report), report.steps
    assert report.exit_code == 0
    assert host.keys() == [
        "winget:Microsoft.VisualStudioCode",
        "winget:MSYS2.MSYS2",
        "pacman",
        "list-extensions",
        "install-extension",
    ]
    assert host.downloads == []
    assert host.sleeps == [10.0]
    user_path = host.store.read(Scope.USER)
    assert user_path.count(host.EDITOR_BIN) == 1
    assert user_path.endswith(";C:\\msys64\\ucrt64\\bin")
    assert "formulahendry.code-runner" in host.extensions
    assert json.loads(cfg.settings_path.read_text(encoding="utf-8")) == FORCED

    out = capsys.readouterr().out
    assert "Provisioning summary" in out
    assert "Setup complete." in out


def test_second_run_is_idempotent(cfg, host):
    orch.run_provisioning(cfg, host)
    writes = list(host.store.writes)
    settings_text = cfg.settings_path.read_text(encoding="utf-8")
    host.calls.clear()

    report = orch.run_provisioning(cfg, host)

    assert all(s.status is StepStatus.ALREADY for s in report), report.steps
    assert host.keys() == ["list-extensions"]
    assert host.store.writes == writes
    assert host.sleeps == [10.0]
    assert cfg.settings_path.read_text(encoding="utf-8") == settings_text


def test_probe_false_forces_manual_path(cfg, make_host):
    host = make_host(winget=False)
    report = orch.run_provisioning(cfg, host)

    assert report.fast_path is False
    assert report.ok
    keys = host.keys()
    assert not any(k.startswith("winget:") for k in keys)
    assert keys[:3] == ["editor-installer", "toolchain-installer", "pacman"]
    assert [d[1].name for d in host.downloads] == [
        "VSCodeUserSetup-x64.exe",
        "msys2-x86_64-latest.exe",
    ]
    assert host.sleeps == [10.0]


def test_manual_path_with_everything_installed(cfg, make_host):
    host = make_host(winget=False)
    host.install_editor()
    host.install_toolchain()
    host.add_file(cfg.compiler_executable)

    report = orch.run_provisioning(cfg, host)

    statuses = _statuses(report)
    assert statuses["editor"] is StepStatus.ALREADY
    assert statuses["toolchain"] is StepStatus.ALREADY
    assert statuses["compiler"] is StepStatus.ALREADY
    assert host.downloads == []
    assert host.sleeps == []
    assert "pacman" not in host.keys()


def test_failure_does_not_stop_later_steps(cfg, host, capsys):
    host.failing.add("winget:MSYS2.MSYS2")
    report = orch.run_provisioning(cfg, host)

    statuses = _statuses(report)
    assert statuses["toolchain"] is StepStatus.FAILED
    assert statuses["compiler"] is StepStatus.SKIPPED
    assert statuses["extension"] is StepStatus.DONE
    assert statuses["settings"] is StepStatus.DONE
    assert report.exit_code == 1
    assert host.sleeps == []
    assert "pacman" not in host.keys()
    assert "Setup finished with errors." in capsys.readouterr().out


def test_fallback_manual_rescues_failed_fast_install(cfg, host):
    host.failing.add("winget:MSYS2.MSYS2")
    report = orch.run_provisioning(cfg, host, fallback_manual=True)

    assert report.ok
    assert _statuses(report)["toolchain"] is StepStatus.DONE
    assert "toolchain-installer" in host.keys()
    assert host.sleeps == [10.0]


def test_extension_fails_when_editor_missing(cfg, host):
    host.failing.add("winget:Microsoft.VisualStudioCode")
    report = orch.run_provisioning(cfg, host)

    statuses = _statuses(report)
    assert statuses["editor"] is StepStatus.FAILED
    assert statuses["extension"] is StepStatus.FAILED
    assert statuses["settings"] is StepStatus.DONE
    assert not report.ok


def test_path_refreshed_before_extension_step(cfg, host):
    """The editor CLI only resolves after the persisted PATH was reloaded."""
    orch.run_provisioning(cfg, host)
    assert host.EDITOR_BIN in host.environ["PATH"].split(";")
    assert "install-extension" in host.keys()


def test_dry_run_writes_nothing(cfg, tmp_path, monkeypatch):
    environ = {"PATH": str(tmp_path / "empty")}
    store = MemoryEnvironmentStore(machine=environ["PATH"])
    host = SystemHost(store, environ, dry_run=True)
    monkeypatch.setattr(
        "devenv.provision.host.time.sleep",
        lambda s: pytest.fail("dry run must not sleep"),
    )

    report = orch.run_provisioning(cfg, host)

    assert report.ok
    assert _statuses(report)["extension"] is StepStatus.SKIPPED
    assert not cfg.settings_path.exists()
    assert not cfg.download_dir.exists()
    assert [scope for scope, _ in store.writes] == [Scope.USER]


def test_summary_plain_output_lists_every_step(cfg, host, capsys):
    orch.run_provisioning(cfg, host)
    out = capsys.readouterr().out
    for label in ("Visual Studio Code", "MSYS2", "GCC / G++", "Code Runner extension"):
        assert label in out
    assert "✅ Done" in out


def test_compiler_detail_names_pacman(cfg, host):
    report = orch.run_provisioning(cfg, host)
    assert report.get("compiler").detail == "installed via pacman"
    assert report.get("editor").detail == "installed via package manager"


def test_second_run_lines_use_neutral_wording(cfg, host, capsys):
    orch.run_provisioning(cfg, host)
    capsys.readouterr()
    orch.run_provisioning(cfg, host)
    out = capsys.readouterr().out
    assert "-- PATH entry: already satisfied" in out
    assert "-- Editor settings: already satisfied" in out


def test_winget_lookup_goes_through_command_exists(cfg, tmp_path, monkeypatch):
    looked_up = []

    def fake_exists(name, path=None):
        looked_up.append(name)
        return False

    monkeypatch.setattr("devenv.provision.probe.command_exists", fake_exists)
    environ = {"PATH": str(tmp_path / "empty")}
    store = MemoryEnvironmentStore(machine=environ["PATH"])
    host = SystemHost(store, environ, dry_run=True)
    report = orch.run_provisioning(cfg, host)
    assert looked_up[0] == "winget"
    assert report.fast_path is False

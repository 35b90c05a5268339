"""Tests for `devenv/provision/installers.py` against the fake host."""

import json

import pytest

import devenv.provision.installers as ins
from devenv.exceptions import ConfigurationError
from devenv.provision.environment import Scope
from devenv.provision.targets import StepStatus, ensure_installed


def test_winget_install_command_line(host):
    ins.winget_install(host, "Microsoft.VisualStudioCode")
    args = host.calls[-1]
    assert args[0].endswith("winget.cmd")
    assert args[1:] == (
        "install",
        "-e",
        "--id",
        "Microsoft.VisualStudioCode",
        "--accept-source-agreements",
        "--accept-package-agreements",
        "--silent",
    )


def test_editor_present_checks_install_dirs_and_path(cfg, host):
    assert ins.editor_present(cfg, host) is False
    host.add_file(cfg.editor_system_executable)
    assert ins.editor_present(cfg, host) is True

    other = type(host)(cfg)
    other.bin_dirs[other.SYSTEM32].add("code")
    assert ins.editor_present(cfg, other) is True


def test_manual_editor_install_downloads_then_runs(cfg, make_host):
    host = make_host(winget=False)
    ins.install_editor_manually(cfg, host)
    url, dest = host.downloads[0]
    assert dest == cfg.download_dir / "VSCodeUserSetup-x64.exe"
    assert host.calls[0] == (
        str(dest),
        "/VERYSILENT",
        "/NORESTART",
        "/MERGETASKS=!runcode,addtopath",
    )


def test_manual_toolchain_install_arguments(cfg, make_host):
    host = make_host(winget=False)
    ins.install_toolchain_manually(cfg, host)
    assert host.calls[0][1:] == (
        "install",
        "--root",
        str(cfg.msys2_root),
        "--confirm-command",
        "--accept-messages",
    )
    assert host.exists(cfg.toolchain_shell)


def test_install_compiler_runs_pacman_in_login_shell(cfg, host):
    host.add_file(cfg.toolchain_shell)
    ins.install_compiler(cfg, host)
    assert host.calls[0] == (
        str(cfg.toolchain_shell),
        "-lc",
        "pacman -S --needed --noconfirm mingw-w64-ucrt-x86_64-gcc",
    )


def test_install_compiler_requires_shell(cfg, host):
    with pytest.raises(ConfigurationError):
        ins.install_compiler(cfg, host)
    assert host.calls == []


def test_compiler_target_guard_and_path_entry(cfg, host):
    target = ins.compiler_target(cfg, host)
    assert target.path_entry == "C:\\msys64\\ucrt64\\bin"
    host.add_file(cfg.compiler_executable)
    assert ensure_installed(target, fast=True).status is StepStatus.ALREADY
    assert host.calls == []


def test_install_targets_probe_false_uses_manual_for_both(cfg, make_host):
    host = make_host(winget=False)
    results = [
        ensure_installed(t, fast=False) for t in ins.build_install_targets(cfg, host)
    ]
    assert [r.status for r in results] == [StepStatus.DONE, StepStatus.DONE]
    assert host.keys() == ["editor-installer", "toolchain-installer"]
    assert len(host.downloads) == 2


def test_ensure_path_entry_appends_once(host):
    entry = "C:\\msys64\\ucrt64\\bin"
    first = ins.ensure_path_entry(host, entry)
    second = ins.ensure_path_entry(host, entry)
    assert first.status is StepStatus.DONE
    assert second.status is StepStatus.ALREADY
    assert host.store.read(Scope.USER).count(entry) == 1
    assert len(host.store.writes) == 1


def test_ensure_path_entry_write_failure(host, monkeypatch):
    def boom(scope, value):
        raise PermissionError("registry locked")

    monkeypatch.setattr(host.store, "write", boom)
    result = ins.ensure_path_entry(host, "C:\\new")
    assert result.failed
    assert "registry locked" in result.detail


def test_ensure_extension_missing_editor(host):
    result = ins.ensure_extension(host)
    assert result.status is StepStatus.FAILED
    assert "'code'" in result.detail


def test_ensure_extension_missing_editor_in_dry_run(make_host):
    host = make_host(dry_run=True)
    assert ins.ensure_extension(host).status is StepStatus.SKIPPED


def test_ensure_extension_installs_then_reports_already(host):
    host.bin_dirs[host.SYSTEM32].add("code")
    assert ins.ensure_extension(host).status is StepStatus.DONE
    assert ins.ensure_extension(host).status is StepStatus.ALREADY
    assert host.keys().count("install-extension") == 1
    assert "formulahendry.code-runner" in host.extensions


def test_ensure_extension_listing_is_case_insensitive(host):
    host.bin_dirs[host.SYSTEM32].add("code")
    host.extensions.add("FormulaHendry.Code-Runner")
    assert ins.ensure_extension(host).status is StepStatus.ALREADY


def test_ensure_extension_install_failure(host):
    host.bin_dirs[host.SYSTEM32].add("code")
    host.failing.add("install-extension")
    result = ins.ensure_extension(host)
    assert result.failed
    assert "exit code 1" in result.detail


def test_ensure_extension_listing_failure(host):
    host.bin_dirs[host.SYSTEM32].add("code")
    host.failing.add("list-extensions")
    assert ins.ensure_extension(host).failed
    assert "install-extension" not in host.keys()


def test_ensure_settings_writes_forced_keys_then_already(cfg):
    first = ins.ensure_settings(cfg)
    assert first.status is StepStatus.DONE
    assert json.loads(cfg.settings_path.read_text(encoding="utf-8")) == {
        "code-runner.runInTerminal": True,
        "code-runner.saveFileBeforeRun": True,
        "code-runner.clearPreviousOutput": True,
    }
    assert ins.ensure_settings(cfg).status is StepStatus.ALREADY


def test_ensure_settings_reports_backup(cfg):
    cfg.settings_path.parent.mkdir(parents=True)
    cfg.settings_path.write_text("{broken", encoding="utf-8")
    result = ins.ensure_settings(cfg)
    assert result.status is StepStatus.DONE
    assert "previous file saved to" in result.detail


def test_ensure_settings_dry_run_leaves_disk_alone(cfg):
    result = ins.ensure_settings(cfg, dry_run=True)
    assert result.status is StepStatus.DONE
    assert not cfg.settings_path.exists()


def test_ensure_settings_recovers_from_utf16_file(cfg):
    cfg.settings_path.parent.mkdir(parents=True)
    cfg.settings_path.write_bytes(b"\xff\xfe{\x00}\x00")
    result = ins.ensure_settings(cfg)
    assert result.status is StepStatus.DONE
    assert "previous file saved to" in result.detail
    assert json.loads(cfg.settings_path.read_text(encoding="utf-8")) == (
        cfg.forced_settings
    )

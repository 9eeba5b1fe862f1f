import subprocess
import sys
from types import SimpleNamespace

import pytest

from themecrate.core import privilege
from themecrate.core.privilege import (ElevationError, elevated_command,
                                       elevation_prefix, get_configured_backend,
                                       relaunch_elevated)


@pytest.fixture
def backend_setting(monkeypatch):
    def apply(value: str) -> None:
        monkeypatch.setattr(privilege, "get_config", lambda: SimpleNamespace(privilege_backend=value))
    return apply


@pytest.fixture
def not_root(monkeypatch) -> None:
    monkeypatch.setattr(privilege, "is_elevated", lambda: False)


def test_configured_backend(backend_setting) -> None:
    backend_setting("Doas")
    assert get_configured_backend() == "doas"

    backend_setting("none")
    assert get_configured_backend() is None


def test_auto_and_invalid_backends_are_detected(backend_setting, monkeypatch) -> None:
    monkeypatch.setattr(privilege.shutil, "which", lambda cmd: "/usr/bin/sudo" if cmd == "sudo" else None)

    backend_setting("auto")
    assert get_configured_backend() == "sudo"

    backend_setting("su")
    assert get_configured_backend() == "sudo"


def test_elevation_prefix_defaults_to_sudo(backend_setting) -> None:
    backend_setting("none")
    assert elevation_prefix() == "sudo"

    backend_setting("pkexec")
    assert elevation_prefix() == "pkexec"


def test_elevated_command_reuses_arguments() -> None:
    assert elevated_command(["-o", "/tmp"], "doas") == [
        "doas", sys.executable, "-m", "themecrate", "-o", "/tmp"
    ]


def test_relaunch_refused_when_already_root(monkeypatch) -> None:
    monkeypatch.setattr(privilege, "is_elevated", lambda: True)

    with pytest.raises(ElevationError, match="already running"):
        relaunch_elevated([], "sudo")


def test_relaunch_without_backend(not_root, backend_setting) -> None:
    backend_setting("none")

    with pytest.raises(ElevationError, match="no privilege escalation backend"):
        relaunch_elevated([])


def test_relaunch_returns_child_exit_code(not_root, monkeypatch) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 3)

    monkeypatch.setattr(privilege.subprocess, "run", fake_run)

    assert relaunch_elevated(["-v"], "pkexec") == 3
    assert calls == [["pkexec", sys.executable, "-m", "themecrate", "-v"]]


def test_relaunch_spawn_failure(not_root, monkeypatch) -> None:
    def missing(cmd):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr(privilege.subprocess, "run", missing)

    with pytest.raises(ElevationError, match="could not start sudo"):
        relaunch_elevated([], "sudo")
